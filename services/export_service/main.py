from fastapi import FastAPI
from shared.errors import register_error_handlers
from .router import router, public_router

export_app = FastAPI(title="Export Service", version="1.0.0")

register_error_handlers(export_app)

export_app.include_router(public_router)
export_app.include_router(router)
