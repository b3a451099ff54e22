from fastapi import FastAPI
from shared.errors import register_error_handlers
from .router import router, public_router

courier_app = FastAPI(title="Courier Service", version="1.0.0")

register_error_handlers(courier_app)

courier_app.include_router(public_router)
courier_app.include_router(router)
