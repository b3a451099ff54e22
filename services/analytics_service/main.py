from fastapi import FastAPI
from shared.errors import register_error_handlers
from .router import router, public_router

analytics_app = FastAPI(title="Analytics Service", version="1.0.0")

register_error_handlers(analytics_app)

analytics_app.include_router(public_router)
analytics_app.include_router(router)
