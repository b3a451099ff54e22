from fastapi import FastAPI

from shared.errors import register_error_handlers

from .router import router, public_router

auth_app = FastAPI(
    title="Auth Service",
    version="2.0.0",
    description="Back-office login: the backend authenticates, the gateway issues the session.",
)

register_error_handlers(auth_app)

auth_app.include_router(router)
auth_app.include_router(public_router)
