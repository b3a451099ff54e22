from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from shared.errors import register_error_handlers
from shared.security import limiter
from .router import router

storefront_app = FastAPI(
    title="Storefront Service",
    version="1.0.0"
)

register_error_handlers(storefront_app)

# --- SECURITY SETUP ---
storefront_app.state.limiter = limiter
storefront_app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

storefront_app.include_router(router)
