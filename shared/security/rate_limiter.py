from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from shared.config import settings
from .session import session_from_token

def user_id_or_ip(request: Request) -> str:
    """
    Key function for SlowAPI.
    Uses the session's user ID when a valid bearer token is present.
    Falls back to the client's IP address for anonymous storefront visitors.
    """
    auth_header = request.headers.get("Authorization")

    if auth_header and auth_header.startswith("Bearer "):
        session = session_from_token(auth_header.split(" ", 1)[1])
        if session is not None:
            return f"user:{session.user_id}"

    return f"ip:{get_remote_address(request)}"

limiter = Limiter(key_func=user_id_or_ip, enabled=settings.RATE_LIMIT_ENABLED)
