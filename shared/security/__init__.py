from .jwt_handler import create_access_token, verify_access_token
from .session import ActorRole, Session, create_session_token, session_from_token
from .dependencies import get_current_session, require_roles
from .rate_limiter import limiter, user_id_or_ip

__all__ = [
    "create_access_token",
    "verify_access_token",
    "ActorRole",
    "Session",
    "create_session_token",
    "session_from_token",
    "get_current_session",
    "require_roles",
    "limiter",
    "user_id_or_ip"
]
