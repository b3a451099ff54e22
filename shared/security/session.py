"""
Explicit console session.

The role comes from the backend's login answer and travels inside a
gateway-signed token; nothing is inferred from which credential happens to
be present.
"""
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from .jwt_handler import create_access_token, verify_access_token


class ActorRole(str, Enum):
    ADMIN = "admin"
    COURIER = "courier"


@dataclass(frozen=True)
class Session:
    user_id: str
    role: ActorRole
    upstream_token: str


def create_session_token(session: Session, expires_delta: timedelta = None) -> str:
    return create_access_token(
        {"sub": session.user_id, "role": session.role.value, "tok": session.upstream_token},
        expires_delta=expires_delta,
    )


def session_from_token(token: str) -> Session | None:
    payload = verify_access_token(token)
    if payload is None:
        return None
    try:
        role = ActorRole(payload.get("role"))
    except ValueError:
        return None
    user_id = payload.get("sub")
    if user_id is None:
        return None
    return Session(user_id=str(user_id), role=role, upstream_token=payload.get("tok") or "")
