from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from .session import ActorRole, Session, session_from_token

# Defines the expected header format (Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

async def get_current_session(request: Request, token: str = Depends(oauth2_scheme)) -> Session:
    """Dependency to validate the session JWT and return the console session."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    session = session_from_token(token)
    if session is None:
        raise credentials_exception

    # Store in request state for downstream use (like rate limiting)
    request.state.user_id = session.user_id
    return session

def require_roles(*roles: ActorRole):
    """Dependency factory: only sessions holding one of `roles` get through."""
    allowed = set(roles)

    async def checker(session: Session = Depends(get_current_session)) -> Session:
        if session.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{session.role.value}' may not perform this action",
            )
        return session

    return checker
