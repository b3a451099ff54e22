from fastapi import APIRouter, Depends

from shared.clients.dependencies import get_public_api_client
from shared.clients.upstream import ApiClient
from shared.security import Session, get_current_session

from .schemas import SessionResponse, TokenResponse, UserLogin
from .service import AuthService

router = APIRouter(tags=["Authentication"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "auth", "status": "running"}


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate against the backend and receive a session token",
)
async def login(payload: UserLogin, api: ApiClient = Depends(get_public_api_client)):
    return await AuthService.login(api, payload)


@router.get(
    "/me",
    response_model=SessionResponse,
    summary="Who the current session belongs to and which role it carries",
)
async def get_me(session: Session = Depends(get_current_session)):
    return SessionResponse(user_id=session.user_id, role=session.role)
