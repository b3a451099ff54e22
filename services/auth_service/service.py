"""
Login is delegated to the backend. Its answer, not anything stored on the
client, decides the role; the gateway only signs that answer into a session
token so later requests can be authorised without another round trip.
"""
import structlog
from fastapi import HTTPException, status

from shared.clients.upstream import ApiClient
from shared.errors import NetworkError
from shared.security import ActorRole, Session, create_session_token

from .schemas import TokenResponse, UserLogin

logger = structlog.get_logger(__name__)


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Incorrect email or password",
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthService:

    @staticmethod
    def session_from_login(body) -> Session:
        """Build a session from the backend's login answer: {success, token, user: {id, role}}."""
        if not isinstance(body, dict) or body.get("success") is False:
            raise _invalid_credentials()
        token = body.get("token") or body.get("access_token")
        user = body.get("user") if isinstance(body.get("user"), dict) else {}
        if not token:
            raise _invalid_credentials()

        try:
            role = ActorRole(str(user.get("role") or body.get("role") or "").lower())
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="This account has no back-office access",
            ) from None

        user_id = user.get("id") or user.get("_id") or user.get("email") or "unknown"
        return Session(user_id=str(user_id), role=role, upstream_token=token)

    @staticmethod
    async def login(api: ApiClient, data: UserLogin) -> TokenResponse:
        try:
            body = await api.post(
                "auth/login",
                json={"email": data.email.strip(), "password": data.password.strip()},
            )
        except NetworkError as e:
            if e.upstream_status in (400, 401, 403):
                raise _invalid_credentials() from e
            raise

        session = AuthService.session_from_login(body)
        logger.info("login_succeeded", user_id=session.user_id, role=session.role.value)
        return TokenResponse(access_token=create_session_token(session), role=session.role)
