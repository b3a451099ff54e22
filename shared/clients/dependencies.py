from fastapi import Depends

from shared.security import Session, get_current_session
from .upstream import ApiClient


async def get_public_api_client() -> ApiClient:
    """Anonymous backend client for storefront calls."""
    return ApiClient()


async def get_api_client(session: Session = Depends(get_current_session)) -> ApiClient:
    """Backend client carrying the caller's upstream bearer token."""
    return ApiClient(token=session.upstream_token)
