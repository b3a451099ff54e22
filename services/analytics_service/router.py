from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from shared.clients.dependencies import get_api_client
from shared.clients.upstream import ApiClient
from shared.security import ActorRole, require_roles
from .schemas import OrderSummary
from .service import AnalyticsService

router = APIRouter(dependencies=[Depends(require_roles(ActorRole.ADMIN))])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "analytics", "status": "running"}


@router.get("/summary", response_model=OrderSummary)
async def get_summary(
    today: Optional[date] = Query(None, description="Reference day, defaults to today"),
    api: ApiClient = Depends(get_api_client),
):
    return await AnalyticsService.summary(api, today)
