from fastapi import APIRouter, Depends, Request, status

from shared.clients.dependencies import get_public_api_client
from shared.clients.upstream import ApiClient
from shared.config import settings
from shared.security import limiter
from services.order_service.schemas import OrderCreate
from .schemas import InquiryCreate, SubmissionResponse
from .service import StorefrontService

router = APIRouter()

@router.get("/health")
async def health_check():
    return {"service": "storefront", "status": "running"}

# --- PUBLIC, RATE LIMITED ---
@router.post("/orders", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.STOREFRONT_RATE_LIMIT)
async def submit_order(
    request: Request,                     # REQUIRED: slowapi needs this to check IP/Headers
    payload: OrderCreate,
    api: ApiClient = Depends(get_public_api_client),
):
    return await StorefrontService.submit_order(api, payload)

@router.post("/inquiries", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.STOREFRONT_RATE_LIMIT)
async def submit_inquiry(
    request: Request,
    payload: InquiryCreate,
    api: ApiClient = Depends(get_public_api_client),
):
    return await StorefrontService.submit_inquiry(api, payload)
