from fastapi import APIRouter, Depends

from shared.clients.dependencies import get_api_client
from shared.clients.upstream import ApiClient
from shared.security import ActorRole, Session, require_roles
from services.order_service.router import list_params
from services.order_service.schemas import ListParams, OrderPage, StatusChangeResponse, StatusUpdate
from services.order_service.transitions import allowed_targets
from .service import CourierService

courier_or_admin = require_roles(ActorRole.COURIER, ActorRole.ADMIN)
router = APIRouter(dependencies=[Depends(courier_or_admin)])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "courier", "status": "running"}


@router.get("/orders", response_model=OrderPage)
async def list_orders(
    params: ListParams = Depends(list_params),
    api: ApiClient = Depends(get_api_client),
):
    """Delivery queue; search also matches the delivery address."""
    return await CourierService.list_orders(api, params)

@router.get("/orders/{order_id}", response_model=StatusChangeResponse)
async def get_order(
    order_id: str,
    api: ApiClient = Depends(get_api_client),
    session: Session = Depends(courier_or_admin),
):
    order = await CourierService.get_order(api, order_id)
    return StatusChangeResponse(order=order, allowed_transitions=allowed_targets(order.status, session.role))

@router.put("/orders/{order_id}/status", response_model=StatusChangeResponse)
async def update_status(
    order_id: str,
    payload: StatusUpdate,
    api: ApiClient = Depends(get_api_client),
    session: Session = Depends(courier_or_admin),
):
    order = await CourierService.change_status(api, order_id, payload.status, session.role)
    return StatusChangeResponse(order=order, allowed_transitions=allowed_targets(order.status, session.role))
