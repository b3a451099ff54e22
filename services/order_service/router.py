from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import ValidationError as SchemaError

from shared.clients.dependencies import get_api_client
from shared.clients.upstream import ApiClient
from shared.config import settings
from shared.errors import from_schema_error
from shared.security import ActorRole, Session, require_roles
from .schemas import ListParams, OrderPage, Order, StatusChangeResponse, StatusUpdate
from .service import OrderService
from .transitions import allowed_targets

# The admin order list; couriers use the courier service
admin_only = require_roles(ActorRole.ADMIN)
router = APIRouter(dependencies=[Depends(admin_only)])
public_router = APIRouter()

@public_router.get("/health")
async def health_check():
    return {"service": "order", "status": "running"}


def list_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, gt=0, le=settings.MAX_PAGE_SIZE),
    status: Optional[str] = Query(None, description="Order status or 'all'"),
    search: Optional[str] = Query(None, description="Customer name or mobile"),
) -> ListParams:
    try:
        return ListParams(page=page, limit=limit, status=status, search=search)
    except SchemaError as e:
        raise from_schema_error(e) from e


@router.get("/", response_model=OrderPage)
async def list_orders(
    params: ListParams = Depends(list_params),
    api: ApiClient = Depends(get_api_client),
):
    return await OrderService.list_orders(api, params)

@router.get("/{order_id}", response_model=Order)
async def get_order(order_id: str, api: ApiClient = Depends(get_api_client)):
    return await OrderService.get_order(api, order_id)

@router.get("/{order_id}/transitions", response_model=StatusChangeResponse)
async def get_transitions(
    order_id: str,
    api: ApiClient = Depends(get_api_client),
    session: Session = Depends(admin_only),
):
    order = await OrderService.get_order(api, order_id)
    return StatusChangeResponse(order=order, allowed_transitions=allowed_targets(order.status, session.role))

@router.put("/{order_id}/status", response_model=StatusChangeResponse)
async def update_status(
    order_id: str,
    payload: StatusUpdate,
    api: ApiClient = Depends(get_api_client),
    session: Session = Depends(admin_only),
):
    order = await OrderService.change_status(api, order_id, payload.status, session.role)
    return StatusChangeResponse(order=order, allowed_transitions=allowed_targets(order.status, session.role))

@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: str, api: ApiClient = Depends(get_api_client)):
    await OrderService.delete_order(api, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
