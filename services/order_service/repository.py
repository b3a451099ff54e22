from typing import Any, List, NamedTuple, Tuple

import structlog
from pydantic import ValidationError as SchemaError

from shared.clients.upstream import ApiClient
from shared.errors import NetworkError
from .query import page_from_envelope, total_pages
from .schemas import ListParams, Order
from .statuses import OrderStatus

logger = structlog.get_logger(__name__)


class OrderEndpoints(NamedTuple):
    collection: str
    detail: str
    status: str
    search_address: bool


ADMIN_ENDPOINTS = OrderEndpoints("orders", "orders/{id}", "orders/{id}/status", False)
COURIER_ENDPOINTS = OrderEndpoints("courier/orders", "orders/{id}", "courier/{id}/status", True)


def unwrap_record(payload: Any, key: str = "order") -> Any:
    """Single-record responses come bare, as {"data": {...}} or as {key: {...}}."""
    if isinstance(payload, dict):
        for wrapper in ("data", key):
            inner = payload.get(wrapper)
            if isinstance(inner, dict):
                return inner
    return payload


def _to_order(payload: Any) -> Order:
    try:
        return Order.model_validate(unwrap_record(payload))
    except SchemaError as e:
        logger.error("order_malformed", errors=e.errors(include_url=False))
        raise NetworkError("Backend returned a malformed order") from e


class OrderRepository:
    @staticmethod
    async def list_orders(
        api: ApiClient, params: ListParams, endpoints: OrderEndpoints = ADMIN_ENDPOINTS
    ) -> Tuple[List[Order], int]:
        payload = await api.get(endpoints.collection, params=params.query_params())
        return page_from_envelope(payload, params, include_address=endpoints.search_address)

    @staticmethod
    async def list_all(
        api: ApiClient, params: ListParams, endpoints: OrderEndpoints = ADMIN_ENDPOINTS
    ) -> List[Order]:
        """Walk every page for `params` (page and limit are taken as the starting point)."""
        collected: List[Order] = []
        page = params.page
        while True:
            current = params.model_copy(update={"page": page})
            items, total = await OrderRepository.list_orders(api, current, endpoints)
            collected.extend(items)
            if not items or page >= total_pages(total, params.limit) or len(collected) >= total:
                return collected
            page += 1

    @staticmethod
    async def get_order(
        api: ApiClient, order_id: str, endpoints: OrderEndpoints = ADMIN_ENDPOINTS
    ) -> Order:
        payload = await api.get(endpoints.detail.format(id=order_id))
        return _to_order(payload)

    @staticmethod
    async def create_order(api: ApiClient, payload: dict) -> Any:
        return await api.post(ADMIN_ENDPOINTS.collection, json=payload)

    @staticmethod
    async def update_status(
        api: ApiClient,
        order_id: str,
        status: OrderStatus,
        endpoints: OrderEndpoints = ADMIN_ENDPOINTS,
    ) -> Any:
        return await api.put(endpoints.status.format(id=order_id), json={"status": status.value})

    @staticmethod
    async def delete_order(api: ApiClient, order_id: str):
        await api.delete(ADMIN_ENDPOINTS.detail.format(id=order_id))
