from typing import Optional

import structlog

from shared.clients.upstream import ApiClient
from shared.security import ActorRole
from .cache import OrderCache
from .query import total_pages
from .repository import ADMIN_ENDPOINTS, OrderEndpoints, OrderRepository
from .schemas import ListParams, Order, OrderPage
from .status_saga import build_status_saga
from .transitions import apply_transition

logger = structlog.get_logger(__name__)


class OrderService:
    @staticmethod
    async def list_orders(
        api: ApiClient, params: ListParams, endpoints: OrderEndpoints = ADMIN_ENDPOINTS
    ) -> OrderPage:
        items, total = await OrderRepository.list_orders(api, params, endpoints)
        return OrderPage(
            items=items,
            total=total,
            page=params.page,
            limit=params.limit,
            total_pages=total_pages(total, params.limit),
        )

    @staticmethod
    async def get_order(
        api: ApiClient, order_id: str, endpoints: OrderEndpoints = ADMIN_ENDPOINTS
    ) -> Order:
        return await OrderRepository.get_order(api, order_id, endpoints)

    @staticmethod
    async def change_status(
        api: ApiClient,
        order_id: str,
        target_status,
        role: ActorRole,
        endpoints: OrderEndpoints = ADMIN_ENDPOINTS,
        cache: Optional[OrderCache] = None,
    ) -> Order:
        """Validate, patch the display copy, then write to the backend.

        An illegal move raises InvalidTransition before the backend is called.
        If the write fails the display copy gets its previous status back and
        the error propagates.
        """
        current = cache.get(order_id) if cache is not None else None
        if current is None:
            current = await OrderRepository.get_order(api, order_id, endpoints)
        if cache is None:
            cache = OrderCache([current])

        updated = apply_transition(current, target_status, role)
        if updated is current:
            return current

        ctx = {
            "api": api,
            "cache": cache,
            "order": current,
            "updated": updated,
            "endpoints": endpoints,
        }
        await build_status_saga().execute(ctx)
        logger.info(
            "status_changed",
            order_id=order_id,
            previous=current.status.value,
            status=updated.status.value,
            role=role.value,
        )
        return cache.get(order_id) or updated

    @staticmethod
    async def delete_order(api: ApiClient, order_id: str):
        await OrderRepository.delete_order(api, order_id)
        logger.info("order_deleted", order_id=order_id)
