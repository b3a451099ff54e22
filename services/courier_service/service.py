from shared.clients.upstream import ApiClient
from shared.security import ActorRole
from services.order_service.repository import COURIER_ENDPOINTS
from services.order_service.schemas import ListParams, Order, OrderPage
from services.order_service.service import OrderService


class CourierService:
    @staticmethod
    async def list_orders(api: ApiClient, params: ListParams) -> OrderPage:
        return await OrderService.list_orders(api, params, COURIER_ENDPOINTS)

    @staticmethod
    async def get_order(api: ApiClient, order_id: str) -> Order:
        return await OrderService.get_order(api, order_id, COURIER_ENDPOINTS)

    @staticmethod
    async def change_status(api: ApiClient, order_id: str, target_status, role: ActorRole) -> Order:
        return await OrderService.change_status(api, order_id, target_status, role, COURIER_ENDPOINTS)
