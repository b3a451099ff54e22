from typing import Dict, Iterable, List, Optional

from .schemas import Order
from .statuses import OrderStatus


class OrderCache:
    """Display copy of the orders a console is showing.

    Single writer, no locking: it mirrors what the backend last said plus any
    optimistic patch in flight, and is never the source of truth.
    """

    def __init__(self, orders: Iterable[Order] = ()):
        self._orders: Dict[str, Order] = {}
        self.replace(orders)

    def replace(self, orders: Iterable[Order]):
        self._orders = {order.id: order for order in orders}

    def get(self, order_id: str) -> Optional[Order]:
        return self._orders.get(order_id)

    def put(self, order: Order):
        self._orders[order.id] = order

    def set_status(self, order_id: str, status: OrderStatus) -> Optional[OrderStatus]:
        """Patch one order's status; returns the status it had before."""
        order = self._orders.get(order_id)
        if order is None:
            return None
        self._orders[order_id] = order.with_status(status)
        return order.status

    def remove(self, order_id: str):
        self._orders.pop(order_id, None)

    def items(self) -> List[Order]:
        return list(self._orders.values())

    def __len__(self):
        return len(self._orders)

    def __contains__(self, order_id):
        return order_id in self._orders
