"""
Order status workflow.

The status set is closed (see statuses.OrderStatus) and every legal move is
listed in TRANSITIONS together with the roles allowed to make it. Anything
else is an InvalidTransition, raised before any backend call is attempted.
"""
from typing import List

import structlog

from shared.errors import InvalidTransition
from shared.observability import backoffice_status_transitions_total
from shared.security import ActorRole
from .schemas import Order
from .statuses import OrderStatus, TERMINAL_STATUSES, parse_status

logger = structlog.get_logger(__name__)

ADMIN_ONLY = frozenset({ActorRole.ADMIN})
COURIER_OR_ADMIN = frozenset({ActorRole.ADMIN, ActorRole.COURIER})

# (from, to) -> roles allowed to trigger it
TRANSITIONS = {
    (OrderStatus.RECEIVED, OrderStatus.SENDED): ADMIN_ONLY,        # send to courier
    (OrderStatus.SENDED, OrderStatus.RECEIVED): ADMIN_ONLY,        # unsend
    (OrderStatus.SENDED, OrderStatus.IN_TRANSIT): COURIER_OR_ADMIN,
    (OrderStatus.IN_TRANSIT, OrderStatus.DELIVERED): COURIER_OR_ADMIN,
}


def _parse_role(actor_role) -> ActorRole:
    if isinstance(actor_role, ActorRole):
        return actor_role
    try:
        return ActorRole(str(actor_role).strip().lower())
    except ValueError:
        raise InvalidTransition(f"Unknown actor role {actor_role!r}") from None


def is_allowed(current: OrderStatus, target: OrderStatus, role: ActorRole) -> bool:
    if current == target:
        return current not in TERMINAL_STATUSES
    return role in TRANSITIONS.get((current, target), frozenset())


def allowed_targets(current: OrderStatus, actor_role) -> List[OrderStatus]:
    """Statuses `actor_role` may move an order to from `current`, excluding no-ops."""
    role = _parse_role(actor_role)
    return [
        target
        for (source, target), roles in TRANSITIONS.items()
        if source == current and role in roles
    ]


def apply_transition(order: Order, target_status, actor_role) -> Order:
    """Return `order` moved to `target_status`; only the status differs.

    Raises InvalidTransition for a target outside the status set, an unknown
    role, or a move the role may not make. The input order is never touched.
    """
    role = _parse_role(actor_role)
    target = parse_status(target_status)
    if target is None:
        backoffice_status_transitions_total.labels(role=role.value, outcome="rejected").inc()
        raise InvalidTransition(f"Unknown order status {target_status!r}")

    current = order.status
    if not is_allowed(current, target, role):
        backoffice_status_transitions_total.labels(role=role.value, outcome="rejected").inc()
        logger.info(
            "transition_rejected",
            order_id=order.id,
            current=current.value,
            target=target.value,
            role=role.value,
        )
        raise InvalidTransition(
            f"{role.value} cannot move order {order.id} from '{current.value}' to '{target.value}'"
        )

    if current == target:
        backoffice_status_transitions_total.labels(role=role.value, outcome="noop").inc()
        return order

    backoffice_status_transitions_total.labels(role=role.value, outcome="applied").inc()
    return order.with_status(target)
