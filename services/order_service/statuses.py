from enum import Enum


class OrderStatus(str, Enum):
    RECEIVED = "received"
    SENDED = "sended"          # handed to the courier
    IN_TRANSIT = "in-transit"
    DELIVERED = "delivered"


INITIAL_STATUS = OrderStatus.RECEIVED
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED})

# Older console revisions wrote these values; the backend may still return them.
LEGACY_STATUS_ALIASES = {
    "pending": OrderStatus.RECEIVED,
    "issued": OrderStatus.RECEIVED,
    "sent-to-courier": OrderStatus.SENDED,
    "sent": OrderStatus.SENDED,
    "in_transit": OrderStatus.IN_TRANSIT,
}


def parse_status(value) -> OrderStatus | None:
    """Canonical status for `value`, or None when it is not in the closed set."""
    if isinstance(value, OrderStatus):
        return value
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    try:
        return OrderStatus(key)
    except ValueError:
        return None


def normalize_status(value) -> OrderStatus | None:
    """Like parse_status, but also migrates legacy values read from the backend."""
    status = parse_status(value)
    if status is not None:
        return status
    if isinstance(value, str):
        return LEGACY_STATUS_ALIASES.get(value.strip().lower())
    return None
