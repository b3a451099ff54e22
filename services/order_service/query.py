"""
List query helpers: the single adapter for the backend's list envelopes,
pagination math and the search predicate.
"""
from enum import Enum
from typing import Any, Iterable, List, NamedTuple, Optional, Type

import structlog
from pydantic import BaseModel, ValidationError as SchemaError

from shared.observability import (
    backoffice_envelope_unrecognized_total,
    backoffice_records_rejected_total,
)
from .schemas import ListParams, Order
from .statuses import OrderStatus

logger = structlog.get_logger(__name__)


class EnvelopeShape(str, Enum):
    BARE_ARRAY = "bare_array"        # [...]
    DATA_ARRAY = "data_array"        # {"data": [...]}
    KEYED = "keyed"                  # {"orders": [...], "total": n}
    NESTED = "nested"                # {"data": {"orders": [...], "total": n}}
    UNRECOGNIZED = "unrecognized"

    @property
    def paginated(self) -> bool:
        """Whether the backend reported its own total (and so filtered and paged itself)."""
        return self in (EnvelopeShape.KEYED, EnvelopeShape.NESTED)


class Envelope(NamedTuple):
    shape: EnvelopeShape
    records: list
    total: int


def _total(container: dict, records: list) -> int:
    value = container.get("total")
    if isinstance(value, bool):
        return len(records)
    if isinstance(value, int) and value >= 0:
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return len(records)


def normalize_envelope(payload: Any, key: str = "orders") -> Envelope:
    """Classify a list response and pull out its records and total.

    Unknown shapes yield an empty page; they are logged and counted so that
    contract drift on the backend shows up instead of passing silently.
    """
    if isinstance(payload, list):
        return Envelope(EnvelopeShape.BARE_ARRAY, payload, len(payload))

    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return Envelope(EnvelopeShape.DATA_ARRAY, data, _total(payload, data))
        if isinstance(data, dict) and isinstance(data.get(key), list):
            return Envelope(EnvelopeShape.NESTED, data[key], _total(data, data[key]))
        if isinstance(payload.get(key), list):
            return Envelope(EnvelopeShape.KEYED, payload[key], _total(payload, payload[key]))

    backoffice_envelope_unrecognized_total.labels(collection=key).inc()
    logger.warning(
        "envelope_unrecognized",
        collection=key,
        payload_type=type(payload).__name__,
        keys=sorted(payload.keys()) if isinstance(payload, dict) else None,
    )
    return Envelope(EnvelopeShape.UNRECOGNIZED, [], 0)


def parse_records(records: Iterable[Any], model: Type[BaseModel], collection: str) -> list:
    """Validate raw records, dropping (and logging) the ones that do not fit `model`."""
    parsed = []
    for raw in records:
        try:
            parsed.append(model.model_validate(raw))
        except SchemaError as e:
            backoffice_records_rejected_total.labels(collection=collection).inc()
            logger.warning(
                "record_rejected",
                collection=collection,
                record_id=raw.get("id") if isinstance(raw, dict) else None,
                errors=e.error_count(),
            )
    return parsed


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        raise ValueError("limit must be positive")
    return max(1, -(-max(total, 0) // limit))


def matches_search(order: Order, term: Optional[str], include_address: bool = False) -> bool:
    if not term:
        return True
    needle = term.lower()
    if needle in order.full_name.lower():
        return True
    if term in order.mobile:
        return True
    return include_address and needle in order.address.lower()


def filter_orders(
    orders: Iterable[Order],
    status: Optional[OrderStatus] = None,
    search: Optional[str] = None,
    include_address: bool = False,
) -> List[Order]:
    """Orders matching the status and search predicate, in their original order.

    Filtering an already filtered list with the same arguments returns it unchanged.
    """
    return [
        order
        for order in orders
        if (status is None or order.status == status)
        and matches_search(order, search, include_address)
    ]


def page_from_envelope(
    payload: Any,
    params: ListParams,
    include_address: bool = False,
) -> tuple:
    """(items, total) for one list response.

    Paginated envelopes are taken as the backend's answer for `params`.
    Unpaginated ones carry no evidence that the backend filtered, so the
    predicate is applied here exactly once.
    """
    envelope = normalize_envelope(payload, "orders")
    items = parse_records(envelope.records, Order, "orders")
    if envelope.shape.paginated:
        return items, envelope.total
    # Only rows that survived validation and the predicate are counted
    items = filter_orders(items, params.status, params.search, include_address)
    return items, len(items)
