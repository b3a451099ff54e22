"""
Console-side view model for an order table.

OrderBoard owns what a console shows: the current page, the filters, and a
display copy of the rows. It guarantees three things the raw service calls
do not:

* moving to a page outside ``1..total_pages`` does nothing and sends nothing;
* when queries overlap, only the response to the newest one is applied;
* a status change shows up at once and is undone if the backend refuses it.
"""
import asyncio
from typing import Dict, List, Optional, Union

import structlog
from pydantic import ValidationError as SchemaError

from shared.clients.upstream import ApiClient
from shared.config import settings
from shared.errors import BackofficeError, ValidationError, from_schema_error
from shared.observability import backoffice_stale_responses_discarded_total
from shared.security import ActorRole, Session
from .cache import OrderCache
from .query import total_pages
from .repository import ADMIN_ENDPOINTS, COURIER_ENDPOINTS, OrderEndpoints, OrderRepository
from .schemas import ListParams, Order
from .service import OrderService
from .statuses import OrderStatus

logger = structlog.get_logger(__name__)

GAP = "..."


def page_window(page: int, pages: int, span: int = 2) -> List[Union[int, str]]:
    """Page numbers to render: all of them when few, else first, last and a window around `page`."""
    if pages <= 7:
        return list(range(1, pages + 1))
    window: List[Union[int, str]] = [1]
    start = max(2, page - span)
    end = min(pages - 1, page + span)
    if start > 2:
        window.append(GAP)
    window.extend(range(start, end + 1))
    if end < pages - 1:
        window.append(GAP)
    window.append(pages)
    return window


class Paginator:
    def __init__(self, limit: int = settings.DEFAULT_PAGE_SIZE, page: int = 1, total: int = 0):
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self.page = page
        self.total = total

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    def go_to(self, page: int) -> bool:
        """Move to `page`. Out of range, or already there, leaves the paginator untouched."""
        if page < 1 or page > self.total_pages or page == self.page:
            return False
        self.page = page
        return True

    def next(self) -> bool:
        return self.go_to(self.page + 1)

    def previous(self) -> bool:
        return self.go_to(self.page - 1)

    def set_limit(self, limit: int):
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self.page = 1

    def set_total(self, total: int):
        self.total = max(total, 0)
        if self.page > self.total_pages:
            self.page = self.total_pages

    def window(self) -> List[Union[int, str]]:
        return page_window(self.page, self.total_pages)


class ResponseSequencer:
    """Tickets for outgoing queries; only the newest ticket's response may be applied."""

    def __init__(self):
        self._latest = 0

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest


class OrderBoard:
    def __init__(
        self,
        api: ApiClient,
        session: Session,
        endpoints: Optional[OrderEndpoints] = None,
        limit: int = settings.DEFAULT_PAGE_SIZE,
    ):
        self.api = api
        self.session = session
        if endpoints is None:
            endpoints = COURIER_ENDPOINTS if session.role == ActorRole.COURIER else ADMIN_ENDPOINTS
        self.endpoints = endpoints
        self.paginator = Paginator(limit)
        self.status_filter: Optional[OrderStatus] = None
        self.search: Optional[str] = None
        self.cache = OrderCache()
        self._sequencer = ResponseSequencer()
        self._inflight: Dict[tuple, asyncio.Future] = {}

    @property
    def params(self) -> ListParams:
        return ListParams(
            page=self.paginator.page,
            limit=self.paginator.limit,
            status=self.status_filter,
            search=self.search,
        )

    @property
    def orders(self) -> List[Order]:
        return self.cache.items()

    def _fetch(self, params: ListParams) -> asyncio.Future:
        key = params.key()
        task = self._inflight.get(key)
        if task is not None:
            return task

        task = asyncio.ensure_future(OrderRepository.list_orders(self.api, params, self.endpoints))
        self._inflight[key] = task

        def _forget(done, key=key):
            if self._inflight.get(key) is done:
                del self._inflight[key]

        task.add_done_callback(_forget)
        return task

    async def refresh(self) -> bool:
        """Load the current page. Returns False when a newer query superseded this one."""
        params = self.params
        ticket = self._sequencer.issue()
        try:
            items, total = await asyncio.shield(self._fetch(params))
        except BackofficeError:
            if not self._sequencer.is_current(ticket):
                backoffice_stale_responses_discarded_total.inc()
                return False
            raise

        if not self._sequencer.is_current(ticket):
            backoffice_stale_responses_discarded_total.inc()
            logger.debug("stale_response_discarded", page=params.page, search=params.search)
            return False

        self.cache.replace(items)
        self.paginator.set_total(total)
        if self.paginator.page != params.page:
            # total shrank under us; the clamped page needs its own rows
            return await self.refresh()
        return True

    async def go_to_page(self, page: int) -> bool:
        if not self.paginator.go_to(page):
            return False
        await self.refresh()
        return True

    async def next_page(self) -> bool:
        return await self.go_to_page(self.paginator.page + 1)

    async def previous_page(self) -> bool:
        return await self.go_to_page(self.paginator.page - 1)

    async def set_filters(self, status=None, search: Optional[str] = None) -> bool:
        try:
            params = ListParams(page=1, limit=self.paginator.limit, status=status, search=search)
        except SchemaError as e:
            raise from_schema_error(e) from e
        self.status_filter = params.status
        self.search = params.search
        self.paginator.page = 1
        return await self.refresh()

    async def set_limit(self, limit: int) -> bool:
        if limit not in settings.PAGE_SIZE_CHOICES:
            raise ValidationError(f"Page size must be one of {list(settings.PAGE_SIZE_CHOICES)}")
        self.paginator.set_limit(limit)
        return await self.refresh()

    async def change_status(self, order_id: str, target_status) -> Order:
        return await OrderService.change_status(
            self.api,
            order_id,
            target_status,
            self.session.role,
            self.endpoints,
            cache=self.cache,
        )
