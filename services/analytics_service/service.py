from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

import structlog

from shared.clients.upstream import ApiClient
from shared.config import settings
from services.order_service.repository import OrderRepository
from services.order_service.schemas import ListParams, Order
from services.order_service.statuses import OrderStatus
from services.product_service.pricing import PriceBook
from services.product_service.service import ProductService
from .schemas import DailyPoint, MonthlyPoint, OrderSummary

logger = structlog.get_logger(__name__)

DAYS = 7
MONTHS = 6


def order_date(order: Order) -> Optional[date]:
    if not order.created_at:
        return None
    try:
        created = datetime.fromisoformat(order.created_at.replace("Z", "+00:00"))
    except ValueError:
        return None
    if created.tzinfo is not None:
        created = created.astimezone(timezone.utc)
    return created.date()


def _recent_months(today: date, count: int) -> List[Tuple[int, int]]:
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def summarize_orders(
    orders: Iterable[Order], today: date, price_book: Optional[PriceBook] = None
) -> OrderSummary:
    price_book = price_book or PriceBook()
    orders = list(orders)

    statuses = Counter(order.status for order in orders)
    day_orders: Counter = Counter()
    day_revenue: Counter = Counter()
    month_orders: Counter = Counter()
    month_revenue: Counter = Counter()
    total_revenue = 0

    for order in orders:
        revenue = price_book.unit_price(order) * order.quantity
        total_revenue += revenue
        created = order_date(order)
        if created is None:
            continue
        day_orders[created] += 1
        day_revenue[created] += revenue
        month_orders[(created.year, created.month)] += 1
        month_revenue[(created.year, created.month)] += revenue

    days = [today - timedelta(days=offset) for offset in range(DAYS - 1, -1, -1)]
    months = _recent_months(today, MONTHS)

    return OrderSummary(
        total=len(orders),
        by_status={status.value: statuses.get(status, 0) for status in OrderStatus},
        with_courier=statuses.get(OrderStatus.SENDED, 0) + statuses.get(OrderStatus.IN_TRANSIT, 0),
        today=day_orders.get(today, 0),
        this_month=month_orders.get((today.year, today.month), 0),
        total_revenue=total_revenue,
        daily=[
            DailyPoint(date=day.isoformat(), orders=day_orders.get(day, 0), revenue=day_revenue.get(day, 0))
            for day in days
        ],
        monthly=[
            MonthlyPoint(
                month=f"{year}-{month:02d}",
                orders=month_orders.get((year, month), 0),
                revenue=month_revenue.get((year, month), 0),
            )
            for year, month in months
        ],
    )


class AnalyticsService:
    @staticmethod
    async def summary(api: ApiClient, today: Optional[date] = None) -> OrderSummary:
        orders = await OrderRepository.list_all(api, ListParams(limit=settings.MAX_PAGE_SIZE))
        price_book = await ProductService.price_book(api)
        logger.info("summary_computed", orders=len(orders))
        return summarize_orders(orders, today or date.today(), price_book)
