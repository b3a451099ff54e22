from datetime import date
from typing import NamedTuple, Optional, Union

import structlog

from shared.clients.upstream import ApiClient
from shared.observability import backoffice_exports_total
from services.order_service.repository import OrderRepository
from services.order_service.schemas import ListParams
from services.product_service.service import ProductService
from .formatter import batch_filename, format_batch, format_invoice, invoice_filename

logger = structlog.get_logger(__name__)


class TextDocument(NamedTuple):
    filename: str
    content: str


class ExportService:
    @staticmethod
    async def invoice(
        api: ApiClient, order_id: str, export_date: Union[date, str, None] = None
    ) -> TextDocument:
        order = await OrderRepository.get_order(api, order_id)
        price_book = await ProductService.price_book(api)
        backoffice_exports_total.labels(kind="invoice").inc()
        logger.info("invoice_exported", order_id=order_id)
        return TextDocument(invoice_filename(order), format_invoice(order, export_date, price_book))

    @staticmethod
    async def batch(
        api: ApiClient,
        params: ListParams,
        export_date: Union[date, str, None] = None,
        all_pages: bool = False,
    ) -> TextDocument:
        if all_pages:
            orders = await OrderRepository.list_all(api, params)
        else:
            orders, _ = await OrderRepository.list_orders(api, params)
        price_book = await ProductService.price_book(api)
        backoffice_exports_total.labels(kind="batch").inc()
        logger.info("batch_exported", count=len(orders), all_pages=all_pages)
        return TextDocument(batch_filename(export_date), format_batch(orders, export_date, price_book))
