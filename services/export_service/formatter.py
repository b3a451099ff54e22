"""
Plain-text invoice and batch export.

Output depends only on the orders, the price book and the export date, so
identical input always yields identical bytes. Files are offered as .txt:
this is a text document, not a PDF.
"""
import textwrap
from datetime import date, datetime
from typing import Iterable, List, NamedTuple, Optional, Union

from shared.config import settings
from services.order_service.schemas import Order
from services.product_service.pricing import PriceBook

WIDTH = 64
HEAVY_RULE = "=" * WIDTH
LIGHT_RULE = "-" * WIDTH

DEFAULT_COURIER = "Express Delivery"
DELIVERY_METHOD = "Standard Delivery"
PAYMENT_METHOD = "Cash on Delivery"
PRODUCT_COLUMN = 24


class InvoiceTotals(NamedTuple):
    unit_price: int
    quantity: int
    subtotal: int
    delivery_charge: int
    discount: int
    grand_total: int


def _as_order(order: Union[Order, dict]) -> Order:
    return order if isinstance(order, Order) else Order.model_validate(order)


def compute_totals(order: Order, price_book: Optional[PriceBook] = None) -> InvoiceTotals:
    unit_price = (price_book or PriceBook()).unit_price(order)
    quantity = order.quantity
    subtotal = unit_price * quantity
    delivery = order.delivery_charge if order.delivery_charge is not None else settings.DELIVERY_CHARGE_FALLBACK
    discount = order.discount or 0
    return InvoiceTotals(unit_price, quantity, subtotal, delivery, discount, subtotal + delivery - discount)


def invoice_number(order: Order) -> str:
    return f"INV-{order.id[:8].upper()}"


def order_number(order: Order) -> str:
    return f"#{order.id[:8]}"


def money(amount: int) -> str:
    return f"{settings.CURRENCY_PREFIX} {amount:,}"


def format_date(value: Optional[str]) -> str:
    if not value:
        return "N/A"
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return value


def _export_date(value: Union[date, str, None]) -> str:
    if value is None:
        value = date.today()
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value)


def _field(label: str, value) -> str:
    return f"  {label:<16}: {value}"


def format_invoice(
    order: Union[Order, dict],
    export_date: Union[date, str, None] = None,
    price_book: Optional[PriceBook] = None,
) -> str:
    order = _as_order(order)
    totals = compute_totals(order, price_book)
    # long names wrap onto extra lines under the product column
    product_lines = textwrap.wrap(order.product, PRODUCT_COLUMN) or [""]

    lines: List[str] = [
        HEAVY_RULE,
        "INVOICE".center(WIDTH).rstrip(),
        "Order Management System".center(WIDTH).rstrip(),
        HEAVY_RULE,
        "INVOICE DETAILS",
        _field("Invoice Number", invoice_number(order)),
        _field("Order Number", order_number(order)),
        _field("Invoice Date", format_date(order.created_at)),
        _field("Export Date", _export_date(export_date)),
        _field("Payment Method", PAYMENT_METHOD),
        _field("Status", order.status.value.upper()),
        LIGHT_RULE,
        "CUSTOMER DETAILS",
        _field("Customer Name", order.full_name),
        _field("Phone Number", order.mobile or "N/A"),
        _field("Email", order.email or "N/A"),
        _field("Address", order.address or "N/A"),
        LIGHT_RULE,
        "COURIER DETAILS",
        _field("Courier Company", order.courier_company or DEFAULT_COURIER),
        _field("Tracking Number", order.tracking_reference),
        _field("Delivery Method", DELIVERY_METHOD),
        _field("COD Amount", money(totals.grand_total)),
        LIGHT_RULE,
        "ORDER ITEMS",
        f"  {'PRODUCT':<24}{'QTY':>6}{'UNIT PRICE':>16}{'TOTAL':>16}",
        f"  {product_lines[0]:<{PRODUCT_COLUMN}}{totals.quantity:>6}"
        f"{money(totals.unit_price):>16}{money(totals.subtotal):>16}",
        *(f"  {line}" for line in product_lines[1:]),
        f"  SKU: PRD-{order.id[:6]}",
        LIGHT_RULE,
        _field("Subtotal", money(totals.subtotal)),
        _field("Delivery Charge", money(totals.delivery_charge)),
    ]
    if totals.discount:
        lines.append(_field("Discount", f"- {money(totals.discount)}"))
    lines += [
        _field("Grand Total", money(totals.grand_total)),
        HEAVY_RULE,
        "Thank you for your business! This is a computer-generated invoice",
        "and does not require a signature.",
        "",
    ]
    return "\n".join(lines)


def format_batch(
    orders: Iterable[Union[Order, dict]],
    export_date: Union[date, str, None] = None,
    price_book: Optional[PriceBook] = None,
) -> str:
    orders = [_as_order(order) for order in orders]
    lines: List[str] = [
        HEAVY_RULE,
        "ORDER EXPORT",
        _field("Export Date", _export_date(export_date)),
        _field("Orders", len(orders)),
        HEAVY_RULE,
    ]
    if not orders:
        lines.append("  No orders.")
    for order in orders:
        totals = compute_totals(order, price_book)
        courier = order.courier_company or DEFAULT_COURIER
        lines += [
            f"Order {order_number(order)} | {invoice_number(order)}",
            _field("Date", format_date(order.created_at)),
            _field("Status", order.status.value.upper()),
            _field("Customer", f"{order.full_name} ({order.mobile or 'N/A'})"),
            _field("Product", order.product),
            _field("Quantity", totals.quantity),
            _field("Total", money(totals.grand_total)),
            _field("Courier", f"{courier} / {order.tracking_reference}"),
            LIGHT_RULE,
        ]
    lines.append("")
    return "\n".join(lines)


def invoice_filename(order: Union[Order, dict]) -> str:
    return f"invoice-{invoice_number(_as_order(order))}.txt"


def batch_filename(export_date: Union[date, str, None] = None) -> str:
    return f"orders-{_export_date(export_date)}.txt"
