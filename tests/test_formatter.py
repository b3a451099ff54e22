from datetime import date

from services.export_service.formatter import (
    batch_filename,
    compute_totals,
    format_batch,
    format_date,
    format_invoice,
    invoice_filename,
    money,
)
from services.order_service.schemas import Order
from services.product_service.pricing import PriceBook
from services.product_service.schemas import Product
from services.product_service.service import ProductService

from conftest import make_order

EXPORT_DAY = date(2024, 6, 1)


def test_example_totals_use_fallback_prices():
    order = Order.model_validate({"id": "abc12345", "quantity": "3"})
    totals = compute_totals(order)

    assert totals.subtotal == 4500
    assert totals.delivery_charge == 200
    assert totals.grand_total == 4700

    text = format_invoice(order, EXPORT_DAY)
    assert "INV-ABC12345" in text
    assert "Grand Total     : Rs. 4,700" in text
    assert "Discount" not in text


def test_invoice_is_deterministic():
    order = make_order(price=1200, deliveryCharge=250, discount=100)
    assert format_invoice(order, EXPORT_DAY) == format_invoice(dict(order), EXPORT_DAY)


def test_malformed_quantity_formats_as_zero():
    order = Order.model_validate(make_order(quantity="abc"))
    text = format_invoice(order, EXPORT_DAY)

    assert "Subtotal        : Rs. 0" in text
    assert "NaN" not in text


def test_invoice_sections_and_fields():
    order = make_order(
        price=1200,
        deliveryCharge=250,
        discount=100,
        courierCompany="Domex",
        trackingNumber="DX-991",
        email="nimali@example.com",
    )
    text = format_invoice(order, EXPORT_DAY)

    for heading in ("INVOICE DETAILS", "CUSTOMER DETAILS", "COURIER DETAILS", "ORDER ITEMS"):
        assert heading in text
    assert "Order Number    : #abc12345" in text
    assert "Invoice Date    : 2024-05-01" in text
    assert "Export Date     : 2024-06-01" in text
    assert "Customer Name   : Nimali Perera" in text
    assert "Courier Company : Domex" in text
    assert "Tracking Number : DX-991" in text
    assert "Discount        : - Rs. 100" in text
    # 1200 * 2 + 250 - 100
    assert "Grand Total     : Rs. 2,550" in text
    assert "COD Amount      : Rs. 2,550" in text
    assert "SKU: PRD-abc123" in text
    assert text.endswith("\n")


def test_invoice_fallbacks():
    text = format_invoice(make_order(id="zz9876543210xy"), EXPORT_DAY)
    assert "Courier Company : Express Delivery" in text
    assert "Tracking Number : TRK-zz98765432" in text
    assert "Email           : N/A" in text


def test_catalog_price_beats_fallback():
    book = PriceBook.from_products([Product(id="p1", name="Herbal Cream", price=2000)])
    order = Order.model_validate(make_order(product="Herbal Cream", quantity=2))

    assert book.unit_price(order) == 2000
    assert book.unit_price(order.model_copy(update={"product": "herbal-cream"})) == 2000
    assert book.unit_price(order.model_copy(update={"product": "p1"})) == 2000
    assert book.unit_price(order.model_copy(update={"product": "mystery"})) == 1500
    assert book.unit_price(order.model_copy(update={"price": 900})) == 900
    assert compute_totals(order, book).grand_total == 4200


def test_batch_lists_every_order():
    orders = [make_order(id="first0001"), make_order(id="second002", status="delivered")]
    text = format_batch(orders, EXPORT_DAY)

    assert "Orders          : 2" in text
    assert "Order #first000 | INV-FIRST000" in text
    assert "Order #second00 | INV-SECOND00" in text
    assert "Status          : DELIVERED" in text


def test_empty_batch():
    assert "No orders." in format_batch([], EXPORT_DAY)


def test_helpers():
    assert money(1234567) == "Rs. 1,234,567"
    assert format_date(None) == "N/A"
    assert format_date("not a date") == "not a date"
    assert invoice_filename(make_order()) == "invoice-INV-ABC12345.txt"
    assert batch_filename(EXPORT_DAY) == "orders-2024-06-01.txt"


def test_long_product_name_wraps_instead_of_truncating():
    name = "Ayurvedic Herbal Night Cream with Sandalwood and Turmeric"
    text = format_invoice(make_order(product=name), EXPORT_DAY)

    items = text.split("ORDER ITEMS\n")[1].split("  SKU:")[0]
    assert " ".join(line[2:26].strip() for line in items.splitlines()[1:]) == name
    assert "Rs. 3,000" in items.splitlines()[1]


async def test_price_book_skips_products_with_unreadable_price(api, backend):
    backend.on(
        "GET",
        "/api/products",
        body=[
            {"id": "p1", "name": "Herbal Cream", "price": "1e400"},
            {"id": "p2", "name": "Soap", "price": 300},
        ],
    )
    book = await ProductService.price_book(api)

    assert book.catalog_price("Soap") == 300
    assert book.catalog_price("Herbal Cream") is None
    assert book.unit_price(Order.model_validate(make_order(product="Herbal Cream"))) == 1500
