from typing import Dict, Iterable, Optional

from shared.config import settings
from services.order_service.schemas import Order
from .schemas import Product, slugify


class PriceBook:
    """Unit prices for orders, taken from the catalog.

    An order's own price wins; otherwise the catalog product it names (by id,
    name or slug) supplies it. The configured fallback only covers products
    the catalog does not know.
    """

    def __init__(self, prices: Optional[Dict[str, int]] = None, fallback: int = None):
        self._prices = dict(prices or {})
        self.fallback = settings.UNIT_PRICE_FALLBACK if fallback is None else fallback

    @classmethod
    def from_products(cls, products: Iterable[Product], fallback: int = None) -> "PriceBook":
        prices: Dict[str, int] = {}
        for product in products:
            for ref in (product.id, product.name.strip().lower(), product.slug):
                if ref:
                    prices.setdefault(ref, product.price)
        return cls(prices, fallback)

    def catalog_price(self, product_ref: str) -> Optional[int]:
        if not product_ref:
            return None
        for ref in (product_ref, product_ref.strip().lower(), slugify(product_ref)):
            if ref in self._prices:
                return self._prices[ref]
        return None

    def unit_price(self, order: Order) -> int:
        if order.price is not None:
            return order.price
        price = self.catalog_price(order.product)
        return self.fallback if price is None else price
