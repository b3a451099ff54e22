from typing import List

import structlog

from shared.clients.upstream import ApiClient
from shared.errors import NetworkError, NotFound, ValidationError
from .pricing import PriceBook
from .repository import ProductRepository
from .schemas import Product, ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)


class ProductService:

    @staticmethod
    async def create_product(api: ApiClient, data: ProductCreate) -> Product:
        product = await ProductRepository.create_product(api, data)
        logger.info("product_created", product_id=product.id, name=product.name)
        return product

    @staticmethod
    async def list_products(api: ApiClient) -> List[Product]:
        return await ProductRepository.get_all_products(api)

    @staticmethod
    async def get_product_by_id(api: ApiClient, product_id: str) -> Product:
        return await ProductRepository.get_product_by_id(api, product_id)

    @staticmethod
    async def update_product(api: ApiClient, product_id: str, changes: ProductUpdate) -> Product:
        if not changes.model_dump(exclude_none=True):
            raise ValidationError("Nothing to update")
        product = await ProductRepository.update_product(api, product_id, changes)
        logger.info("product_updated", product_id=product_id)
        return product

    @staticmethod
    async def delete_product(api: ApiClient, product_id: str):
        await ProductRepository.delete_product(api, product_id)
        logger.info("product_deleted", product_id=product_id)

    @staticmethod
    async def price_book(api: ApiClient) -> PriceBook:
        """Catalog prices; an unreachable catalog degrades to the display fallback."""
        try:
            products = await ProductRepository.get_all_products(api)
        except (NetworkError, NotFound) as e:
            logger.warning("catalog_unavailable", error=e.message)
            return PriceBook()
        return PriceBook.from_products(products)
