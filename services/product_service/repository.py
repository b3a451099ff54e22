from typing import List

from pydantic import ValidationError as SchemaError

from shared.clients.upstream import ApiClient
from shared.errors import NetworkError
from services.order_service.query import normalize_envelope, parse_records
from services.order_service.repository import unwrap_record
from .schemas import Product, ProductCreate, ProductUpdate


def _to_product(payload) -> Product:
    try:
        return Product.model_validate(unwrap_record(payload, "product"))
    except SchemaError as e:
        raise NetworkError("Backend returned a malformed product") from e


class ProductRepository:

    @staticmethod
    async def create_product(api: ApiClient, product: ProductCreate) -> Product:
        payload = await api.post("products", json=product.model_dump(mode="json", exclude_none=True))
        return _to_product(payload)

    @staticmethod
    async def get_all_products(api: ApiClient) -> List[Product]:
        payload = await api.get("products")
        envelope = normalize_envelope(payload, "products")
        return parse_records(envelope.records, Product, "products")

    @staticmethod
    async def get_product_by_id(api: ApiClient, product_id: str) -> Product:
        return _to_product(await api.get(f"products/{product_id}"))

    @staticmethod
    async def update_product(api: ApiClient, product_id: str, changes: ProductUpdate) -> Product:
        payload = await api.put(
            f"products/{product_id}", json=changes.model_dump(mode="json", exclude_none=True)
        )
        return _to_product(payload)

    @staticmethod
    async def delete_product(api: ApiClient, product_id: str):
        await api.delete(f"products/{product_id}")
