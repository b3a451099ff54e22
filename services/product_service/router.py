from fastapi import APIRouter, Depends, Response, status

from shared.clients.dependencies import get_api_client
from shared.clients.upstream import ApiClient
from shared.security import ActorRole, require_roles
from .schemas import Product, ProductCreate, ProductUpdate
from .service import ProductService

router = APIRouter(dependencies=[Depends(require_roles(ActorRole.ADMIN, ActorRole.COURIER))])
admin_router = APIRouter(dependencies=[Depends(require_roles(ActorRole.ADMIN))])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health")
async def health_check():
    return {"service": "product", "status": "running"}


@router.get("/", response_model=list[Product])
async def list_products(api: ApiClient = Depends(get_api_client)):
    return await ProductService.list_products(api)

@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str, api: ApiClient = Depends(get_api_client)):
    return await ProductService.get_product_by_id(api, product_id)

@admin_router.post("/", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(product: ProductCreate, api: ApiClient = Depends(get_api_client)):
    return await ProductService.create_product(api, product)

@admin_router.put("/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    changes: ProductUpdate,
    api: ApiClient = Depends(get_api_client),
):
    return await ProductService.update_product(api, product_id, changes)

@admin_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: str, api: ApiClient = Depends(get_api_client)):
    await ProductService.delete_product(api, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
