from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from shared.clients.dependencies import get_api_client
from shared.clients.upstream import ApiClient
from shared.security import ActorRole, require_roles
from services.order_service.router import list_params
from services.order_service.schemas import ListParams
from .service import ExportService, TextDocument

router = APIRouter(dependencies=[Depends(require_roles(ActorRole.ADMIN))])
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "export", "status": "running"}


def _download(document: TextDocument) -> PlainTextResponse:
    return PlainTextResponse(
        document.content,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.get("/orders/{order_id}/invoice", response_class=PlainTextResponse)
async def download_invoice(
    order_id: str,
    export_date: Optional[date] = Query(None, description="Defaults to today"),
    api: ApiClient = Depends(get_api_client),
):
    return _download(await ExportService.invoice(api, order_id, export_date))

@router.get("/orders", response_class=PlainTextResponse)
async def download_batch(
    params: ListParams = Depends(list_params),
    all_pages: bool = Query(False, description="Export every page, not just the requested one"),
    export_date: Optional[date] = Query(None, description="Defaults to today"),
    api: ApiClient = Depends(get_api_client),
):
    return _download(await ExportService.batch(api, params, export_date, all_pages))
