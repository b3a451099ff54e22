import structlog
from pydantic import ValidationError as SchemaError

from shared.saga import SagaOrchestrator
from .repository import OrderRepository, unwrap_record
from .schemas import Order

logger = structlog.get_logger(__name__)

# --- ACTIONS ---

async def patch_display_copy(ctx: dict):
    cache, updated = ctx["cache"], ctx["updated"]
    ctx["previous_status"] = cache.set_status(updated.id, updated.status)
    if ctx["previous_status"] is None:
        cache.put(updated)

async def push_status(ctx: dict):
    api, updated, endpoints = ctx["api"], ctx["updated"], ctx["endpoints"]
    payload = await OrderRepository.update_status(api, updated.id, updated.status, endpoints)
    try:
        confirmed = Order.model_validate(unwrap_record(payload))
    except SchemaError:
        # Backends that answer {"success": true} confirm nothing beyond the status
        return
    if confirmed.id == updated.id:
        ctx["cache"].put(confirmed)


# --- COMPENSATIONS (Rollbacks) ---

async def restore_display_copy(ctx: dict):
    cache, original = ctx["cache"], ctx["order"]
    cache.put(original)
    logger.info("status_reverted", order_id=original.id, status=original.status.value)


# --- BUILDER FACTORY ---

def build_status_saga() -> SagaOrchestrator:
    saga = SagaOrchestrator()
    saga.add_step("patch_display_copy", patch_display_copy, restore_display_copy)
    saga.add_step("push_status", push_status, None) # the backend write is the last step
    return saga
