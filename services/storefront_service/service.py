from typing import Union

import structlog
from pydantic import ValidationError as SchemaError

from shared.clients.upstream import ApiClient
from shared.errors import from_schema_error
from services.order_service.repository import OrderRepository, unwrap_record
from services.order_service.schemas import OrderCreate
from .schemas import InquiryCreate, SubmissionResponse

logger = structlog.get_logger(__name__)


def validate_submission(data: Union[OrderCreate, dict]) -> OrderCreate:
    """Check a storefront order form; raises ValidationError before anything is sent."""
    if isinstance(data, OrderCreate):
        return data
    try:
        return OrderCreate.model_validate(data)
    except SchemaError as e:
        raise from_schema_error(e) from e


def validate_inquiry(data: Union[InquiryCreate, dict]) -> InquiryCreate:
    if isinstance(data, InquiryCreate):
        return data
    try:
        return InquiryCreate.model_validate(data)
    except SchemaError as e:
        raise from_schema_error(e) from e


class StorefrontService:
    @staticmethod
    async def submit_order(api: ApiClient, data: Union[OrderCreate, dict]) -> SubmissionResponse:
        order = validate_submission(data)
        created = unwrap_record(await OrderRepository.create_order(api, order.to_wire()))
        order_id = created.get("id") if isinstance(created, dict) else None
        logger.info("order_submitted", order_id=order_id, quantity=order.quantity)
        return SubmissionResponse(
            message="Your order has been received. We will contact you shortly.",
            order_id=str(order_id) if order_id is not None else None,
        )

    @staticmethod
    async def submit_inquiry(api: ApiClient, data: Union[InquiryCreate, dict]) -> SubmissionResponse:
        inquiry = validate_inquiry(data)
        await api.post("inquiries", json=inquiry.model_dump())
        logger.info("inquiry_submitted", length=len(inquiry.message))
        return SubmissionResponse(message="Your inquiry has been received. We will get back to you soon.")
