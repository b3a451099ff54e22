import math
import re
from typing import Any, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from shared.config import settings
from .statuses import INITIAL_STATUS, OrderStatus, normalize_status, parse_status

MOBILE_PATTERN = re.compile(r"^\+?[0-9][0-9 \-]{6,14}$")


def parse_quantity(value: Any) -> int:
    """Whole-unit quantity from a number or numeric string. Unparseable input counts as 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0) if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            return max(int(value.strip()), 0)
        except ValueError:
            return 0
    return 0


def parse_amount(value: Any) -> Optional[int]:
    """Integer currency amount, or None when absent or unreadable."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.replace(",", "").strip())
        except ValueError:
            return None
    if isinstance(value, float):
        # "inf", "nan" and "1e400" parse as floats but are no amount
        return int(round(value)) if math.isfinite(value) else None
    return None


class Order(BaseModel):
    id: str
    full_name: str = Field(default="", alias="fullName")
    address: str = ""
    mobile: str = ""
    email: Optional[str] = None
    product: str = ""
    quantity: int = 0
    status: OrderStatus = INITIAL_STATUS
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    price: Optional[int] = None
    delivery_charge: Optional[int] = Field(default=None, alias="deliveryCharge")
    discount: Optional[int] = None
    courier_company: Optional[str] = Field(default=None, alias="courierCompany")
    tracking_number: Optional[str] = Field(default=None, alias="trackingNumber")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("full_name", "address", "mobile", "product", mode="before")
    @classmethod
    def _optional_text(cls, value):
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, value):
        return parse_quantity(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value):
        if value is None or value == "":
            return INITIAL_STATUS
        status = normalize_status(value)
        if status is None:
            raise ValueError(f"unknown order status {value!r}")
        return status

    @field_validator("price", "delivery_charge", "discount", mode="before")
    @classmethod
    def _amount(cls, value):
        return parse_amount(value)

    @property
    def tracking_reference(self) -> str:
        return self.tracking_number or f"TRK-{self.id[:10]}"

    def with_status(self, status: OrderStatus) -> "Order":
        return self.model_copy(update={"status": status})

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class OrderCreate(BaseModel):
    full_name: str = Field(alias="fullName", min_length=1, max_length=120)
    address: str = Field(min_length=1, max_length=500)
    mobile: str
    email: Optional[EmailStr] = None
    product: str = Field(default_factory=lambda: settings.STOREFRONT_PRODUCT, min_length=1)
    quantity: int = 1

    class Config:
        populate_by_name = True
        str_strip_whitespace = True

    @field_validator("mobile", mode="before")
    @classmethod
    def _mobile(cls, value):
        text = str(value).strip() if value is not None else ""
        if not MOBILE_PATTERN.match(text):
            raise ValueError("mobile must be a phone number of 7 to 15 digits")
        return text

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, value):
        quantity = parse_quantity(value)
        if quantity < 1:
            raise ValueError("quantity must be a whole number of at least 1")
        return quantity

    def to_wire(self) -> dict:
        payload = self.model_dump(by_alias=True, exclude_none=True)
        payload["status"] = INITIAL_STATUS.value
        return payload


class StatusUpdate(BaseModel):
    # Checked by the transition engine so unknown values become InvalidTransition
    status: str


class ListParams(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=settings.DEFAULT_PAGE_SIZE, gt=0, le=settings.MAX_PAGE_SIZE)
    status: Optional[OrderStatus] = None
    search: Optional[str] = None

    class Config:
        frozen = True

    @field_validator("status", mode="before")
    @classmethod
    def _status_filter(cls, value):
        if value is None or value == "" or value == "all":
            return None
        status = parse_status(value)
        if status is None:
            raise ValueError(f"unknown status filter {value!r}")
        return status

    @field_validator("search", mode="before")
    @classmethod
    def _search(cls, value):
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def query_params(self) -> dict:
        params = {"page": self.page, "limit": self.limit}
        if self.status is not None:
            params["status"] = self.status.value
        if self.search:
            params["search"] = self.search
        return params

    def key(self) -> tuple:
        """Logical query identity used to order responses."""
        return (self.page, self.limit, self.status, self.search)


class OrderPage(BaseModel):
    items: List[Order]
    total: int
    page: int
    limit: int
    total_pages: int


class StatusChangeResponse(BaseModel):
    order: Order
    allowed_transitions: List[OrderStatus]
