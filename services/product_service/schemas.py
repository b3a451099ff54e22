import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from services.order_service.schemas import parse_amount

_NON_WORD = re.compile(r"[^\w]+")


def slugify(text: str) -> str:
    return _NON_WORD.sub("-", text.strip().lower()).strip("-")


class ProductStatus(str, Enum):
    AVAILABLE = "Available"
    UNAVAILABLE = "Unavailable"


def _product_status(value):
    if isinstance(value, str):
        for status in ProductStatus:
            if status.value.lower() == value.strip().lower():
                return status
    return value


class Product(BaseModel):
    id: Optional[str] = None
    name: str = Field(min_length=1)
    price: int = Field(ge=0)
    status: ProductStatus = ProductStatus.AVAILABLE
    image: Optional[str] = None

    class Config:
        frozen = True

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, value):
        amount = parse_amount(value)
        return value if amount is None else amount

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value):
        return _product_status(value)

    @property
    def slug(self) -> str:
        return slugify(self.name)


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    price: int = Field(ge=0)
    status: ProductStatus = ProductStatus.AVAILABLE
    image: Optional[str] = None

    class Config:
        str_strip_whitespace = True

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value):
        return _product_status(value)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    price: Optional[int] = Field(default=None, ge=0)
    status: Optional[ProductStatus] = None
    image: Optional[str] = None

    class Config:
        str_strip_whitespace = True

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value):
        return _product_status(value)
