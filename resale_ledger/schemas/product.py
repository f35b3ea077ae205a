from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from resale_ledger.schemas.store import StoreRead


class ProductBase(BaseModel):
    name: str = Field(min_length=1)
    store_id: int
    purchase_price: float
    purchase_date: date
    sale_price: Optional[float] = None
    sale_date: Optional[date] = None
    sold_at: Optional[str] = None
    product_url: Optional[str] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    name: Optional[str] = Field(default=None, min_length=1)
    store_id: Optional[int] = None
    purchase_price: Optional[float] = None
    purchase_date: Optional[date] = None
    sale_price: Optional[float] = None
    sale_date: Optional[date] = None
    sold_at: Optional[str] = None
    product_url: Optional[str] = None

    @field_validator("name", "store_id", "purchase_price", "purchase_date")
    @classmethod
    def required_fields_not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be cleared")
        return value


class ProductRead(ProductBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProductWithStore(ProductRead):
    store: Optional[StoreRead] = None
    resolved_url: Optional[str] = None
