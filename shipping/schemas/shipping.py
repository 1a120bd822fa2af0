from __future__ import annotations

from pydantic import BaseModel, Field
from typing import List, Optional


class CartItem(BaseModel):
    product_id: Optional[str] = Field(default=None, alias="productId")
    quantity: int = Field(ge=0)

    model_config = {"extra": "allow", "populate_by_name": True}


class Address(BaseModel):
    street_address: Optional[str] = Field(default=None, alias="streetAddress")
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: str = Field(alias="zipCode")

    model_config = {"extra": "allow", "populate_by_name": True}


class GetQuoteRequest(BaseModel):
    items: List[CartItem] = Field(default_factory=list)
    address: Optional[Address] = None

    model_config = {"extra": "allow"}

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)


class MoneyRead(BaseModel):
    currency_code: str = Field(alias="currencyCode")
    units: int
    nanos: int

    model_config = {"populate_by_name": True, "from_attributes": True}


class GetQuoteResponse(BaseModel):
    cost_usd: MoneyRead = Field(alias="costUsd")

    model_config = {"populate_by_name": True}


class ShipOrderRequest(BaseModel):
    """Opaque order placeholder; any fields are accepted and ignored."""

    model_config = {"extra": "allow"}


class ShipOrderResponse(BaseModel):
    tracking_id: str = Field(alias="trackingId")

    model_config = {"populate_by_name": True}
