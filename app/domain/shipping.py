"""
Shipping Domain Models

Flat delivery fee per city plus the in-store pickup option.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.domain.order import DeliveryMethod


class ShippingRate(BaseModel):
    id: int = Field(..., description="Shipping rate ID")
    city_name: str = Field(..., description="City served")
    state: str = Field("SP", description="State (UF)")
    base_fee: Decimal = Field(..., description="Delivery fee", ge=0)
    estimated_delivery_time: int = Field(5, description="Delivery estimate in days", ge=0)
    is_active: bool = True
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["base_fee"] = float(self.base_fee)
        return data


class ShippingRateCreate(BaseModel):
    city_name: str = Field(..., min_length=1, max_length=150)
    state: str = Field("SP", min_length=2, max_length=2)
    base_fee: Decimal = Field(..., ge=0)
    estimated_delivery_time: int = Field(5, ge=0)
    is_active: bool = True


class ShippingRateUpdate(BaseModel):
    city_name: Optional[str] = None
    state: Optional[str] = Field(None, min_length=2, max_length=2)
    base_fee: Optional[Decimal] = Field(None, ge=0)
    estimated_delivery_time: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ShippingQuoteRequest(BaseModel):
    method: DeliveryMethod
    rate_id: Optional[int] = None


class ShippingQuote(BaseModel):
    """Fee charged for the chosen delivery method"""
    method: DeliveryMethod
    fee: Decimal
    rate_id: Optional[int] = None
    city_name: Optional[str] = None
    estimated_delivery_time: Optional[int] = None

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json", exclude_none=True)
        data["fee"] = float(self.fee)
        return data
