"""
Cart Domain Models

Server-side copy of the storefront cart, kept so abandoned carts can be
recovered by the marketing webhook.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CartStatus(str, Enum):
    OPEN = "open"
    ABANDONED = "abandoned"
    CONVERTED = "converted"


class Cart(BaseModel):
    id: int
    session_id: str = Field(..., description="Client generated cart UUID")
    items: List[Dict[str, Any]] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    user_email: Optional[str] = None
    user_phone: Optional[str] = None
    status: CartStatus = CartStatus.OPEN
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def has_contact(self) -> bool:
        return bool(self.user_email or self.user_phone)

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["total"] = float(self.total)
        return data


class CartSync(BaseModel):
    """Payload sent by the storefront whenever the cart changes"""
    session_id: str = Field(..., min_length=1, max_length=100)
    items: List[Dict[str, Any]] = Field(default_factory=list)
    total: Decimal = Field(Decimal("0"), ge=0)
    email: Optional[str] = None
    phone: Optional[str] = None
