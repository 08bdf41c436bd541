"""
Partner Domain Model

Affiliates whose code gives the customer a percentage discount and earns
the partner one point per order (commission tracking).
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.coupon import normalize_code


class Partner(BaseModel):
    id: int = Field(..., description="Partner ID")
    name: str = Field(..., description="Partner name")
    code: str = Field(..., description="Partner code (upper-case)")
    score: int = Field(0, description="Orders generated with the code", ge=0)
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class PartnerCreate(BaseModel):
    """Schema for creating a new partner"""
    name: str = Field(..., min_length=1, max_length=150)
    code: str = Field(..., min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("Nome e Código são obrigatórios.")
        return name

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        code = normalize_code(value)
        if not code:
            raise ValueError("Nome e Código são obrigatórios.")
        return code
