"""
Shipping Service
Shipping rate management and delivery fee quotes
"""
from decimal import Decimal
from typing import List, Optional

from app.core.exceptions import NotFoundError, ValidationError
from app.domain.order import DeliveryMethod
from app.domain.shipping import ShippingQuote, ShippingRate, ShippingRateCreate, ShippingRateUpdate
from app.repositories.shipping_repository import ShippingRepository

UNAVAILABLE_MESSAGE = "Frete indisponível para esta região."


class ShippingService:
    def __init__(self):
        self.shipping_repo = ShippingRepository()

    def list_rates(self, active_only: bool = False) -> List[ShippingRate]:
        return self.shipping_repo.find_all(active_only=active_only)

    def create_rate(self, data: ShippingRateCreate) -> ShippingRate:
        return self.shipping_repo.create(data)

    def update_rate(self, rate_id: int, data: ShippingRateUpdate) -> ShippingRate:
        fields = data.model_dump(exclude_unset=True)
        if 'state' in fields and fields['state']:
            fields['state'] = fields['state'].upper()

        rate = self.shipping_repo.update(rate_id, fields)
        if rate is None:
            raise NotFoundError(f"Frete {rate_id} não encontrado")
        return rate

    def delete_rate(self, rate_id: int) -> None:
        if not self.shipping_repo.delete(rate_id):
            raise NotFoundError(f"Frete {rate_id} não encontrado")

    def quote_shipping(self, method: DeliveryMethod, rate_id: Optional[int] = None) -> ShippingQuote:
        """
        Fee for the chosen delivery method

        pickup is free; shipping uses the fee of an active rate.

        Raises:
            ValidationError: no active rate for the requested region
        """
        if method == DeliveryMethod.PICKUP:
            return ShippingQuote(method=method, fee=Decimal("0.00"))

        rate = self.shipping_repo.find_by_id(rate_id) if rate_id else None
        if rate is None or not rate.is_active:
            raise ValidationError(UNAVAILABLE_MESSAGE)

        return ShippingQuote(
            method=method,
            fee=rate.base_fee,
            rate_id=rate.id,
            city_name=rate.city_name,
            estimated_delivery_time=rate.estimated_delivery_time,
        )
