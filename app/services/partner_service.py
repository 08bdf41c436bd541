"""
Partner Service
Affiliate codes: CRUD and validation at checkout
"""
import logging
from decimal import Decimal
from typing import List

import psycopg2

from app.core.config import settings
from app.core.exceptions import DuplicateCodeError, NotFoundError
from app.domain.coupon import CouponValidation, DiscountSource, DiscountType, normalize_code
from app.domain.partner import Partner, PartnerCreate
from app.repositories.partner_repository import PartnerRepository

logger = logging.getLogger(__name__)


class PartnerService:
    """Service for partner (affiliate) codes"""

    def __init__(self):
        self.partner_repo = PartnerRepository()

    def list_partners(self) -> List[Partner]:
        return self.partner_repo.find_all()

    def create_partner(self, data: PartnerCreate) -> Partner:
        """
        Register a partner

        Raises:
            DuplicateCodeError: if another partner already uses the code
        """
        if self.partner_repo.find_by_code(data.code):
            raise DuplicateCodeError("Este código de parceiro já existe.")

        try:
            partner = self.partner_repo.create(data)
        except psycopg2.IntegrityError:
            raise DuplicateCodeError("Este código de parceiro já existe.")

        logger.info(f"Partner created: {partner.name} ({partner.code})")
        return partner

    def delete_partner(self, partner_id: int) -> None:
        if not self.partner_repo.delete(partner_id):
            raise NotFoundError(f"Parceiro {partner_id} não encontrado")

    def validate_partner_code(self, code: str) -> CouponValidation:
        """
        Check whether a code belongs to a partner

        Partner codes always give PARTNER_DISCOUNT_PCT percent off.
        """
        partner = self.partner_repo.find_by_code(normalize_code(code))
        if not partner:
            return CouponValidation.invalid("Cupom inválido.")

        pct = Decimal(settings.PARTNER_DISCOUNT_PCT)
        pct_label = format(pct.normalize(), "f")

        return CouponValidation(
            valid=True,
            message=f"Cupom de {partner.name} aplicado! ({pct_label}% OFF)",
            source=DiscountSource.PARTNER,
            code=partner.code,
            discount_type=DiscountType.PERCENT,
            value=pct,
            name=partner.name,
        )
