"""
Coupon Service
Coupon CRUD, checkout validation, discount computation and usage tracking

Validation order for a code typed at checkout:
1. Coupon with that code (inactive -> expired -> exhausted -> valid)
2. Partner with that code (fixed percentage)
3. Otherwise invalid

A cart carries a single code: applying a new one replaces the previous one.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import psycopg2

from app.core.exceptions import DuplicateCodeError, NotFoundError
from app.domain.coupon import (
    Coupon,
    CouponCreate,
    CouponValidation,
    DiscountBreakdown,
    normalize_code,
)
from app.repositories.coupon_repository import CouponRepository
from app.repositories.partner_repository import PartnerRepository
from app.services.partner_service import PartnerService

logger = logging.getLogger(__name__)


class CouponService:
    """
    Service for discount codes

    This service handles:
    - Coupon management from the dashboard
    - Code validation (coupons first, then partner codes)
    - Discount computation
    - Usage counting after checkout
    """

    def __init__(self):
        self.coupon_repo = CouponRepository()
        self.partner_repo = PartnerRepository()
        self.partner_service = PartnerService()

    # ========================================
    # Management
    # ========================================

    def list_coupons(self) -> List[Coupon]:
        return self.coupon_repo.find_all()

    def create_coupon(self, data: CouponCreate) -> Coupon:
        """
        Create a coupon (code upper-cased, usage starts at zero)

        Raises:
            DuplicateCodeError: if the code already exists
        """
        if self.coupon_repo.find_by_code(data.code):
            raise DuplicateCodeError("Este código de cupom já existe.")

        try:
            coupon = self.coupon_repo.create(data)
        except psycopg2.IntegrityError:
            raise DuplicateCodeError("Este código de cupom já existe.")

        logger.info(f"Coupon created: {coupon.code} ({coupon.discount_type.value} {coupon.discount_value})")
        return coupon

    def delete_coupon(self, coupon_id: int) -> None:
        if not self.coupon_repo.delete(coupon_id):
            raise NotFoundError(f"Cupom {coupon_id} não encontrado")

    def toggle_coupon_status(self, coupon_id: int, current_status: bool) -> bool:
        """
        Flip the active flag from the value shown in the dashboard

        Returns:
            The new status
        """
        new_status = not current_status
        if not self.coupon_repo.set_active(coupon_id, new_status):
            raise NotFoundError(f"Cupom {coupon_id} não encontrado")
        return new_status

    # ========================================
    # Checkout
    # ========================================

    def validate_coupon(self, code: str, now: Optional[datetime] = None) -> CouponValidation:
        """
        Validate a code typed at checkout

        Args:
            code: Code as typed (case and spaces ignored)
            now: Reference time for expiration (defaults to now, UTC)

        Returns:
            CouponValidation with the discount or the reason it was refused
        """
        normalized = normalize_code(code)
        if not normalized:
            return CouponValidation.invalid("Cupom inválido.")

        coupon = self.coupon_repo.find_by_code(normalized)

        if coupon is None:
            return self.partner_service.validate_partner_code(normalized)

        if not coupon.active:
            return CouponValidation.invalid("Cupom inativo.")

        if coupon.is_expired(now):
            return CouponValidation.invalid("Cupom expirado.")

        if coupon.is_exhausted:
            return CouponValidation.invalid("Cupom esgotado.")

        return CouponValidation.from_coupon(coupon)

    @staticmethod
    def compute_discount(subtotal: Decimal, validation: Optional[CouponValidation]) -> DiscountBreakdown:
        """Apply a validation to a subtotal (no validation means no discount)"""
        if validation is None:
            validation = CouponValidation.invalid("")
        return validation.compute(subtotal)

    def apply_code(
        self,
        code: str,
        subtotal: Decimal,
        current_code: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Apply a code to a cart that may already carry one

        Codes never stack: a valid new code replaces current_code, an
        invalid one leaves the cart untouched.

        Returns:
            Dict with validation, the breakdown for the active code and
            which code was replaced
        """
        validation = self.validate_coupon(code)
        current = normalize_code(current_code) or None

        if validation.valid:
            active = validation
            replaced = current if current and current != validation.code else None
        else:
            active = self.validate_coupon(current) if current else None
            if active is not None and not active.valid:
                active = None
            replaced = None

        breakdown = self.compute_discount(subtotal, active)

        return {
            'validation': validation.to_dict(),
            'active_code': active.code if active else None,
            'replaced_code': replaced,
            'breakdown': breakdown.to_dict(),
        }

    def increment_usage(self, code: Optional[str]) -> bool:
        """
        Count one use of a code after a successful checkout

        Coupons get used_count + 1 (never past the usage limit); partner
        codes add one point to the partner score instead. Errors are
        logged, never raised.

        Returns:
            True if a counter was incremented
        """
        normalized = normalize_code(code)
        if not normalized:
            return False

        try:
            if self.coupon_repo.find_by_code(normalized):
                updated = self.coupon_repo.increment_usage(normalized)
                if not updated:
                    logger.warning(f"Coupon {normalized} reached its usage limit, usage not counted")
                return updated

            updated = self.partner_repo.increment_score(normalized)
            if not updated:
                logger.warning(f"Code {normalized} not found while counting usage")
            return updated

        except Exception as e:
            logger.error(f"Error incrementing usage for {normalized}: {e}")
            return False
