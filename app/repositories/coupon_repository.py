"""
Coupon Repository - Data Access Layer for Coupons

Usage increments are done in a single guarded UPDATE so concurrent
checkouts can never push used_count past usage_limit.
"""
from typing import List, Optional

from app.core.database import get_db_connection_dict
from app.domain.coupon import Coupon, CouponCreate

COUPON_COLUMNS = """
    c.id, c.code, c.discount_type, c.discount_value, c.expiration_date,
    c.usage_limit, c.used_count, c.active, c.partner_id,
    COALESCE(p.name, c.partner_name) AS partner_name,
    c.created_at
"""


class CouponRepository:
    """Repository for Coupon data access"""

    @staticmethod
    def _map_row_to_coupon(row: dict) -> Coupon:
        return Coupon(
            id=row['id'],
            code=row['code'],
            discount_type=row['discount_type'],
            discount_value=row['discount_value'],
            expiration_date=row.get('expiration_date'),
            usage_limit=row.get('usage_limit'),
            used_count=row.get('used_count') or 0,
            active=row.get('active', True),
            partner_id=row.get('partner_id'),
            partner_name=row.get('partner_name'),
            created_at=row.get('created_at'),
        )

    def find_all(self) -> List[Coupon]:
        """All coupons, newest first, with the partner name"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {COUPON_COLUMNS}
                FROM coupons c
                LEFT JOIN partners p ON p.id = c.partner_id
                ORDER BY c.created_at DESC, c.id DESC
            """)
            return [self._map_row_to_coupon(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_code(self, code: str) -> Optional[Coupon]:
        """
        Find coupon by code

        Args:
            code: Upper-case coupon code

        Returns:
            Coupon or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {COUPON_COLUMNS}
                FROM coupons c
                LEFT JOIN partners p ON p.id = c.partner_id
                WHERE c.code = %s
            """, (code,))

            row = cursor.fetchone()
            return self._map_row_to_coupon(row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, data: CouponCreate) -> Coupon:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO coupons (
                    code, discount_type, discount_value, expiration_date,
                    usage_limit, used_count, active, partner_id, partner_name
                )
                VALUES (%s, %s, %s, %s, %s, 0, %s, %s, %s)
                RETURNING id, code, discount_type, discount_value, expiration_date,
                          usage_limit, used_count, active, partner_id, partner_name,
                          created_at
            """, (
                data.code, data.discount_type.value, data.discount_value,
                data.expiration_date, data.usage_limit, data.active,
                data.partner_id, data.partner_name,
            ))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_coupon(row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def delete(self, coupon_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM coupons WHERE id = %s RETURNING id", (coupon_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def set_active(self, coupon_id: int, active: bool) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE coupons
                SET active = %s
                WHERE id = %s
                RETURNING id
            """, (active, coupon_id))

            updated = cursor.fetchone() is not None
            conn.commit()
            return updated

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def increment_usage(self, code: str) -> bool:
        """
        Count one more use of a coupon

        The usage limit is checked in the same statement (NULL or 0 means
        unlimited).

        Returns:
            True if a row was updated, False if the coupon does not exist
            or is already exhausted
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE coupons
                SET used_count = used_count + 1
                WHERE code = %s
                  AND (usage_limit IS NULL OR usage_limit = 0 OR used_count < usage_limit)
                RETURNING id
            """, (code,))

            updated = cursor.fetchone() is not None
            conn.commit()
            return updated

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
