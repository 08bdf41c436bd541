"""
Shipping Repository - Data Access Layer for shipping rates
"""
from typing import Any, Dict, List, Optional

from app.core.database import get_db_connection_dict
from app.domain.shipping import ShippingRate, ShippingRateCreate

RATE_COLUMNS = "id, city_name, state, base_fee, estimated_delivery_time, is_active, created_at"

UPDATABLE_COLUMNS = {'city_name', 'state', 'base_fee', 'estimated_delivery_time', 'is_active'}


class ShippingRepository:
    """Repository for ShippingRate data access"""

    def find_all(self, active_only: bool = False) -> List[ShippingRate]:
        """
        List shipping rates

        Args:
            active_only: Storefront listing (active rates, cheapest first)

        Returns:
            List of shipping rates
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            if active_only:
                cursor.execute(f"""
                    SELECT {RATE_COLUMNS}
                    FROM shipping_rates
                    WHERE is_active = true
                    ORDER BY base_fee, city_name
                """)
            else:
                cursor.execute(f"""
                    SELECT {RATE_COLUMNS}
                    FROM shipping_rates
                    ORDER BY city_name
                """)

            return [ShippingRate(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, rate_id: int) -> Optional[ShippingRate]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {RATE_COLUMNS}
                FROM shipping_rates
                WHERE id = %s
            """, (rate_id,))

            row = cursor.fetchone()
            return ShippingRate(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, data: ShippingRateCreate) -> ShippingRate:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO shipping_rates (
                    city_name, state, base_fee, estimated_delivery_time, is_active
                )
                VALUES (%s, %s, %s, %s, %s)
                RETURNING {RATE_COLUMNS}
            """, (
                data.city_name, data.state.upper(), data.base_fee,
                data.estimated_delivery_time, data.is_active,
            ))

            row = cursor.fetchone()
            conn.commit()
            return ShippingRate(**row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def update(self, rate_id: int, fields: Dict[str, Any]) -> Optional[ShippingRate]:
        updates = {k: v for k, v in fields.items() if k in UPDATABLE_COLUMNS}
        if not updates:
            return self.find_by_id(rate_id)

        set_clause = ", ".join(f"{column} = %s" for column in updates)

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE shipping_rates
                SET {set_clause}
                WHERE id = %s
                RETURNING {RATE_COLUMNS}
            """, list(updates.values()) + [rate_id])

            row = cursor.fetchone()
            conn.commit()
            return ShippingRate(**row) if row else None

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def delete(self, rate_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM shipping_rates WHERE id = %s RETURNING id", (rate_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
