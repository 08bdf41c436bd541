"""
Cart Repository - server-side copy of storefront carts
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from psycopg2.extras import Json

from app.core.database import get_db_connection_dict
from app.domain.cart import Cart

CART_COLUMNS = """
    id, session_id, items, total, user_email, user_phone,
    status, created_at, updated_at
"""


class CartRepository:
    """Repository for Cart data access"""

    @staticmethod
    def _map_row_to_cart(row: dict) -> Cart:
        return Cart(
            id=row['id'],
            session_id=row['session_id'],
            items=row.get('items') or [],
            total=row.get('total') or 0,
            user_email=row.get('user_email'),
            user_phone=row.get('user_phone'),
            status=row.get('status') or 'open',
            created_at=row.get('created_at'),
            updated_at=row.get('updated_at'),
        )

    def upsert(
        self,
        session_id: str,
        items: List[Dict[str, Any]],
        total: Decimal,
        user_email: Optional[str] = None,
        user_phone: Optional[str] = None
    ) -> Cart:
        """
        Create or update the cart of a session

        A cart that changes goes back to open. Contact fields already known
        are kept when the storefront sends none.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO carts (session_id, items, total, user_email, user_phone, status)
                VALUES (%s, %s, %s, %s, %s, 'open')
                ON CONFLICT (session_id) DO UPDATE SET
                    items = EXCLUDED.items,
                    total = EXCLUDED.total,
                    user_email = COALESCE(EXCLUDED.user_email, carts.user_email),
                    user_phone = COALESCE(EXCLUDED.user_phone, carts.user_phone),
                    status = 'open',
                    updated_at = NOW()
                RETURNING {CART_COLUMNS}
            """, (session_id, Json(items), total, user_email, user_phone))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_cart(row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def find_abandoned(self, older_than: datetime) -> List[Cart]:
        """
        Open carts untouched since older_than that carry a contact

        Args:
            older_than: Cut-off timestamp (timezone aware)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CART_COLUMNS}
                FROM carts
                WHERE status = 'open'
                  AND COALESCE(updated_at, created_at) < %s
                  AND (COALESCE(user_email, '') <> '' OR COALESCE(user_phone, '') <> '')
                  AND jsonb_array_length(items) > 0
                ORDER BY updated_at
            """, (older_than,))

            return [self._map_row_to_cart(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def set_status(self, cart_id: int, status: str) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE carts
                SET status = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING id
            """, (status, cart_id))

            updated = cursor.fetchone() is not None
            conn.commit()
            return updated

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def mark_converted(self, session_id: str) -> bool:
        """Checkout finished for this session"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE carts
                SET status = 'converted', updated_at = NOW()
                WHERE session_id = %s
                RETURNING id
            """, (session_id,))

            updated = cursor.fetchone() is not None
            conn.commit()
            return updated

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
