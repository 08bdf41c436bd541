"""
Promotion Repository - Data Access Layer for home page banners
"""
from typing import Any, Dict, List, Optional

from app.core.database import get_db_connection_dict
from app.domain.catalog import Promotion, PromotionCreate

PROMOTION_COLUMNS = """
    id, title, description, image_url, mobile_image_url,
    link, position, active, created_at
"""

UPDATABLE_COLUMNS = {
    'title', 'description', 'image_url', 'mobile_image_url',
    'link', 'position', 'active',
}


class PromotionRepository:
    """Repository for Promotion data access"""

    def find_all(self, active: Optional[bool] = None) -> List[Promotion]:
        """Promotions newest first, optionally only the active ones"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            if active is None:
                cursor.execute(f"""
                    SELECT {PROMOTION_COLUMNS}
                    FROM promotions
                    ORDER BY created_at DESC, id DESC
                """)
            else:
                cursor.execute(f"""
                    SELECT {PROMOTION_COLUMNS}
                    FROM promotions
                    WHERE active = %s
                    ORDER BY created_at DESC, id DESC
                """, (active,))

            return [Promotion(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def create(self, data: PromotionCreate) -> Promotion:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO promotions (
                    title, description, image_url, mobile_image_url,
                    link, position, active
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING {PROMOTION_COLUMNS}
            """, (
                data.title, data.description, data.image_url, data.mobile_image_url,
                data.link, data.position.value, data.active,
            ))

            row = cursor.fetchone()
            conn.commit()
            return Promotion(**row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def update(self, promotion_id: int, fields: Dict[str, Any]) -> Optional[Promotion]:
        updates = {k: v for k, v in fields.items() if k in UPDATABLE_COLUMNS}
        if not updates:
            return None

        set_clause = ", ".join(f"{column} = %s" for column in updates)

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE promotions
                SET {set_clause}
                WHERE id = %s
                RETURNING {PROMOTION_COLUMNS}
            """, list(updates.values()) + [promotion_id])

            row = cursor.fetchone()
            conn.commit()
            return Promotion(**row) if row else None

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def delete(self, promotion_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM promotions WHERE id = %s RETURNING id", (promotion_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
