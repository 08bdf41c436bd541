"""
Partner Repository - Data Access Layer for Partners (affiliates)
"""
from typing import List, Optional

from app.core.database import get_db_connection_dict
from app.domain.partner import Partner, PartnerCreate


class PartnerRepository:
    """Repository for Partner data access"""

    def find_all(self) -> List[Partner]:
        """Partners, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name, code, score, created_at
                FROM partners
                ORDER BY created_at DESC, id DESC
            """)
            return [Partner(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_code(self, code: str) -> Optional[Partner]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name, code, score, created_at
                FROM partners
                WHERE code = %s
            """, (code,))

            row = cursor.fetchone()
            return Partner(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, data: PartnerCreate) -> Partner:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO partners (name, code, score)
                VALUES (%s, %s, 0)
                RETURNING id, name, code, score, created_at
            """, (data.name, data.code))

            row = cursor.fetchone()
            conn.commit()
            return Partner(**row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def delete(self, partner_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM partners WHERE id = %s RETURNING id", (partner_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def increment_score(self, code: str) -> bool:
        """Add one order to the partner's commission score"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE partners
                SET score = score + 1
                WHERE code = %s
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
