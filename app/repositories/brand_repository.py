"""
Brand Repository - Data Access Layer for Brands
"""
from typing import List, Optional

from app.core.database import get_db_connection_dict
from app.domain.catalog import Brand, BrandCreate


class BrandRepository:
    """Repository for Brand data access"""

    @staticmethod
    def _map_row_to_brand(row: dict) -> Brand:
        return Brand(
            id=row['id'],
            name=row['name'],
            slug=row.get('slug'),
            logo_url=row.get('logo_url'),
            created_at=row.get('created_at'),
        )

    def find_all(self) -> List[Brand]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name, slug, logo_url, created_at
                FROM brands
                ORDER BY name
            """)
            return [self._map_row_to_brand(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, brand_id: int) -> Optional[Brand]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name, slug, logo_url, created_at
                FROM brands
                WHERE id = %s
            """, (brand_id,))

            row = cursor.fetchone()
            return self._map_row_to_brand(row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, data: BrandCreate, slug: str) -> Brand:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO brands (name, slug, logo_url)
                VALUES (%s, %s, %s)
                RETURNING id, name, slug, logo_url, created_at
            """, (data.name, slug, data.logo_url))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_brand(row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def delete(self, brand_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM brands WHERE id = %s RETURNING id", (brand_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
