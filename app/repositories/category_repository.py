"""
Category Repository - Data Access Layer for Categories
"""
from typing import Any, Dict, Iterable, List, Optional

from app.core.database import get_db_connection_dict
from app.domain.catalog import Category, CategoryCreate

CATEGORY_COLUMNS = "id, name, slug, image_url, parent_id, type, created_at"

UPDATABLE_COLUMNS = {'name', 'slug', 'image_url', 'parent_id', 'type'}


class CategoryRepository:
    """Repository for Category data access"""

    @staticmethod
    def _map_row_to_category(row: dict) -> Category:
        return Category(
            id=row['id'],
            name=row['name'],
            slug=row.get('slug'),
            image_url=row.get('image_url'),
            parent_id=row.get('parent_id'),
            type=row.get('type') or 'supplement',
            created_at=row.get('created_at'),
        )

    def find_all(self) -> List[Category]:
        """All categories sorted by name"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CATEGORY_COLUMNS}
                FROM categories
                ORDER BY name
            """)
            return [self._map_row_to_category(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, category_id: int) -> Optional[Category]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CATEGORY_COLUMNS}
                FROM categories
                WHERE id = %s
            """, (category_id,))

            row = cursor.fetchone()
            return self._map_row_to_category(row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_types_by_ids(self, category_ids: Iterable[int]) -> Dict[int, str]:
        """
        Map category IDs to their type (supplement, clothing, other)

        Used to word the packing notification.
        """
        ids = sorted({int(i) for i in category_ids if i})
        if not ids:
            return {}

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, type
                FROM categories
                WHERE id = ANY(%s)
            """, (ids,))
            return {row['id']: row['type'] for row in cursor.fetchall()}

        finally:
            cursor.close()
            conn.close()

    def create(self, data: CategoryCreate, slug: str) -> Category:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO categories (name, slug, image_url, parent_id, type)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING {CATEGORY_COLUMNS}
            """, (data.name, slug, data.image_url, data.parent_id, data.type.value))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_category(row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def update(self, category_id: int, fields: Dict[str, Any]) -> Optional[Category]:
        updates = {k: v for k, v in fields.items() if k in UPDATABLE_COLUMNS}
        if not updates:
            return self.find_by_id(category_id)

        set_clause = ", ".join(f"{column} = %s" for column in updates)

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE categories
                SET {set_clause}
                WHERE id = %s
                RETURNING {CATEGORY_COLUMNS}
            """, list(updates.values()) + [category_id])

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_category(row) if row else None

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def delete(self, category_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM categories WHERE id = %s RETURNING id", (category_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
