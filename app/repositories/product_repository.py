"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.
"""
from typing import Any, Dict, List, Optional, Tuple

from psycopg2.extras import Json

from app.core.database import get_db_connection_dict
from app.domain.product import Product, ProductCreate

PRODUCT_COLUMNS = """
    p.id, p.name, p.slug, p.description,
    p.price, p.original_price,
    p.category_id, c.name AS category_name, c.type AS category_type,
    p.brand_id, b.name AS brand_name,
    p.image_url, p.hover_image_url,
    p.stock, p.barcode, p.featured, p.active,
    p.sizes, p.flavors, p.flavor_details,
    p.created_at, p.updated_at
"""

PRODUCT_FROM = """
    FROM products p
    LEFT JOIN categories c ON c.id = p.category_id
    LEFT JOIN brands b ON b.id = p.brand_id
"""

# Columns the dashboard may change; JSON columns need wrapping
UPDATABLE_COLUMNS = {
    'name', 'slug', 'description', 'price', 'original_price',
    'category_id', 'brand_id', 'image_url', 'hover_image_url',
    'stock', 'barcode', 'featured', 'active',
    'sizes', 'flavors', 'flavor_details',
}
JSON_COLUMNS = {'sizes', 'flavors', 'flavor_details'}


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        """
        Helper method to map database row to Product domain model.

        JSON columns may be NULL on rows created before variations existed.
        """
        return Product(
            id=row['id'],
            name=row['name'],
            slug=row.get('slug'),
            description=row.get('description'),
            price=row['price'],
            original_price=row.get('original_price'),
            category_id=row.get('category_id'),
            category_name=row.get('category_name'),
            category_type=row.get('category_type'),
            brand_id=row.get('brand_id'),
            brand_name=row.get('brand_name'),
            image_url=row.get('image_url'),
            hover_image_url=row.get('hover_image_url'),
            stock=row.get('stock') or 0,
            barcode=row.get('barcode'),
            featured=bool(row.get('featured')),
            active=row.get('active', True),
            sizes=row.get('sizes') or [],
            flavors=row.get('flavors') or [],
            flavor_details=row.get('flavor_details') or [],
            created_at=row.get('created_at'),
            updated_at=row.get('updated_at'),
        )

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Internal product ID

        Returns:
            Product or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                {PRODUCT_FROM}
                WHERE p.id = %s
            """, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def find_by_slug(self, slug: str) -> Optional[Product]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                {PRODUCT_FROM}
                WHERE p.slug = %s
            """, (slug,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        category_id: Optional[int] = None,
        brand_id: Optional[int] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        on_sale: Optional[bool] = None,
        active: Optional[bool] = None,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            category_id: Filter by category (subcategories included)
            brand_id: Filter by brand
            search: Search in name, description or barcode
            featured: Filter new releases
            on_sale: Only products with an original price set
            active: Filter by visibility
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            # Build WHERE clause
            conditions = []
            params: List[Any] = []

            if category_id:
                conditions.append("(p.category_id = %s OR c.parent_id = %s)")
                params.extend([category_id, category_id])

            if brand_id:
                conditions.append("p.brand_id = %s")
                params.append(brand_id)

            if featured is not None:
                conditions.append("p.featured = %s")
                params.append(featured)

            if on_sale:
                conditions.append("p.original_price > 0")

            if active is not None:
                conditions.append("p.active = %s")
                params.append(active)

            if search:
                conditions.append("(p.name ILIKE %s OR p.description ILIKE %s OR p.barcode = %s)")
                search_term = f"%{search}%"
                params.extend([search_term, search_term, search])

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            # Get total count
            cursor.execute(f"""
                SELECT COUNT(*) as total
                {PRODUCT_FROM}
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            # Get products
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                {PRODUCT_FROM}
                WHERE {where_clause}
                ORDER BY p.created_at DESC, p.id DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            rows = cursor.fetchall()
            products = [self._map_row_to_product(row) for row in rows]

            return products, total

        finally:
            cursor.close()
            conn.close()

    def find_new_releases(self, limit: int = 8) -> List[Product]:
        """Featured active products, newest first"""
        products, _ = self.find_all(featured=True, active=True, limit=limit)
        return products

    def find_on_sale(self, limit: int = 8) -> List[Product]:
        products, _ = self.find_all(on_sale=True, active=True, limit=limit)
        return products

    def count(self) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COUNT(*) as total FROM products")
            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()

    def create(self, data: ProductCreate, slug: str) -> Product:
        """
        Insert a product

        Args:
            data: Validated product fields
            slug: URL slug built from the name

        Returns:
            The created Product (with category/brand names)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO products (
                    name, slug, description, price, original_price,
                    category_id, brand_id, image_url, hover_image_url,
                    stock, barcode, featured, active,
                    sizes, flavors, flavor_details
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING id
            """, (
                data.name, slug, data.description, data.price, data.original_price,
                data.category_id, data.brand_id, data.image_url, data.hover_image_url,
                data.stock, data.barcode, data.featured, data.active,
                Json(data.sizes), Json(data.flavors),
                Json([d.model_dump() for d in data.flavor_details]),
            ))

            product_id = cursor.fetchone()['id']
            conn.commit()

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

        return self.find_by_id(product_id)

    def update(self, product_id: int, fields: Dict[str, Any]) -> Optional[Product]:
        """
        Update the given columns of a product

        Unknown keys are ignored. Returns None when the product does not exist.
        """
        updates = {k: v for k, v in fields.items() if k in UPDATABLE_COLUMNS}
        if not updates:
            return self.find_by_id(product_id)

        set_parts = []
        params: List[Any] = []
        for column, value in updates.items():
            set_parts.append(f"{column} = %s")
            params.append(Json(value) if column in JSON_COLUMNS else value)
        set_parts.append("updated_at = NOW()")

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE products
                SET {", ".join(set_parts)}
                WHERE id = %s
                RETURNING id
            """, params + [product_id])

            result = cursor.fetchone()
            conn.commit()

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

        if not result:
            return None
        return self.find_by_id(product_id)

    def update_stock(self, product_id: int, stock: int) -> Optional[Product]:
        return self.update(product_id, {'stock': stock})

    def delete(self, product_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM products WHERE id = %s RETURNING id", (product_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
