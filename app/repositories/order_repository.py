"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order domain models.
Line items and the shipping address live in JSONB columns of the orders row.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from psycopg2.extras import Json

from app.core.database import get_db_connection_dict
from app.domain.order import Order, OrderCreate

ORDER_COLUMNS = """
    id, user_id, user_name, user_email, user_phone,
    items, subtotal, discount_amount, coupon_code, shipping_cost, total,
    status, payment_id, payment_method, shipping_address, channel,
    created_at, updated_at
"""


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    """

    @staticmethod
    def _map_row_to_order(row: dict) -> Order:
        return Order(
            id=row['id'],
            user_id=row.get('user_id'),
            user_name=row.get('user_name'),
            user_email=row.get('user_email'),
            user_phone=row.get('user_phone'),
            items=row.get('items') or [],
            subtotal=row.get('subtotal') or 0,
            discount_amount=row.get('discount_amount') or 0,
            coupon_code=row.get('coupon_code'),
            shipping_cost=row.get('shipping_cost') or 0,
            total=row['total'],
            status=row.get('status') or 'pending',
            payment_id=row.get('payment_id'),
            payment_method=row.get('payment_method'),
            shipping_address=row.get('shipping_address'),
            channel=row.get('channel') or 'ecommerce',
            created_at=row.get('created_at'),
            updated_at=row.get('updated_at'),
        )

    def find_by_id(self, order_id: int) -> Optional[Order]:
        """
        Find order by ID

        Args:
            order_id: Internal order ID

        Returns:
            Order or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE id = %s
            """, (order_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_order(row)

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        status: Optional[str] = None,
        channel: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders with filters

        Args:
            status: Filter by order status
            channel: Filter by sales channel
            from_date: Filter orders from this date
            to_date: Filter orders until this date
            search: Search by order ID, customer name, email or phone
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of orders, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            # Build WHERE clause
            conditions = []
            params: List[Any] = []

            if status:
                conditions.append("status = %s")
                params.append(status)

            if channel:
                conditions.append("channel = %s")
                params.append(channel)

            if from_date:
                conditions.append("created_at >= %s")
                params.append(from_date)

            if to_date:
                conditions.append("created_at < (%s::date + INTERVAL '1 day')")
                params.append(to_date)

            if search:
                conditions.append("""(
                    id::text = %s
                    OR user_name ILIKE %s
                    OR user_email ILIKE %s
                    OR user_phone ILIKE %s
                )""")
                search_term = f"%{search}%"
                params.extend([search.lstrip('#0') or search, search_term, search_term, search_term])

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            # Get total count
            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM orders
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            # Get orders
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE {where_clause}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            orders = [self._map_row_to_order(row) for row in cursor.fetchall()]

            return orders, total

        finally:
            cursor.close()
            conn.close()

    def find_by_user(self, user_id: str) -> List[Order]:
        """Orders of a customer account, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE user_id = %s
                ORDER BY created_at DESC, id DESC
            """, (user_id,))

            return [self._map_row_to_order(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def create(self, data: OrderCreate) -> Order:
        """
        Insert an order

        Args:
            data: Validated order (subtotal computed from items when missing)

        Returns:
            The created Order
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        address = data.shipping_address.model_dump(mode="json") if data.shipping_address else None

        try:
            cursor.execute(f"""
                INSERT INTO orders (
                    user_id, user_name, user_email, user_phone,
                    items, subtotal, discount_amount, coupon_code, shipping_cost, total,
                    status, payment_id, payment_method, shipping_address, channel
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {ORDER_COLUMNS}
            """, (
                data.user_id, data.user_name, data.user_email, data.user_phone,
                Json([item.model_dump(mode="json", exclude_none=True) for item in data.items]),
                data.computed_subtotal, data.discount_amount, data.coupon_code,
                data.shipping_cost, data.total,
                data.status.value, data.payment_id, data.payment_method,
                Json(address) if address is not None else None,
                data.channel,
            ))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_order(row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def update_status(
        self,
        order_id: int,
        status: str,
        payment_id: Optional[str] = None
    ) -> Optional[Order]:
        """
        Change an order status (and optionally record the payment reference)

        Returns:
            The updated Order, or None if the order does not exist
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE orders
                SET status = %s,
                    payment_id = COALESCE(%s, payment_id),
                    updated_at = NOW()
                WHERE id = %s
                RETURNING {ORDER_COLUMNS}
            """, (status, payment_id, order_id))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_order(row) if row else None

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get order totals for the dashboard

        Returns:
            Dict with total_revenue (non-cancelled orders), total_orders
            and total_customers (distinct account or e-mail)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    COUNT(*) as total_orders,
                    COALESCE(SUM(total) FILTER (WHERE status <> 'cancelled'), 0) as total_revenue,
                    COUNT(DISTINCT COALESCE(user_id, LOWER(user_email))) as total_customers
                FROM orders
            """)
            totals = cursor.fetchone()

            return {
                'total_orders': totals['total_orders'],
                'total_revenue': float(totals['total_revenue']),
                'total_customers': totals['total_customers'],
            }

        finally:
            cursor.close()
            conn.close()

    def get_daily_revenue(self, since: date, timezone_name: str) -> Dict[date, float]:
        """
        Revenue of non-cancelled orders per store-local day

        Args:
            since: First day included
            timezone_name: Store timezone used to cut days

        Returns:
            Dict mapping day -> revenue (days without orders are absent)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    (created_at AT TIME ZONE %s)::date as day,
                    COALESCE(SUM(total), 0) as revenue
                FROM orders
                WHERE status <> 'cancelled'
                  AND (created_at AT TIME ZONE %s)::date >= %s
                GROUP BY day
                ORDER BY day
            """, (timezone_name, timezone_name, since))

            return {row['day']: float(row['revenue']) for row in cursor.fetchall()}

        finally:
            cursor.close()
            conn.close()

    def get_revenue_by_category(self) -> List[Dict[str, Any]]:
        """
        Revenue of non-cancelled orders grouped by the category of each line item

        Items without a known category are grouped under "Sem Categoria".
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    COALESCE(c.name, 'Sem Categoria') as name,
                    COALESCE(SUM((item->>'price')::numeric * (item->>'quantity')::int), 0) as value
                FROM orders o
                CROSS JOIN LATERAL jsonb_array_elements(o.items) AS item
                LEFT JOIN categories c ON c.id = NULLIF(item->>'category_id', '')::int
                WHERE o.status <> 'cancelled'
                GROUP BY 1
                ORDER BY value DESC
            """)

            return [
                {'name': row['name'], 'value': float(row['value'])}
                for row in cursor.fetchall()
            ]

        finally:
            cursor.close()
            conn.close()
