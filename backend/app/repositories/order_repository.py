"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order domain models.

Author: TM3
Date: 2025-10-17
"""
from typing import List, Optional, Tuple, Dict
from app.domain.order import Order, OrderItem
from app.core.database import get_db_connection_dict_with_retry


ORDER_COLUMNS = """
    id, user_id, customer_name, customer_email, customer_phone, shipping_address,
    total_amount, payment_method, payment_status, status, transaction_id,
    created_at, updated_at
"""

ORDER_ITEM_QUERY = """
    SELECT
        oi.id, oi.order_id, oi.product_id, oi.quantity, oi.price, oi.created_at,
        p.name as product_name
    FROM order_items oi
    LEFT JOIN products p ON oi.product_id = p.id
"""


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    Returns Order domain models with their items.
    """

    @staticmethod
    def _map_row_to_item(row: dict) -> OrderItem:
        return OrderItem(
            id=str(row['id']) if row.get('id') else None,
            order_id=str(row['order_id']),
            product_id=str(row['product_id']),
            quantity=row['quantity'],
            price=row['price'],
            product_name=row.get('product_name'),
            created_at=row.get('created_at')
        )

    @staticmethod
    def _map_row_to_order(row: dict, items: Optional[List[OrderItem]] = None) -> Order:
        order_dict = dict(row)
        order_dict['id'] = str(order_dict['id'])
        if order_dict.get('user_id'):
            order_dict['user_id'] = str(order_dict['user_id'])
        order_dict['items'] = items or []
        return Order(**order_dict)

    def create_with_items(
        self,
        order_id: str,
        customer_name: str,
        customer_email: str,
        customer_phone: Optional[str],
        shipping_address: Optional[str],
        total_amount,
        items: List[Dict],
        user_id: Optional[str] = None,
        payment_method: str = "pagadito",
        transaction_id: Optional[str] = None
    ) -> Order:
        """
        Create an order and its items in one transaction

        Args:
            items: dicts with product_id, quantity, price

        Returns:
            The created Order with items
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO orders (
                    id, user_id, customer_name, customer_email, customer_phone,
                    shipping_address, total_amount, payment_method, transaction_id
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {ORDER_COLUMNS}
            """, (
                order_id, user_id, customer_name, customer_email, customer_phone,
                shipping_address, total_amount, payment_method, transaction_id
            ))
            order_row = cursor.fetchone()

            order_items = []
            for item in items:
                cursor.execute("""
                    INSERT INTO order_items (order_id, product_id, quantity, price)
                    VALUES (%s, %s, %s, %s)
                    RETURNING id, order_id, product_id, quantity, price, created_at
                """, (order_id, item['product_id'], item['quantity'], item['price']))
                item_row = dict(cursor.fetchone())
                item_row['product_name'] = item.get('product_name')
                order_items.append(self._map_row_to_item(item_row))

            conn.commit()
            return self._map_row_to_order(order_row, order_items)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, order_id: str) -> Optional[Order]:
        """
        Find order by ID with items

        Returns:
            Order with items or None if not found
        """
        conn = get_db_connection_dict_with_retry()
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

            cursor.execute(f"""
                {ORDER_ITEM_QUERY}
                WHERE oi.order_id = %s
                ORDER BY oi.created_at, oi.id
            """, (order_id,))

            items = [self._map_row_to_item(item) for item in cursor.fetchall()]
            return self._map_row_to_order(row, items)

        finally:
            cursor.close()
            conn.close()

    def find_by_transaction_id(self, transaction_id: str) -> Optional[Order]:
        """Find the order a gateway payment belongs to (with items)"""
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE transaction_id = %s
            """, (transaction_id,))

            row = cursor.fetchone()
            if not row:
                return None

            cursor.execute(f"""
                {ORDER_ITEM_QUERY}
                WHERE oi.order_id = %s
                ORDER BY oi.created_at, oi.id
            """, (row['id'],))

            items = [self._map_row_to_item(item) for item in cursor.fetchall()]
            return self._map_row_to_order(row, items)

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        payment_status: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders with filters

        Args:
            payment_status: Filter by payment status
            status: Filter by order status
            search: Search by customer name, email or transaction ID
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of orders, total count)
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if payment_status:
                conditions.append("payment_status = %s")
                params.append(payment_status)

            if status:
                conditions.append("status = %s")
                params.append(status)

            if search:
                conditions.append("""(
                    customer_name ILIKE %s OR
                    customer_email ILIKE %s OR
                    transaction_id ILIKE %s
                )""")
                search_param = f"%{search}%"
                params.extend([search_param, search_param, search_param])

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM orders
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE {where_clause}
                ORDER BY created_at DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            order_rows = cursor.fetchall()
            if not order_rows:
                return [], total

            # Items for all orders in one query
            order_ids = [str(row['id']) for row in order_rows]
            cursor.execute(f"""
                {ORDER_ITEM_QUERY}
                WHERE oi.order_id::text = ANY(%s)
                ORDER BY oi.created_at, oi.id
            """, (order_ids,))

            items_by_order: Dict[str, List[OrderItem]] = {}
            for row in cursor.fetchall():
                items_by_order.setdefault(str(row['order_id']), []).append(self._map_row_to_item(row))

            orders = [
                self._map_row_to_order(row, items_by_order.get(str(row['id']), []))
                for row in order_rows
            ]
            return orders, total

        finally:
            cursor.close()
            conn.close()

    def update_payment_status(
        self,
        transaction_id: str,
        payment_status: str,
        status: Optional[str] = None
    ) -> Optional[Order]:
        """
        Update payment (and optionally order) status by gateway transaction ID

        Paid orders are final and are never matched.

        Returns:
            Updated order without items, or None if no unpaid order matches
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            if status:
                cursor.execute(f"""
                    UPDATE orders
                    SET payment_status = %s, status = %s, updated_at = NOW()
                    WHERE transaction_id = %s AND payment_status <> 'paid'
                    RETURNING {ORDER_COLUMNS}
                """, (payment_status, status, transaction_id))
            else:
                cursor.execute(f"""
                    UPDATE orders
                    SET payment_status = %s, updated_at = NOW()
                    WHERE transaction_id = %s AND payment_status <> 'paid'
                    RETURNING {ORDER_COLUMNS}
                """, (payment_status, transaction_id))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_order(row) if row else None

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
