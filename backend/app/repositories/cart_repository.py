"""
Cart Repository - Data Access Layer for Carts

Carts live in user_carts (one active row per user or cart session) with
their lines in cart_items. Lines are loaded with current product data.

Author: TM3
Date: 2025-10-17
"""
from typing import List, Optional, Dict
from app.domain.cart import Cart, CartItem, CART_STATUS_ACTIVE
from app.core.database import get_db_connection_dict_with_retry


CART_COLUMNS = "id, user_id, session_id, status, created_at, updated_at"

CART_ITEM_QUERY = """
    SELECT
        ci.id, ci.cart_id, ci.product_id, ci.quantity,
        COALESCE(p.price, ci.price) as price,
        p.name, p.image_url, p.stock_quantity, p.in_stock
    FROM cart_items ci
    LEFT JOIN products p ON ci.product_id = p.id
"""


class CartRepository:
    """
    Repository for Cart data access

    Returns Cart domain models with their items.
    """

    @staticmethod
    def _map_row_to_item(row: dict) -> CartItem:
        return CartItem(
            id=str(row['id']) if row.get('id') else None,
            product_id=str(row['product_id']),
            name=row.get('name') or 'Unknown Product',
            price=row.get('price') or 0,
            image_url=row.get('image_url') or '/placeholder.svg',
            quantity=row['quantity'],
            stock_quantity=max(row.get('stock_quantity') or 0, 0),
            in_stock=bool(row['in_stock']) if row.get('in_stock') is not None else False
        )

    @staticmethod
    def _map_row_to_cart(row: dict, items: List[CartItem]) -> Cart:
        return Cart(
            id=str(row['id']),
            user_id=str(row['user_id']) if row.get('user_id') else None,
            session_id=row.get('session_id'),
            status=row.get('status') or CART_STATUS_ACTIVE,
            items=items,
            created_at=row.get('created_at'),
            updated_at=row.get('updated_at')
        )

    def _find_active(self, column: str, value: str) -> Optional[Cart]:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CART_COLUMNS}
                FROM user_carts
                WHERE {column} = %s AND status = %s
                ORDER BY updated_at DESC NULLS LAST
                LIMIT 1
            """, (value, CART_STATUS_ACTIVE))

            row = cursor.fetchone()
            if not row:
                return None

            cursor.execute(f"""
                {CART_ITEM_QUERY}
                WHERE ci.cart_id = %s
                ORDER BY ci.created_at, ci.id
            """, (row['id'],))

            items = [self._map_row_to_item(item) for item in cursor.fetchall()]
            return self._map_row_to_cart(row, items)

        finally:
            cursor.close()
            conn.close()

    def find_active_by_user(self, user_id: str) -> Optional[Cart]:
        """Active cart of an authenticated user"""
        return self._find_active("user_id", user_id)

    def find_active_by_session(self, session_id: str) -> Optional[Cart]:
        """Active cart of an anonymous cart session"""
        return self._find_active("session_id", session_id)

    def create(self, user_id: Optional[str] = None, session_id: Optional[str] = None) -> Cart:
        """Create an empty active cart"""
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO user_carts (user_id, session_id, status, updated_at)
                VALUES (%s, %s, %s, NOW())
                RETURNING {CART_COLUMNS}
            """, (user_id, session_id, CART_STATUS_ACTIVE))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_cart(row, [])

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def save_items(self, cart_id: str, items: List[CartItem]) -> None:
        """
        Replace all lines of a cart (delete then insert, one transaction)

        Last write wins: whatever the caller holds becomes the stored cart.
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM cart_items WHERE cart_id = %s", (cart_id,))

            for item in items:
                cursor.execute("""
                    INSERT INTO cart_items (cart_id, product_id, quantity, price)
                    VALUES (%s, %s, %s, %s)
                """, (cart_id, item.product_id, item.quantity, item.price))

            cursor.execute(
                "UPDATE user_carts SET updated_at = NOW() WHERE id = %s",
                (cart_id,)
            )
            conn.commit()

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def set_status(self, cart_id: str, status: str) -> None:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE user_carts
                SET status = %s, updated_at = NOW()
                WHERE id = %s
            """, (status, cart_id))
            conn.commit()

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def find_all_active(self) -> List[Cart]:
        """
        All active carts with their items (admin view)

        Items for every cart are fetched in one query.
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CART_COLUMNS}
                FROM user_carts
                WHERE status = %s
                ORDER BY updated_at DESC NULLS LAST
            """, (CART_STATUS_ACTIVE,))

            cart_rows = cursor.fetchall()
            if not cart_rows:
                return []

            cart_ids = [str(row['id']) for row in cart_rows]

            cursor.execute(f"""
                {CART_ITEM_QUERY}
                WHERE ci.cart_id::text = ANY(%s)
                ORDER BY ci.created_at, ci.id
            """, (cart_ids,))

            items_by_cart: Dict[str, List[CartItem]] = {}
            for row in cursor.fetchall():
                items_by_cart.setdefault(str(row['cart_id']), []).append(self._map_row_to_item(row))

            return [
                self._map_row_to_cart(row, items_by_cart.get(str(row['id']), []))
                for row in cart_rows
            ]

        finally:
            cursor.close()
            conn.close()

    def delete_item(self, item_id: str) -> bool:
        """Delete one cart line by its row ID"""
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM cart_items WHERE id = %s RETURNING cart_id", (item_id,))
            row = cursor.fetchone()
            if row:
                cursor.execute(
                    "UPDATE user_carts SET updated_at = NOW() WHERE id = %s",
                    (row['cart_id'],)
                )
            conn.commit()
            return row is not None

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def delete_items(self, cart_id: str) -> int:
        """Delete every line of a cart. Returns the number of lines removed."""
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM cart_items WHERE cart_id = %s", (cart_id,))
            removed = cursor.rowcount
            cursor.execute(
                "UPDATE user_carts SET updated_at = NOW() WHERE id = %s",
                (cart_id,)
            )
            conn.commit()
            return removed

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
