"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.

Author: TM3
Date: 2025-10-17
"""
from typing import List, Optional, Tuple
from app.domain.product import Product, ProductCreate, ProductUpdate
from app.core.database import get_db_connection_dict_with_retry


PRODUCT_COLUMNS = """
    id, name, description, price, original_price, image_url, category_id,
    in_stock, featured, rating, stock_quantity, payment_link, size,
    created_at, updated_at
"""


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        """Map a products row to the Product domain model"""
        return Product(
            id=str(row['id']),
            name=row['name'],
            description=row.get('description') or "",
            price=row['price'],
            original_price=row.get('original_price'),
            image_url=row.get('image_url') or "/placeholder.svg",
            category_id=str(row['category_id']) if row.get('category_id') else None,
            in_stock=bool(row.get('in_stock', True)),
            featured=bool(row.get('featured', False)),
            rating=row.get('rating') or 0,
            stock_quantity=max(row.get('stock_quantity') or 0, 0),
            payment_link=row.get('payment_link'),
            size=row.get('size'),
            created_at=row.get('created_at'),
            updated_at=row.get('updated_at')
        )

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Product UUID

        Returns:
            Product or None if not found
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE id = %s
            """, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def find_by_ids(self, product_ids: List[str]) -> List[Product]:
        """Find several products at once (unknown IDs are skipped)"""
        if not product_ids:
            return []

        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE id::text = ANY(%s)
            """, (list(product_ids),))

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        category_id: Optional[str] = None,
        featured: Optional[bool] = None,
        in_stock: Optional[bool] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            category_id: Filter by category
            featured: Filter by featured flag
            in_stock: Only products that can be bought (flag set and stock > 0)
            search: Search in name or description
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            # Build WHERE clause
            conditions = []
            params = []

            if category_id:
                conditions.append("category_id = %s")
                params.append(category_id)

            if featured is not None:
                conditions.append("featured = %s")
                params.append(featured)

            if in_stock is True:
                conditions.append("in_stock = true AND stock_quantity > 0")
            elif in_stock is False:
                conditions.append("(in_stock = false OR stock_quantity <= 0)")

            if search:
                conditions.append("(name ILIKE %s OR description ILIKE %s)")
                search_term = f"%{search}%"
                params.extend([search_term, search_term])

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            # Get total count
            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM products
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            # Get products
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE {where_clause}
                ORDER BY name
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            rows = cursor.fetchall()
            products = [self._map_row_to_product(row) for row in rows]

            return products, total

        finally:
            cursor.close()
            conn.close()

    def find_featured(self) -> List[Product]:
        """Featured products for the home page"""
        products, _ = self.find_all(featured=True, limit=100)
        return products

    def find_by_category(self, category_id: str) -> List[Product]:
        """All products of a category"""
        products, _ = self.find_all(category_id=category_id, limit=1000)
        return products

    def create(self, data: ProductCreate) -> Product:
        """Insert a product and return it"""
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            fields = data.model_dump()
            columns = ", ".join(fields.keys())
            placeholders = ", ".join(["%s"] * len(fields))

            cursor.execute(f"""
                INSERT INTO products ({columns})
                VALUES ({placeholders})
                RETURNING {PRODUCT_COLUMNS}
            """, list(fields.values()))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def update(self, product_id: str, data: ProductUpdate) -> Optional[Product]:
        """
        Partial update: only fields explicitly sent are written

        Returns:
            Updated product or None if not found
        """
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            return self.find_by_id(product_id)

        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            set_clause = ", ".join(f"{column} = %s" for column in fields.keys())

            cursor.execute(f"""
                UPDATE products
                SET {set_clause}, updated_at = NOW()
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}
            """, list(fields.values()) + [product_id])

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row) if row else None

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def delete(self, product_id: str) -> bool:
        """Delete a product. Returns False if it did not exist."""
        conn = get_db_connection_dict_with_retry()
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

    def decrement_stock(self, product_id: str, quantity: int) -> Optional[Product]:
        """
        Subtract sold units from stock, clamped at zero

        A product whose stock reaches zero is flagged out of stock.
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE products
                SET stock_quantity = GREATEST(stock_quantity - %s, 0),
                    in_stock = CASE
                        WHEN GREATEST(stock_quantity - %s, 0) = 0 THEN false
                        ELSE in_stock
                    END,
                    updated_at = NOW()
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}
            """, (quantity, quantity, product_id))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row) if row else None

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
