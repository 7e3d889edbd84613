"""
Category Repository - Data Access Layer for Categories

Author: TM3
Date: 2025-10-17
"""
from typing import List, Optional
from app.domain.category import Category, CategoryCreate, CategoryUpdate
from app.core.database import get_db_connection_dict_with_retry


CATEGORY_COLUMNS = "id, name, description, image_url, created_at, updated_at"


class CategoryRepository:
    """Repository for Category data access"""

    @staticmethod
    def _map_row_to_category(row: dict) -> Category:
        return Category(
            id=str(row['id']),
            name=row['name'],
            description=row.get('description') or "",
            image_url=row.get('image_url') or "/placeholder.svg",
            created_at=row.get('created_at'),
            updated_at=row.get('updated_at')
        )

    def find_all(self) -> List[Category]:
        """All categories ordered by name"""
        conn = get_db_connection_dict_with_retry()
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

    def find_by_id(self, category_id: str) -> Optional[Category]:
        conn = get_db_connection_dict_with_retry()
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

    def create(self, data: CategoryCreate) -> Category:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO categories (name, description, image_url)
                VALUES (%s, %s, %s)
                RETURNING {CATEGORY_COLUMNS}
            """, (data.name, data.description, data.image_url))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_category(row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def update(self, category_id: str, data: CategoryUpdate) -> Optional[Category]:
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            return self.find_by_id(category_id)

        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            set_clause = ", ".join(f"{column} = %s" for column in fields.keys())

            cursor.execute(f"""
                UPDATE categories
                SET {set_clause}, updated_at = NOW()
                WHERE id = %s
                RETURNING {CATEGORY_COLUMNS}
            """, list(fields.values()) + [category_id])

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_category(row) if row else None

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def delete(self, category_id: str) -> bool:
        """
        Delete a category

        Products of the category are kept and left uncategorized.
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(
                "UPDATE products SET category_id = NULL, updated_at = NOW() WHERE category_id = %s",
                (category_id,)
            )
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
