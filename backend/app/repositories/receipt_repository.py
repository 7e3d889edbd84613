"""
Receipt Repository - Data Access Layer for Receipts

Author: TM3
Date: 2025-10-17
"""
from datetime import date
from typing import List, Optional, Tuple, Dict

from app.domain.receipt import Receipt, ReceiptItem
from app.core.database import get_db_connection_dict_with_retry


RECEIPT_COLUMNS = """
    id, receipt_number, customer_name, customer_phone, customer_email,
    subtotal, tax_amount, total_amount, notes, created_at
"""

RECEIPT_ITEM_COLUMNS = "id, receipt_id, product_name, quantity, unit_price, total_price"


class ReceiptRepository:
    """Repository for Receipt data access"""

    @staticmethod
    def _map_row_to_item(row: dict) -> ReceiptItem:
        data = dict(row)
        data['id'] = str(data['id']) if data.get('id') else None
        data['receipt_id'] = str(data['receipt_id']) if data.get('receipt_id') else None
        return ReceiptItem(**data)

    @staticmethod
    def _map_row_to_receipt(row: dict, items: List[ReceiptItem]) -> Receipt:
        data = dict(row)
        data['id'] = str(data['id']) if data.get('id') else None
        data['items'] = items
        return Receipt(**data)

    def count_for_day(self, day: date) -> int:
        """Receipts issued on a given day (drives the receipt number sequence)"""
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT COUNT(*) as total
                FROM receipts
                WHERE created_at::date = %s
            """, (day,))
            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()

    def create(self, receipt: Receipt) -> Receipt:
        """Insert a receipt and its items in one transaction"""
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO receipts (
                    receipt_number, customer_name, customer_phone, customer_email,
                    subtotal, tax_amount, total_amount, notes
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {RECEIPT_COLUMNS}
            """, (
                receipt.receipt_number, receipt.customer_name, receipt.customer_phone,
                receipt.customer_email, receipt.subtotal, receipt.tax_amount,
                receipt.total_amount, receipt.notes
            ))
            receipt_row = cursor.fetchone()

            items = []
            for item in receipt.items:
                cursor.execute(f"""
                    INSERT INTO receipt_items (receipt_id, product_name, quantity, unit_price, total_price)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {RECEIPT_ITEM_COLUMNS}
                """, (
                    receipt_row['id'], item.product_name, item.quantity,
                    item.unit_price, item.total_price
                ))
                items.append(self._map_row_to_item(cursor.fetchone()))

            conn.commit()
            return self._map_row_to_receipt(receipt_row, items)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, receipt_id: str) -> Optional[Receipt]:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {RECEIPT_COLUMNS}
                FROM receipts
                WHERE id = %s
            """, (receipt_id,))
            row = cursor.fetchone()
            if not row:
                return None

            cursor.execute(f"""
                SELECT {RECEIPT_ITEM_COLUMNS}
                FROM receipt_items
                WHERE receipt_id = %s
                ORDER BY id
            """, (receipt_id,))
            items = [self._map_row_to_item(item) for item in cursor.fetchall()]
            return self._map_row_to_receipt(row, items)

        finally:
            cursor.close()
            conn.close()

    def find_all(self, limit: int = 50, offset: int = 0) -> Tuple[List[Receipt], int]:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COUNT(*) as total FROM receipts")
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {RECEIPT_COLUMNS}
                FROM receipts
                ORDER BY created_at DESC
                LIMIT %s OFFSET %s
            """, (limit, offset))
            receipt_rows = cursor.fetchall()
            if not receipt_rows:
                return [], total

            receipt_ids = [str(row['id']) for row in receipt_rows]
            cursor.execute(f"""
                SELECT {RECEIPT_ITEM_COLUMNS}
                FROM receipt_items
                WHERE receipt_id::text = ANY(%s)
                ORDER BY id
            """, (receipt_ids,))

            items_by_receipt: Dict[str, List[ReceiptItem]] = {}
            for row in cursor.fetchall():
                items_by_receipt.setdefault(str(row['receipt_id']), []).append(self._map_row_to_item(row))

            receipts = [
                self._map_row_to_receipt(row, items_by_receipt.get(str(row['id']), []))
                for row in receipt_rows
            ]
            return receipts, total

        finally:
            cursor.close()
            conn.close()
