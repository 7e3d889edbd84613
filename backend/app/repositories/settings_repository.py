"""
Settings Repository - whatsapp_settings, payment_settings, store_settings

Author: TM3
Date: 2025-10-17
"""
import json
from typing import Optional
from psycopg2.extras import Json

from app.domain.settings import WhatsAppSettings, PagaditoSettings, PaymentSettings, StoreSettings
from app.core.database import get_db_connection_dict_with_retry


class SettingsRepository:
    """Repository for the single-row configuration tables"""

    # ------------------------------------------------------------------
    # WhatsApp
    # ------------------------------------------------------------------

    def get_whatsapp_settings(self) -> Optional[WhatsAppSettings]:
        """Stored WhatsApp settings, or None when not configured yet"""
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT phone_number, default_message, product_message
                FROM whatsapp_settings
                ORDER BY updated_at DESC NULLS LAST
                LIMIT 1
            """)
            row = cursor.fetchone()
            return WhatsAppSettings(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def save_whatsapp_settings(self, data: WhatsAppSettings) -> WhatsAppSettings:
        """Update the settings row, inserting it the first time"""
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE whatsapp_settings
                SET phone_number = %s, default_message = %s, product_message = %s,
                    updated_at = NOW()
                RETURNING phone_number, default_message, product_message
            """, (data.phone_number, data.default_message, data.product_message))
            row = cursor.fetchone()

            if not row:
                cursor.execute("""
                    INSERT INTO whatsapp_settings (phone_number, default_message, product_message)
                    VALUES (%s, %s, %s)
                    RETURNING phone_number, default_message, product_message
                """, (data.phone_number, data.default_message, data.product_message))
                row = cursor.fetchone()

            conn.commit()
            return WhatsAppSettings(**row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    # ------------------------------------------------------------------
    # Payment providers
    # ------------------------------------------------------------------

    @staticmethod
    def _map_row_to_payment_settings(row: dict) -> PaymentSettings:
        raw = row.get('settings')
        if isinstance(raw, str):
            raw = json.loads(raw) if raw else None

        parsed = None
        if raw and raw.get('uid') and raw.get('wsk'):
            parsed = PagaditoSettings(**raw)

        return PaymentSettings(
            id=str(row['id']) if row.get('id') else None,
            provider=row['provider'],
            settings=parsed,
            webhook_key=row.get('webhook_key')
        )

    def get_payment_settings(self, provider: str = "pagadito") -> Optional[PaymentSettings]:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, provider, settings, webhook_key
                FROM payment_settings
                WHERE provider = %s
            """, (provider,))
            row = cursor.fetchone()
            return self._map_row_to_payment_settings(row) if row else None

        finally:
            cursor.close()
            conn.close()

    def upsert_payment_settings(
        self,
        provider: str,
        settings: Optional[PagaditoSettings] = None,
        webhook_key: Optional[str] = None
    ) -> PaymentSettings:
        """
        Insert or update a provider row (unique on provider)

        Fields passed as None keep their stored value.
        """
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            settings_json = Json(settings.model_dump()) if settings else None

            cursor.execute("""
                INSERT INTO payment_settings (provider, settings, webhook_key, updated_at)
                VALUES (%s, COALESCE(%s, '{}'::jsonb), %s, NOW())
                ON CONFLICT (provider) DO UPDATE
                SET settings = COALESCE(%s, payment_settings.settings),
                    webhook_key = COALESCE(%s, payment_settings.webhook_key),
                    updated_at = NOW()
                RETURNING id, provider, settings, webhook_key
            """, (provider, settings_json, webhook_key, settings_json, webhook_key))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_payment_settings(row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    # ------------------------------------------------------------------
    # Store identity
    # ------------------------------------------------------------------

    def get_store_settings(self) -> Optional[StoreSettings]:
        conn = get_db_connection_dict_with_retry()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, store_name, logo_url, address, phone, email, tax_id
                FROM store_settings
                LIMIT 1
            """)
            row = cursor.fetchone()
            if not row:
                return None

            data = dict(row)
            data['id'] = str(data['id'])
            return StoreSettings(**data)

        finally:
            cursor.close()
            conn.close()
