"""
Pagadito Service - payment settings management

Stores merchant credentials and the webhook key in payment_settings and
builds connectors from them.

Author: TM3
Date: 2025-10-17
"""
import secrets
import logging
from typing import Optional

from app.connectors.pagadito_connector import PagaditoConnector
from app.core.config import settings as app_settings
from app.domain.settings import PagaditoSettings, PaymentSettings
from app.repositories.settings_repository import SettingsRepository

logger = logging.getLogger(__name__)

PROVIDER = "pagadito"

# Credentials used until the merchant configures real ones
FALLBACK_UID = "test_uid"
FALLBACK_WSK = "test_wsk"


def generate_webhook_key() -> str:
    """32 random bytes, hex encoded"""
    return secrets.token_hex(32)


class PagaditoService:
    """Pagadito settings and connector factory"""

    def __init__(self, settings_repo: SettingsRepository = None):
        self.settings_repo = settings_repo or SettingsRepository()

    def get_settings(self) -> PaymentSettings:
        stored = self.settings_repo.get_payment_settings(PROVIDER)
        return stored or PaymentSettings(provider=PROVIDER)

    def save_settings(self, data: PagaditoSettings) -> PaymentSettings:
        saved = self.settings_repo.upsert_payment_settings(PROVIDER, settings=data)
        logger.info(f"Pagadito settings saved (sandbox={data.sandbox})")
        return saved

    def rotate_webhook_key(self) -> str:
        key = generate_webhook_key()
        self.settings_repo.upsert_payment_settings(PROVIDER, webhook_key=key)
        logger.info("Pagadito webhook key regenerated")
        return key

    def get_webhook_key(self) -> Optional[str]:
        return self.get_settings().webhook_key

    def build_connector(self) -> PagaditoConnector:
        """Connector from stored credentials, falling back to test credentials"""
        stored = None
        try:
            stored = self.get_settings().settings
        except Exception as e:
            logger.error(f"Error loading Pagadito settings, using test credentials: {e}")

        if stored:
            return PagaditoConnector(
                uid=stored.uid,
                wsk=stored.wsk,
                sandbox=stored.sandbox,
                success_rate=app_settings.PAGADITO_SUCCESS_RATE
            )

        return PagaditoConnector(
            uid=FALLBACK_UID,
            wsk=FALLBACK_WSK,
            sandbox=app_settings.PAGADITO_SANDBOX,
            success_rate=app_settings.PAGADITO_SUCCESS_RATE
        )
