"""
Pagadito Connector (simulated)

Mirrors the surface of the Pagadito merchant API: create a payment,
verify it, test credentials and validate webhook signatures. No call leaves
the process: payment outcomes are drawn at random with a configurable
success rate.

Author: TM3
Date: 2025-10-17
"""
import hmac
import hashlib
import logging
import random
import string
from decimal import Decimal
from typing import Dict, Optional

logger = logging.getLogger(__name__)

PAYMENT_COMPLETED = "completed"
PAYMENT_FAILED = "failed"

TOKEN_ALPHABET = string.ascii_lowercase + string.digits


class PagaditoError(Exception):
    """Gateway rejected the request"""


class PagaditoAuthError(PagaditoError):
    """Invalid credentials or connection failed"""


class InvalidSignatureError(PagaditoError):
    """Webhook signature does not match the stored webhook key"""


class PagaditoConnector:
    """
    Connector for the Pagadito payment gateway

    Handles:
    - Payment creation (token + redirect URL)
    - Payment verification
    - Credential test
    - Webhook signature verification
    """

    SANDBOX_URL = "https://sandbox.pagadito.com/comercios/"
    PRODUCTION_URL = "https://comercios.pagadito.com/"

    def __init__(self, uid: str = None, wsk: str = None, sandbox: bool = True,
                 success_rate: float = 0.8, rng: Optional[random.Random] = None):
        """
        Initialize Pagadito connector

        Args:
            uid: Merchant UID
            wsk: Merchant web service key
            sandbox: Use the sandbox environment
            success_rate: Probability that a simulated payment succeeds
            rng: Random source (injectable for tests)
        """
        self.uid = uid
        self.wsk = wsk
        self.sandbox = sandbox
        self.success_rate = success_rate
        self.rng = rng or random.Random()

    @property
    def base_url(self) -> str:
        return self.SANDBOX_URL if self.sandbox else self.PRODUCTION_URL

    @property
    def environment(self) -> str:
        return "sandbox" if self.sandbox else "production"

    def _new_token(self) -> str:
        suffix = "".join(self.rng.choice(TOKEN_ALPHABET) for _ in range(8))
        return f"pgto-{suffix}"

    def create_payment(self, amount: Decimal, description: str, order_id: str,
                       customer: Dict) -> Dict:
        """
        Create a payment session

        Args:
            amount: Amount to charge
            description: Payment description shown to the buyer
            order_id: Merchant order reference
            customer: Dict with name, email and optional phone

        Returns:
            Dict with payment_id (token) and payment_url
        """
        if amount is None or Decimal(str(amount)) <= 0:
            raise PagaditoError("Amount must be greater than zero")

        token = self._new_token()
        logger.info(
            f"Pagadito payment created: token={token} order={order_id} "
            f"amount={amount} env={self.environment}"
        )

        return {
            "payment_id": token,
            "payment_url": f"{self.base_url}?token={token}",
            "order_id": order_id,
            "description": description,
            "customer_email": customer.get("email"),
        }

    def verify_payment(self, payment_id: str) -> str:
        """
        Verify a payment status

        Returns:
            "completed" or "failed"
        """
        status = PAYMENT_COMPLETED if self.rng.random() < self.success_rate else PAYMENT_FAILED
        logger.info(f"Pagadito payment {payment_id} verified: {status}")
        return status

    def test_connection(self) -> Dict:
        """
        Check the merchant credentials

        Raises:
            ValueError: uid or wsk missing
            PagaditoAuthError: credentials rejected
        """
        if not self.uid or not self.wsk:
            raise ValueError("UID and WSK are required")

        if self.rng.random() >= self.success_rate:
            logger.warning(f"Pagadito connection test failed ({self.environment})")
            raise PagaditoAuthError("Invalid credentials or connection failed")

        return {
            "merchant_name": "Test Shop",
            "environment": self.environment,
        }

    @staticmethod
    def sign_payload(webhook_key: str, body: bytes) -> str:
        """Hex HMAC-SHA256 of the raw webhook body"""
        return hmac.new(webhook_key.encode(), body, hashlib.sha256).hexdigest()

    @classmethod
    def validate_webhook(cls, signature: Optional[str], body: bytes,
                         webhook_key: Optional[str]) -> None:
        """
        Raises:
            InvalidSignatureError: missing key/signature or mismatch
        """
        if not webhook_key or not signature:
            raise InvalidSignatureError("Invalid signature")

        expected = cls.sign_payload(webhook_key, body)
        if not hmac.compare_digest(expected, signature.strip().lower()):
            raise InvalidSignatureError("Invalid signature")
