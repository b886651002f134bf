# anandayojan/services/razorpay_gateway.py
import hashlib
import hmac
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import razorpay
from fastapi.concurrency import run_in_threadpool

from ..errors import UpstreamUnavailable
from ..models.payment import GatewayOrder

logger = logging.getLogger(__name__)

CURRENCY = "INR"


def sign_payment(secret: str, order_id: str, payment_id: str) -> str:
    """Hex HMAC-SHA256 of ``order_id|payment_id``, as Razorpay signs checkout callbacks."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def sign_webhook(secret: str, body: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def _matches(expected: str, supplied: Optional[str]) -> bool:
    if not supplied:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


class PaymentGateway(ABC):
    """Signature checks shared by the real and the mock gateway."""

    def __init__(self, key_secret: Optional[str], webhook_secret: Optional[str] = None):
        self._key_secret = key_secret
        self._webhook_secret = webhook_secret

    @abstractmethod
    async def create_order(
        self,
        amount: int,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None
    ) -> GatewayOrder:
        """Open a gateway order for ``amount`` paise under ``receipt``."""

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        if not self._key_secret:
            raise UpstreamUnavailable("razorpay", "Payment gateway secret is not configured")
        return _matches(sign_payment(self._key_secret, order_id, payment_id), signature)

    def verify_webhook_signature(self, body: bytes, signature: Optional[str]) -> bool:
        if not self._webhook_secret:
            logger.warning("Webhook received but no webhook secret is configured")
            return False
        return _matches(sign_webhook(self._webhook_secret, body), signature)


class RazorpayGateway(PaymentGateway):
    def __init__(self, key_id: str, key_secret: str, webhook_secret: Optional[str] = None):
        super().__init__(key_secret, webhook_secret)
        self.client = razorpay.Client(auth=(key_id, key_secret))

    async def create_order(
        self,
        amount: int,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None
    ) -> GatewayOrder:
        """
        Open a Razorpay order.
        Args:
            amount: Amount in paise
            receipt: Our booking or order id
            notes: Metadata echoed back in webhooks
        """
        payload = {
            "amount": amount,
            "currency": CURRENCY,
            "receipt": receipt,
            "notes": notes or {},
        }
        try:
            order = await run_in_threadpool(self.client.order.create, payload)
        except Exception as e:
            logger.error(f"Razorpay order creation failed for {receipt}: {str(e)}")
            raise UpstreamUnavailable("razorpay", "Failed to create payment order") from e

        return GatewayOrder(
            id=order["id"],
            amount=order["amount"],
            currency=order["currency"],
            receipt=order.get("receipt"),
        )


class MockPaymentGateway(PaymentGateway):
    """Deterministic stand-in for local development; signs with the configured secret."""

    DEFAULT_SECRET = "mock_razorpay_secret"

    def __init__(self, key_secret: Optional[str] = None, webhook_secret: Optional[str] = None):
        super().__init__(
            key_secret or self.DEFAULT_SECRET,
            webhook_secret or key_secret or self.DEFAULT_SECRET,
        )

    async def create_order(
        self,
        amount: int,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None
    ) -> GatewayOrder:
        logger.info(f"MOCK: Razorpay order for {receipt} ({amount} paise)")
        return GatewayOrder(
            id=f"order_mock_{receipt}",
            amount=amount,
            currency=CURRENCY,
            receipt=receipt,
        )

    def sign(self, order_id: str, payment_id: str) -> str:
        """Signature the mock checkout hands back to the client."""
        return sign_payment(self._key_secret, order_id, payment_id)
