# anandayojan/services/__init__.py
from functools import lru_cache

from ..config import settings
from .email import MockEmailService, SendGridEmailService
from .google_auth import GoogleIdentityVerifier, MockIdentityVerifier
from .notifications import Notifier
from .razorpay_gateway import MockPaymentGateway, PaymentGateway, RazorpayGateway


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    if settings.use_mock:
        return MockPaymentGateway(settings.razorpay_key_secret, settings.razorpay_webhook_secret)
    if not (settings.razorpay_key_id and settings.razorpay_key_secret):
        raise RuntimeError("RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET must be set")
    return RazorpayGateway(
        settings.razorpay_key_id,
        settings.razorpay_key_secret,
        settings.razorpay_webhook_secret
    )


@lru_cache
def get_email_service():
    if settings.use_mock:
        return MockEmailService()
    if not settings.sendgrid_api_key:
        raise RuntimeError("SENDGRID_API_KEY must be set")
    return SendGridEmailService(settings.sendgrid_api_key, settings.sendgrid_from_email)


@lru_cache
def get_identity_verifier():
    if settings.use_mock:
        return MockIdentityVerifier()
    if not settings.google_client_id:
        raise RuntimeError("GOOGLE_CLIENT_ID must be set")
    return GoogleIdentityVerifier(settings.google_client_id)


def get_notifier() -> Notifier:
    return Notifier(get_email_service(), settings.frontend_base_url)


__all__ = [
    "get_payment_gateway",
    "get_email_service",
    "get_identity_verifier",
    "get_notifier",
    "PaymentGateway",
    "Notifier",
]
