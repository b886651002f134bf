import os

# Settings are read at import time
os.environ.setdefault("USE_MOCK", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "test_key_secret")
os.environ.setdefault("RAZORPAY_WEBHOOK_SECRET", "test_webhook_secret")

from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402

from anandayojan.errors import UpstreamUnavailable  # noqa: E402
from anandayojan.lifecycle import BookingLifecycleManager  # noqa: E402
from anandayojan.orders import OrderManager  # noqa: E402
from anandayojan.services.notifications import Notifier  # noqa: E402
from anandayojan.services.razorpay_gateway import MockPaymentGateway  # noqa: E402
from anandayojan.stores import (  # noqa: E402
    InMemoryBookingStore,
    InMemoryOrderStore,
    InMemoryUserStore,
)

KEY_SECRET = "test_key_secret"
WEBHOOK_SECRET = "test_webhook_secret"
OWNER = "user_owner"
STRANGER = "user_stranger"


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeGateway(MockPaymentGateway):
    """Mock gateway that records orders and can be told to fail."""

    def __init__(self):
        super().__init__(KEY_SECRET, WEBHOOK_SECRET)
        self.fail = False
        self.orders = []

    async def create_order(self, amount, receipt, notes=None):
        if self.fail:
            raise UpstreamUnavailable("razorpay", "Failed to create payment order")
        self.orders.append({"amount": amount, "receipt": receipt, "notes": notes})
        return await super().create_order(amount, receipt, notes)


class RecordingEmail:
    def __init__(self):
        self.sent = []
        self.fail = False

    async def send_email(self, to: str, subject: str, html: str, text: Optional[str] = None) -> None:
        if self.fail:
            raise UpstreamUnavailable("sendgrid", "Failed to send email")
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})


def booking_request(**overrides) -> dict:
    request = {
        "serviceId": "wedding-decor",
        "serviceName": "Wedding Decoration",
        "packageId": "gold",
        "packageName": "Gold Package",
        "name": "Asha Rao",
        "email": "asha@example.com",
        "phone": "9876543210",
        "address": "12 MG Road",
        "city": "Pune",
        "pincode": "411001",
        "preferredDate": "2025-06-10",
        "preferredTime": "18:00",
        "estimatedGuests": 150,
        "notes": "Marigold theme",
        "totalAmount": 5000,
    }
    request.update(overrides)
    return request


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 6, 1, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def email():
    return RecordingEmail()


@pytest.fixture
def notifier(email):
    return Notifier(email, "https://anandayojan.test")


@pytest.fixture
def booking_store():
    return InMemoryBookingStore()


@pytest.fixture
def order_store():
    return InMemoryOrderStore()


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def manager(booking_store, gateway, notifier, clock):
    return BookingLifecycleManager(booking_store, gateway, notifier, clock=clock)


@pytest.fixture
def order_manager(order_store, gateway, notifier, clock):
    return OrderManager(order_store, gateway, notifier, clock=clock)


def auth_headers(user_id=OWNER, email="asha@example.com", name="Asha Rao", admin=False) -> dict:
    from anandayojan.utils.auth import create_access_token

    token = create_access_token({
        "sub": user_id,
        "email": email,
        "name": name,
        "type": "admin" if admin else "customer",
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def app(manager, order_manager, user_store, gateway):
    from anandayojan import create_app
    from anandayojan.dependencies import get_booking_manager, get_order_manager, get_user_store
    from anandayojan.services import get_payment_gateway

    app = create_app()
    app.dependency_overrides[get_booking_manager] = lambda: manager
    app.dependency_overrides[get_order_manager] = lambda: order_manager
    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    return app


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)
