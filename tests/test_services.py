from types import SimpleNamespace

import pytest

from anandayojan.errors import InvalidIdentityToken, UpstreamUnavailable
from anandayojan.services import google_auth
from anandayojan.services.email import SendGridEmailService, html_to_text
from anandayojan.services.google_auth import GoogleIdentityVerifier, MockIdentityVerifier
from anandayojan.services.razorpay_gateway import RazorpayGateway


class FakeOrders:
    def __init__(self, fail=False):
        self.fail = fail
        self.payloads = []

    def create(self, payload):
        if self.fail:
            raise RuntimeError("gateway down")
        self.payloads.append(payload)
        return {"id": "order_live_1", "amount": payload["amount"], "currency": "INR", "receipt": payload["receipt"]}


class FakeSendGrid:
    def __init__(self, fail=False):
        self.fail = fail
        self.messages = []

    def send(self, message):
        if self.fail:
            raise RuntimeError("401 Unauthorized")
        self.messages.append(message)
        return SimpleNamespace(status_code=202)


@pytest.mark.asyncio
async def test_razorpay_order_payload():
    gateway = RazorpayGateway("rzp_test_key", "secret")
    orders = FakeOrders()
    gateway.client = SimpleNamespace(order=orders)

    order = await gateway.create_order(50000, "BKG1", {"bookingId": "BKG1", "type": "booking_lock"})

    assert order.id == "order_live_1"
    assert orders.payloads == [{
        "amount": 50000,
        "currency": "INR",
        "receipt": "BKG1",
        "notes": {"bookingId": "BKG1", "type": "booking_lock"},
    }]


@pytest.mark.asyncio
async def test_razorpay_errors_become_upstream_unavailable():
    gateway = RazorpayGateway("rzp_test_key", "secret")
    gateway.client = SimpleNamespace(order=FakeOrders(fail=True))

    with pytest.raises(UpstreamUnavailable) as exc:
        await gateway.create_order(100, "BKG1")
    assert exc.value.service == "razorpay"


@pytest.mark.asyncio
async def test_sendgrid_send_and_failure():
    service = SendGridEmailService("SG.test", "noreply@anandayojan.com")
    service.client = FakeSendGrid()

    await service.send_email("asha@example.com", "Hello", "<p>Hi <b>Asha</b></p>")
    assert len(service.client.messages) == 1

    service.client = FakeSendGrid(fail=True)
    with pytest.raises(UpstreamUnavailable):
        await service.send_email("asha@example.com", "Hello", "<p>Hi</p>")


def test_html_to_text_strips_markup():
    assert html_to_text("<style>p {}</style><p>Hi <b>Asha</b></p>") == "Hi Asha"


@pytest.mark.asyncio
async def test_google_verifier_maps_payload(monkeypatch):
    def fake_verify(token, request, audience):
        assert audience == "client-id.apps.googleusercontent.com"
        return {"sub": "1234", "email": "asha@example.com", "name": "Asha", "picture": "https://img"}

    monkeypatch.setattr(google_auth.id_token, "verify_oauth2_token", fake_verify)
    verifier = GoogleIdentityVerifier("client-id.apps.googleusercontent.com")

    user = await verifier.verify_identity_token("token")

    assert (user.id, user.email, user.name, user.picture) == ("1234", "asha@example.com", "Asha", "https://img")


@pytest.mark.asyncio
async def test_google_verifier_rejects_invalid_token(monkeypatch):
    def fake_verify(token, request, audience):
        raise ValueError("Token expired")

    monkeypatch.setattr(google_auth.id_token, "verify_oauth2_token", fake_verify)

    with pytest.raises(InvalidIdentityToken):
        await GoogleIdentityVerifier("client-id").verify_identity_token("token")


@pytest.mark.asyncio
async def test_mock_identity_is_stable_per_email():
    verifier = MockIdentityVerifier()

    first = await verifier.verify_identity_token("mock:Asha@example.com")
    second = await verifier.verify_identity_token("mock:asha@example.com:Asha")

    assert first.id == second.id
    assert first.name == "Asha"
    with pytest.raises(InvalidIdentityToken):
        await verifier.verify_identity_token("mock:not-an-email")
