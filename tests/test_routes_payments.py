import json

from anandayojan.services.razorpay_gateway import sign_webhook

from .conftest import STRANGER, WEBHOOK_SECRET, auth_headers, booking_request


def create_booking(client):
    return client.post("/bookings", json=booking_request(), headers=auth_headers()).json()


def verify_body(gateway, booking_id, order_id, payment_id="pay_1", signature=None):
    return {
        "bookingId": booking_id,
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": signature or gateway.sign(order_id, payment_id),
    }


def post_webhook(client, event, secret=WEBHOOK_SECRET):
    body = json.dumps(event).encode("utf-8")
    return client.post(
        "/payments/webhook",
        content=body,
        headers={
            "content-type": "application/json",
            "x-razorpay-signature": sign_webhook(secret, body),
        },
    )


def payment_event(event, order_id, payment_id="pay_hook"):
    return {
        "event": event,
        "payload": {"payment": {"entity": {"id": payment_id, "order_id": order_id}}},
    }


def test_verify_booking_payment(client, gateway, email):
    created = create_booking(client)
    booking_id, order_id = created["bookingId"], created["razorpayOrder"]["id"]

    response = client.post("/payments/verify", headers=auth_headers(),
                           json=verify_body(gateway, booking_id, order_id))

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Booking payment verified", "bookingId": booking_id}
    booking = client.get(f"/bookings/{booking_id}", headers=auth_headers()).json()["booking"]
    assert booking["status"] == "confirmed"
    assert booking["paymentStatus"] == "paid"
    assert len(email.sent) == 1


def test_reverify_sends_no_second_email(client, gateway, email):
    created = create_booking(client)
    body = verify_body(gateway, created["bookingId"], created["razorpayOrder"]["id"])

    first = client.post("/payments/verify", headers=auth_headers(), json=body)
    second = client.post("/payments/verify", headers=auth_headers(), json=body)

    assert first.status_code == second.status_code == 200
    assert len(email.sent) == 1


def test_verify_bad_signature(client, gateway):
    created = create_booking(client)
    body = verify_body(gateway, created["bookingId"], created["razorpayOrder"]["id"], signature="f" * 64)

    response = client.post("/payments/verify", headers=auth_headers(), json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid payment signature"


def test_verify_needs_booking_or_order(client, gateway):
    body = verify_body(gateway, None, "order_x")
    del body["bookingId"]

    response = client.post("/payments/verify", headers=auth_headers(), json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing bookingId or orderId"


def test_verify_foreign_booking_is_not_found(client, gateway):
    created = create_booking(client)
    body = verify_body(gateway, created["bookingId"], created["razorpayOrder"]["id"])

    response = client.post("/payments/verify", headers=auth_headers(user_id=STRANGER), json=body)

    assert response.status_code == 404


def test_verify_order_payment(client, gateway):
    created = client.post("/orders", headers=auth_headers(), json={
        "cartItems": [{"id": "toran", "name": "Marigold Toran", "price": 450, "quantity": 2}],
        "totalAmount": 900,
        "address": "12 MG Road, Pune",
    }).json()
    order_id, gateway_order_id = created["orderId"], created["razorpayOrder"]["id"]

    response = client.post("/payments/verify", headers=auth_headers(), json={
        "orderId": order_id,
        "razorpay_order_id": gateway_order_id,
        "razorpay_payment_id": "pay_2",
        "razorpay_signature": gateway.sign(gateway_order_id, "pay_2"),
    })

    assert response.json() == {"success": True, "message": "Order payment verified", "orderId": order_id}
    orders = client.get("/orders", headers=auth_headers()).json()["orders"]
    assert orders[0]["paymentStatus"] == "paid"
    assert orders[0]["status"] == "confirmed"


def test_webhook_rejects_bad_signature(client):
    response = post_webhook(client, payment_event("payment.captured", "order_x"), secret="wrong")
    assert response.status_code == 400


def test_webhook_captured_confirms_booking(client, email):
    created = create_booking(client)

    response = post_webhook(client, payment_event("payment.captured", created["razorpayOrder"]["id"]))
    replay = post_webhook(client, payment_event("payment.captured", created["razorpayOrder"]["id"]))

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert replay.status_code == 200
    booking = client.get(f"/bookings/{created['bookingId']}", headers=auth_headers()).json()["booking"]
    assert booking["status"] == "confirmed"
    assert booking["gatewayPaymentId"] == "pay_hook"
    assert len(email.sent) == 1


def test_webhook_order_paid_uses_order_entity(client):
    created = create_booking(client)
    event = {"event": "order.paid", "payload": {"order": {"entity": {"id": created["razorpayOrder"]["id"]}}}}

    post_webhook(client, event)

    booking = client.get(f"/bookings/{created['bookingId']}", headers=auth_headers()).json()["booking"]
    assert booking["status"] == "confirmed"


def test_webhook_payment_failed_marks_deposit(client):
    created = create_booking(client)

    post_webhook(client, payment_event("payment.failed", created["razorpayOrder"]["id"]))

    booking = client.get(f"/bookings/{created['bookingId']}", headers=auth_headers()).json()["booking"]
    assert booking["status"] == "locked"
    assert booking["paymentStatus"] == "failed"


def test_webhook_acknowledges_other_events(client):
    assert post_webhook(client, {"event": "refund.created", "payload": {}}).json() == {"status": "ok"}
    assert post_webhook(client, payment_event("payment.captured", "order_unknown")).status_code == 200


def test_webhook_with_misshapen_payload_is_acknowledged(client):
    events = [
        {"event": "payment.captured", "payload": "x"},
        {"event": "payment.captured", "payload": {"payment": "oops"}},
        {"event": "payment.captured", "payload": {"payment": {"entity": ["pay_1"]}}},
        {"event": "order.paid", "payload": {"order": {"entity": "x"}}},
        {"event": "payment.captured", "payload": {"payment": {"entity": {"id": 7, "order_id": 9}}}},
    ]

    for event in events:
        response = post_webhook(client, event)
        assert response.status_code == 200, event
        assert response.json() == {"status": "ok"}


def test_webhook_misshapen_payload_leaves_booking_locked(client):
    created = create_booking(client)
    order_id = created["razorpayOrder"]["id"]

    post_webhook(client, {"event": "payment.captured", "payload": {"payment": order_id}})

    booking = client.get(f"/bookings/{created['bookingId']}", headers=auth_headers()).json()["booking"]
    assert booking["status"] == "locked"
    assert booking["paymentStatus"] == "pending"
