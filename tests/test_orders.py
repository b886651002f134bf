import pytest

from anandayojan.errors import Rejection, RejectionKind
from anandayojan.models.order import OrderCreate, OrderPaymentStatus, OrderStatus
from anandayojan.orders import OrderCreated

from .conftest import OWNER, STRANGER


def cart(**overrides):
    data = {
        "cartItems": [
            {"id": "diya-set", "name": "Brass Diya Set", "price": 1200, "quantity": 2},
            {"id": "toran", "name": "Marigold Toran", "price": 450, "quantity": 1},
        ],
        "totalAmount": 2850,
        "shipping": 0,
        "address": "12 MG Road, Pune 411001",
    }
    data.update(overrides)
    return OrderCreate.model_validate(data)


async def place(order_manager):
    result = await order_manager.create_order(cart(), OWNER, "Asha Rao", "asha@example.com")
    assert isinstance(result, OrderCreated)
    return result


@pytest.mark.asyncio
async def test_create_order_charges_full_total(order_manager, gateway):
    result = await place(order_manager)

    order = result.order
    assert order.id.startswith("ORD") and len(order.id) == 15
    assert order.status == OrderStatus.PENDING
    assert order.payment_status == OrderPaymentStatus.PENDING
    assert order.gateway_order_id == result.gateway_order.id
    assert gateway.orders[-1] == {
        "amount": 285000,
        "receipt": order.id,
        "notes": {"orderId": order.id, "type": "product_order"},
    }


def test_empty_cart_is_invalid():
    with pytest.raises(ValueError):
        cart(cartItems=[])


@pytest.mark.asyncio
async def test_gateway_failure_keeps_order(order_manager, gateway, order_store):
    gateway.fail = True

    result = await order_manager.create_order(cart(), OWNER, "Asha Rao", "asha@example.com")

    assert isinstance(result, Rejection)
    assert result.kind == RejectionKind.UPSTREAM_UNAVAILABLE
    assert len(await order_store.list_for_owner(OWNER)) == 1


@pytest.mark.asyncio
async def test_verify_order_payment_once(order_manager, gateway, email):
    order = (await place(order_manager)).order
    signature = gateway.sign(order.gateway_order_id, "pay_9")

    first = await order_manager.verify_and_confirm_payment(
        order.id, OWNER, order.gateway_order_id, "pay_9", signature
    )
    second = await order_manager.verify_and_confirm_payment(
        order.id, OWNER, order.gateway_order_id, "pay_9", signature
    )

    assert first.status == OrderStatus.CONFIRMED
    assert first.payment_status == OrderPaymentStatus.PAID
    assert second == first
    assert [m["subject"] for m in email.sent] == [f"Order Confirmation - {order.id}"]


@pytest.mark.asyncio
async def test_verify_order_rejects_bad_signature_and_strangers(order_manager, gateway):
    order = (await place(order_manager)).order
    signature = gateway.sign(order.gateway_order_id, "pay_9")

    bad = await order_manager.verify_and_confirm_payment(
        order.id, OWNER, order.gateway_order_id, "pay_9", "deadbeef"
    )
    foreign = await order_manager.verify_and_confirm_payment(
        order.id, STRANGER, order.gateway_order_id, "pay_9", signature
    )

    assert bad.kind == RejectionKind.INVALID_SIGNATURE
    assert foreign.kind == RejectionKind.NOT_FOUND


@pytest.mark.asyncio
async def test_confirm_order_from_gateway(order_manager, email):
    order = (await place(order_manager)).order

    confirmed = await order_manager.confirm_from_gateway(order.gateway_order_id, "pay_hook")
    again = await order_manager.confirm_from_gateway(order.gateway_order_id, "pay_hook")

    assert confirmed.payment_status == OrderPaymentStatus.PAID
    assert again == confirmed
    assert len(email.sent) == 1
    assert await order_manager.confirm_from_gateway("order_missing", None) is None
