# anandayojan/orders.py
"""Product orders: paid in full at checkout, confirmed once the payment is verified."""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union
from uuid import uuid4

from .errors import Rejection, RejectionKind, UpstreamUnavailable
from .models.order import Order, OrderCreate, OrderPaymentStatus, OrderStatus
from .models.payment import GatewayOrder
from .services.notifications import Notifier
from .services.razorpay_gateway import PaymentGateway
from .stores import OrderStore

logger = logging.getLogger(__name__)


def new_order_id() -> str:
    return f"ORD{uuid4().hex[:12].upper()}"


@dataclass(frozen=True)
class OrderCreated:
    order: Order
    gateway_order: GatewayOrder


class OrderManager:
    def __init__(
        self,
        store: OrderStore,
        payments: PaymentGateway,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.payments = payments
        self.notifier = notifier
        self.clock = clock

    async def create_order(
        self,
        request: OrderCreate,
        owner_id: str,
        customer_name: str,
        customer_email: str,
    ) -> Union[OrderCreated, Rejection]:
        """Persist a pending order and open a gateway order for its full total."""
        order = Order(
            id=new_order_id(),
            owner_id=owner_id,
            customer_name=customer_name,
            customer_email=customer_email,
            items=request.cart_items,
            total_amount=request.total_amount,
            shipping=request.shipping,
            address=request.address,
            created_at=self.clock(),
        )
        await self.store.insert(order)
        logger.info(f"Order {order.id} created with {len(order.items)} items, total {order.total_amount}")

        try:
            gateway_order = await self.payments.create_order(
                order.total_amount * 100,
                order.id,
                {"orderId": order.id, "type": "product_order"},
            )
        except UpstreamUnavailable as e:
            logger.error(f"Payment order for order {order.id} failed: {e}")
            return Rejection(
                RejectionKind.UPSTREAM_UNAVAILABLE,
                "Your order was saved but the payment could not be started. Please try again shortly.",
            )

        async with self.store.lock(order.id):
            current = await self.store.get(order.id)
            order = current.model_copy(update={"gateway_order_id": gateway_order.id})
            await self.store.update(order)

        return OrderCreated(order=order, gateway_order=gateway_order)

    async def verify_and_confirm_payment(
        self,
        order_id: str,
        owner_id: Optional[str],
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
    ) -> Union[Order, Rejection]:
        newly_paid = False
        async with self.store.lock(order_id):
            order = await self.store.get(order_id)
            if order is None or (owner_id is not None and order.owner_id != owner_id):
                return Rejection(RejectionKind.NOT_FOUND, "Order not found")

            try:
                valid = self.payments.verify_signature(gateway_order_id, gateway_payment_id, signature)
            except UpstreamUnavailable as e:
                logger.error(f"Cannot verify payment for order {order_id}: {e}")
                return Rejection(RejectionKind.UPSTREAM_UNAVAILABLE, "Payment verification is unavailable")

            if not valid or order.gateway_order_id != gateway_order_id:
                logger.warning(f"Payment signature rejected for order {order_id}")
                return Rejection(RejectionKind.INVALID_SIGNATURE, "Invalid payment signature")

            if order.payment_status != OrderPaymentStatus.PAID:
                order = self._mark_paid(order, gateway_payment_id)
                await self.store.update(order)
                newly_paid = True

        if newly_paid:
            await self._send_confirmation(order)
        return order

    async def confirm_from_gateway(
        self,
        gateway_order_id: str,
        gateway_payment_id: Optional[str],
    ) -> Optional[Order]:
        found = await self.store.get_by_gateway_order_id(gateway_order_id)
        if found is None:
            return None

        async with self.store.lock(found.id):
            order = await self.store.get(found.id)
            if order.payment_status == OrderPaymentStatus.PAID:
                return order
            order = self._mark_paid(order, gateway_payment_id)
            await self.store.update(order)

        await self._send_confirmation(order)
        return order

    async def list_orders(self, owner_id: str) -> List[Order]:
        return await self.store.list_for_owner(owner_id)

    def _mark_paid(self, order: Order, gateway_payment_id: Optional[str]) -> Order:
        logger.info(f"Order {order.id} paid, payment {gateway_payment_id}")
        return order.model_copy(update={
            "status": OrderStatus.CONFIRMED,
            "payment_status": OrderPaymentStatus.PAID,
            "gateway_payment_id": gateway_payment_id,
        })

    async def _send_confirmation(self, order: Order) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.order_confirmed(order)
        except UpstreamUnavailable as e:
            logger.warning(f"Confirmation email for order {order.id} not sent: {e}")
