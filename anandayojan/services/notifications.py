# anandayojan/services/notifications.py
from typing import Optional, Protocol

from ..models.booking import Booking
from ..models.order import Order
from ..templates import render_booking_confirmation, render_order_confirmation


class EmailSender(Protocol):
    async def send_email(self, to: str, subject: str, html: str, text: Optional[str] = None) -> None: ...


class Notifier:
    """Renders customer emails and hands them to the email service."""

    def __init__(self, email: EmailSender, frontend_base_url: str):
        self.email = email
        self.frontend_base_url = frontend_base_url

    async def booking_confirmed(self, booking: Booking) -> None:
        subject, html, text = render_booking_confirmation(booking, self.frontend_base_url)
        await self.email.send_email(booking.customer.email, subject, html, text)

    async def order_confirmed(self, order: Order) -> None:
        subject, html, text = render_order_confirmation(order)
        await self.email.send_email(order.customer_email, subject, html, text)
