# anandayojan/templates/booking_confirmation.py
from typing import Tuple

from ..models.booking import Booking
from .base import env, format_inr, page

BOOKING_CONFIRMATION = """
    <p>Dear {{ booking.customer.name }},</p>
    <p>Thank you for booking with AnandAyojan! Your booking has been successfully confirmed.</p>
    <div class="details">
      <h2 style="margin-top: 0; color: #111827;">Booking Details</h2>
      <div class="row"><span class="label">Booking ID:</span><span class="value"><strong>{{ booking.id }}</strong></span></div>
      <div class="row"><span class="label">Service:</span><span class="value">{{ booking.service_name }}</span></div>
      <div class="row"><span class="label">Package:</span><span class="value">{{ booking.package_name }}</span></div>
      <div class="row"><span class="label">Date:</span><span class="value">{{ date }}</span></div>
      <div class="row"><span class="label">Time:</span><span class="value">{{ time }}</span></div>
      <div class="row"><span class="label">Amount Paid (Locking):</span><span class="value"><strong>{{ booking.locking_amount | inr }}</strong></span></div>
      <div class="row"><span class="label">Total Amount:</span><span class="value">{{ booking.total_amount | inr }}</span></div>
      <div class="row"><span class="label">Remaining Amount:</span><span class="value">{{ remaining | inr }}</span></div>
    </div>
    <div class="highlight">
      <strong>Important Information:</strong>
      <ul style="margin: 10px 0 0 0; padding-left: 20px;">
        <li>You've secured this booking with 10% advance payment</li>
        <li>Remaining amount to be paid after service completion</li>
        <li>Service provider will contact you 24-48 hours before the event</li>
      </ul>
    </div>
    <div class="highlight" style="background: #fee2e2; border-left-color: #dc2626;">
      <strong>Cancellation Policy:</strong>
      <p style="margin: 10px 0 0 0;">
        You can cancel this booking and get a <strong>100% refund</strong> if cancelled at least
        6 hours before your scheduled time.
      </p>
    </div>
    <div style="text-align: center;">
      <a href="{{ link }}" class="button">View My Bookings</a>
    </div>"""

_body = env.from_string(BOOKING_CONFIRMATION)


def render_booking_confirmation(booking: Booking, frontend_base_url: str) -> Tuple[str, str, str]:
    """Subject, HTML and plain-text bodies of the deposit confirmation email."""
    remaining = booking.total_amount - booking.locking_amount
    date = booking.preferred_date.strftime("%d %b %Y")
    time = booking.preferred_time.strftime("%H:%M")
    link = f"{frontend_base_url.rstrip('/')}/my-bookings"

    body = _body.render(booking=booking, date=date, time=time, remaining=remaining, link=link)

    subject = f"Booking Confirmation - {booking.id}"
    html = page("Booking Confirmation", "Booking Confirmed!", body)
    text = (
        f"Booking {booking.id} confirmed for {booking.service_name} ({booking.package_name}) "
        f"on {date} at {time}. Paid {format_inr(booking.locking_amount)} of "
        f"{format_inr(booking.total_amount)}; {format_inr(remaining)} due after the service. "
        f"Cancel at least 6 hours before the scheduled time for a full refund: {link}"
    )
    return subject, html, text
