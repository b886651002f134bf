# anandayojan/templates/order_confirmation.py
from typing import Tuple

from ..models.order import Order
from .base import env, format_inr, page

ORDER_CONFIRMATION = """
    <p>Dear {{ order.customer_name }},</p>
    <p>Your order has been confirmed! We will process it shortly.</p>
    <table style="width: 100%; border-collapse: collapse;">
      <tr><th align="left">Item</th><th>Qty</th><th align="right">Price</th><th align="right">Total</th></tr>
      {% for item in order.items %}
      <tr>
        <td>{{ item.name }}</td>
        <td style="text-align: center;">{{ item.quantity }}</td>
        <td style="text-align: right;">{{ item.price | inr }}</td>
        <td style="text-align: right; font-weight: 600;">{{ (item.price * item.quantity) | inr }}</td>
      </tr>
      {% endfor %}
    </table>
    <div class="details">
      <div class="row"><span class="label">Order ID:</span><span class="value"><strong>{{ order.id }}</strong></span></div>
      <div class="row"><span class="label">Subtotal:</span><span class="value">{{ subtotal | inr }}</span></div>
      <div class="row"><span class="label">Shipping:</span><span class="value">{% if order.shipping %}{{ order.shipping | inr }}{% else %}Free{% endif %}</span></div>
      <div class="row"><span class="label">Total Amount:</span><span class="value"><strong>{{ order.total_amount | inr }}</strong></span></div>
      <div class="row"><span class="label">Delivery Address:</span><span class="value">{{ order.address }}</span></div>
    </div>
    <p>Thank you for shopping with AnandAyojan!</p>"""

_body = env.from_string(ORDER_CONFIRMATION)


def render_order_confirmation(order: Order) -> Tuple[str, str, str]:
    subtotal = sum(item.price * item.quantity for item in order.items)
    body = _body.render(order=order, subtotal=subtotal)

    subject = f"Order Confirmation - {order.id}"
    html = page("Order Confirmation", "Order Confirmed!", body)
    text = (
        f"Order {order.id} confirmed: {len(order.items)} item(s), "
        f"total {format_inr(order.total_amount)}."
    )
    return subject, html, text
