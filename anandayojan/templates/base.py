# anandayojan/templates/base.py
from datetime import datetime, timezone

from jinja2 import Environment

STYLE = """
    body { font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6;
           color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: linear-gradient(135deg, #D4AF37 0%, #C5A028 100%); color: white;
              padding: 30px; text-align: center; border-radius: 8px 8px 0 0; }
    .content { background: #fff; padding: 30px; border: 1px solid #e5e7eb; border-top: none; }
    .details { background: #f9fafb; padding: 20px; border-radius: 8px; margin: 20px 0; }
    .row { display: flex; justify-content: space-between; padding: 10px 0; border-bottom: 1px solid #e5e7eb; }
    .label { font-weight: 600; color: #6b7280; }
    .highlight { background: #fef3c7; padding: 15px; border-left: 4px solid #D4AF37;
                 margin: 20px 0; border-radius: 4px; }
    .footer { background: #f9fafb; padding: 20px; text-align: center; border-radius: 0 0 8px 8px;
              font-size: 14px; color: #6b7280; }
    .button { display: inline-block; background: #D4AF37; color: white; padding: 12px 24px;
              text-decoration: none; border-radius: 6px; margin: 20px 0; }
    td { padding: 10px; border-bottom: 1px solid #e5e7eb; }
"""

LAYOUT = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ title }}</title>
  <style>{{ style | safe }}</style>
</head>
<body>
  <div class="header">
    <h1 style="margin: 0; font-size: 28px;">{{ heading }}</h1>
    <p style="margin: 10px 0 0 0; opacity: 0.9;">AnandAyojan - Your Event Partner</p>
  </div>
  <div class="content">
{{ body | safe }}
  </div>
  <div class="footer">
    <p style="margin: 0 0 10px 0;">Need help? Contact us at support@anandayojan.com</p>
    <p style="margin: 0; font-size: 12px; color: #9ca3af;">&copy; {{ year }} AnandAyojan. All rights reserved.</p>
  </div>
</body>
</html>"""


def format_inr(amount: int) -> str:
    """Rupees with Indian digit grouping: 150000 -> '₹1,50,000'."""
    sign = "-" if amount < 0 else ""
    digits = str(abs(amount))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])
    return f"{sign}₹{digits}"


env = Environment(autoescape=True)
env.filters["inr"] = format_inr

_layout = env.from_string(LAYOUT)


def page(title: str, heading: str, body: str) -> str:
    """Wrap an already rendered body in the branded email layout."""
    return _layout.render(
        title=title,
        heading=heading,
        style=STYLE,
        body=body,
        year=datetime.now(timezone.utc).year,
    )
