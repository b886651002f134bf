# anandayojan/services/email.py
import logging
import re
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from ..errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


def html_to_text(html_content: str) -> str:
    text = re.sub(r"<(style|script)[^>]*>.*?</\1>", "", html_content, flags=re.S)
    text = re.sub(r"<[^>]+>", " ", text)
    return re.sub(r"\s+", " ", text).strip()


class SendGridEmailService:
    """Transactional email through SendGrid."""

    def __init__(self, api_key: str, from_email: str):
        self.client = SendGridAPIClient(api_key)
        self.from_email = from_email

    async def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None
    ) -> None:
        message = Mail(
            from_email=self.from_email,
            to_emails=to,
            subject=subject,
            html_content=html,
            plain_text_content=text or html_to_text(html),
        )
        try:
            response = await run_in_threadpool(self.client.send, message)
        except Exception as e:
            logger.error(f"SendGrid email to {to} failed: {str(e)}")
            raise UpstreamUnavailable("sendgrid", "Failed to send email") from e

        logger.info(f"Email sent to {to} (status {response.status_code})")


class MockEmailService:
    """Logs emails instead of sending them."""

    async def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None
    ) -> None:
        preview = text or html_to_text(html)[:100] + "..."
        logger.info(f"MOCK: email to {to} | {subject} | {preview}")
