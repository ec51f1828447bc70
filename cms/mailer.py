"""
Contact-form delivery through the Resend HTTP API.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from cms.errors import DeliveryError

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


@dataclass
class ContactForm:
    name: str
    email: str
    subject: str
    message: str


@dataclass
class DeliveryResult:
    delivered: bool
    message: str
    message_id: Optional[str] = None


def render_contact_html(form: ContactForm, received_at: str) -> str:
    name = html.escape(form.name)
    email = html.escape(form.email)
    subject = html.escape(form.subject)
    message = html.escape(form.message).replace("\n", "<br>")
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        "<h2>New Contact Form Submission</h2>"
        f"<p><strong>Name:</strong> {name}</p>"
        f'<p><strong>Email:</strong> <a href="mailto:{email}">{email}</a></p>'
        f"<p><strong>Subject:</strong> {subject}</p>"
        f"<h3>Message:</h3><div>{message}</div>"
        "<p>This message was sent from the Technical Council website contact form.</p>"
        f"<p>Received: {html.escape(received_at)}</p>"
        "</div>"
    )


class ContactMailer:
    def __init__(
        self,
        api_key: Optional[str],
        sender: str,
        recipient: str,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.recipient = recipient
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, form: ContactForm, received_at: str) -> DeliveryResult:
        if not self.api_key:
            logger.warning(
                "RESEND_API_KEY not configured; contact form from %s about %r was not emailed",
                form.email,
                form.subject,
            )
            return DeliveryResult(
                delivered=False,
                message=(
                    "Thank you for your message! We have received your inquiry. "
                    "(Note: Email delivery is not configured)"
                ),
            )

        payload = {
            "from": self.sender,
            "to": [self.recipient],
            "subject": f"Contact Form: {form.subject}",
            "html": render_contact_html(form, received_at),
            "reply_to": form.email,
        }
        try:
            response = self.session.post(
                RESEND_API_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.exception("Contact form delivery failed")
            raise DeliveryError(
                "Failed to send message. Please try again later or contact us directly."
            ) from exc

        message_id = response.json().get("id")
        logger.info("Contact form email sent (id=%s)", message_id)
        return DeliveryResult(
            delivered=True,
            message="Thank you for your message! We will get back to you soon.",
            message_id=message_id,
        )
