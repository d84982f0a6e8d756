"""Transactional account emails.

Messages go through the rq "emails" queue when it is enabled so request
handlers never wait on SendGrid. Delivery problems are logged, never raised.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from rq import Queue
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.connections.redis import get_redis
from app.utils.config import settings


logger = logging.getLogger(__name__)

QUEUE_NAME = "emails"


@dataclass
class EmailMessage:
    to: str
    subject: str
    text: str
    sender: str = ""


def welcome_message(email: str, name: str) -> EmailMessage:
    return EmailMessage(
        to=email,
        subject="Welcome to the Task Manager app!",
        text=(
            f"Thanks for joining the Task Manager app, {name}! I hope you find this app useful! "
            "Feel free to contact us with any concerns."
        ),
    )


def cancel_message(email: str, name: str) -> EmailMessage:
    return EmailMessage(
        to=email,
        subject="Sorry to see you leave...",
        text=(
            f"Goodbye, {name}. We hope to see you again soon! "
            "Would you care to provide the reason for your cancellation? Thanks!"
        ),
    )


def deliver(message: dict) -> bool:
    """Send one message through SendGrid. Runs inline or inside an rq worker."""
    if not settings.sendgrid_api_key:
        logger.info("SendGrid not configured; skipping email '%s'", message["subject"])
        return False
    mail = Mail(
        from_email=message.get("sender") or settings.email_from,
        to_emails=message["to"],
        subject=message["subject"],
        plain_text_content=message["text"],
    )
    try:
        response = SendGridAPIClient(settings.sendgrid_api_key).send(mail)
    except Exception:
        logger.exception("Failed to deliver email '%s'", message["subject"])
        return False
    logger.info("Delivered email '%s' (status %s)", message["subject"], response.status_code)
    return True


def get_queue() -> Queue:
    return Queue(name=QUEUE_NAME, connection=get_redis())


def dispatch(message: EmailMessage) -> None:
    payload = asdict(message)
    payload["sender"] = payload["sender"] or settings.email_from
    if not settings.email_queue_enabled:
        deliver(payload)
        return
    try:
        get_queue().enqueue(deliver, payload)
    except Exception:
        logger.exception("Failed to enqueue email '%s'", message.subject)


def send_welcome_email(email: str, name: str) -> None:
    dispatch(welcome_message(email, name))


def send_cancel_email(email: str, name: str) -> None:
    dispatch(cancel_message(email, name))
