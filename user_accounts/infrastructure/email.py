# user_accounts/infrastructure/email.py
import os
from typing import Optional
import aiosmtplib
from email.message import EmailMessage
import structlog

from ..UAA.interfaces import Notifier, CONFIRM_EMAIL, RESET_PASSWORD

logger = structlog.get_logger(__name__)

SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_FROM = os.getenv("SMTP_FROM", "no-reply@example.com")
ENVIRONMENT = os.getenv("ENVIRONMENT", "production").lower()

async def send_email(
    to_email: str,
    subject: str,
    plain_text: str,
    html: Optional[str] = None
) -> None:
    """
    Send an email asynchronously using SMTP (aiosmtplib).
    Raises exception on failure.
    """
    if ENVIRONMENT == "development" and (not SMTP_HOST or not SMTP_USER):
        # SMTP not configured in development: log instead of sending
        logger.info("email_send_stub_dev", to=to_email, subject=subject)
        return

    msg = EmailMessage()
    msg["From"] = SMTP_FROM
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(plain_text)
    if html:
        msg.add_alternative(html, subtype="html")

    try:
        await aiosmtplib.send(
            msg,
            hostname=SMTP_HOST,
            port=SMTP_PORT,
            username=SMTP_USER or None,
            password=SMTP_PASSWORD or None,
            start_tls=True if SMTP_PORT in (587, 25) else False,
        )
        logger.info("email_sent", to=to_email, subject=subject)
    except Exception as e:
        logger.exception("email_send_failed", to=to_email, subject=subject, error=str(e))
        raise


_TEMPLATES = {
    CONFIRM_EMAIL: (
        "Confirm your email",
        "Your email confirmation code is: {code}\nThis code is valid for a short time.",
        "<p>Your email confirmation code is: <strong>{code}</strong></p><p>This code is valid for a short time.</p>",
    ),
    RESET_PASSWORD: (
        "Reset your password",
        "Your password reset code is: {code}\nIf you did not ask for a reset, ignore this message.",
        "<p>Your password reset code is: <strong>{code}</strong></p><p>If you did not ask for a reset, ignore this message.</p>",
    ),
}


class EmailNotifier(Notifier):
    async def send_code(self, email: str, code: str, purpose: str) -> None:
        subject, plain, html = _TEMPLATES[purpose]
        await send_email(
            to_email=email,
            subject=subject,
            plain_text=plain.format(code=code),
            html=html.format(code=code),
        )
