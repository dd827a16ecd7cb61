from __future__ import annotations

import logging
import smtplib
from email.mime.text import MIMEText
from email.utils import formatdate

import resend

from event_planner.core.config import settings

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(RuntimeError):
    pass


class EmailDeliveryError(RuntimeError):
    """
    Raised when a provider is configured but delivery fails.
    """


def _normalize_provider(raw: str | None) -> str:
    """
    Supported providers:
    - resend (default when unset)
    - smtp
    """
    provider = (raw or "").strip().lower()
    if not provider:
        return "resend"
    if provider in {"resend", "smtp"}:
        return provider
    raise EmailNotConfiguredError(f"Unsupported EMAIL_PROVIDER={provider!r}. Supported: resend (default), smtp.")


def _require_smtp_config() -> None:
    if not settings.SMTP_HOST:
        raise EmailNotConfiguredError("SMTP_HOST is not set")
    if not settings.SMTP_FROM_EMAIL:
        raise EmailNotConfiguredError("SMTP_FROM_EMAIL is not set")

    # Username/password may be optional for some SMTP servers, so don't hard-require.


def _require_resend_config() -> tuple[str, str]:
    api_key = (settings.RESEND_API_KEY or "").strip()
    if not api_key:
        raise EmailNotConfiguredError("RESEND_API_KEY is not set")
    if not settings.FROM_EMAIL:
        raise EmailNotConfiguredError("FROM_EMAIL is not set")
    return api_key, settings.FROM_EMAIL


def _send_email_resend(to_email: str, subject: str, body: str) -> str | None:
    api_key, from_email = _require_resend_config()

    payload = {
        "from": from_email,
        "to": [to_email],
        "subject": subject,
        "text": body,
    }

    try:
        resend.api_key = api_key
        res = resend.Emails.send(payload)  # type: ignore[attr-defined]
    except Exception as e:  # noqa: BLE001
        raise EmailDeliveryError(f"Resend send failed: {e}") from e

    msg_id: str | None = None
    if isinstance(res, dict):
        if res.get("error"):
            raise EmailDeliveryError(f"Resend API error: {res.get('error')}")
        v = res.get("id")
        if isinstance(v, str) and v.strip():
            msg_id = v.strip()

    logger.info("Resend email sent: to=%s msg_id=%s", to_email, msg_id)
    return msg_id


def _send_email_smtp(to_email: str, subject: str, body: str) -> None:
    _require_smtp_config()

    msg = MIMEText(body, "plain", "utf-8")
    msg["From"] = settings.SMTP_FROM_EMAIL
    msg["To"] = to_email
    msg["Subject"] = subject
    msg["Date"] = formatdate(localtime=True)

    if settings.SMTP_USE_SSL:
        server: smtplib.SMTP = smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10)
    else:
        server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10)

    try:
        server.ehlo()
        if settings.SMTP_USE_TLS and not settings.SMTP_USE_SSL:
            server.starttls()
            server.ehlo()

        if settings.SMTP_USERNAME:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)

        server.sendmail(settings.SMTP_FROM_EMAIL, [to_email], msg.as_string())
    except smtplib.SMTPException as e:
        logger.exception("SMTP email failed")
        raise EmailDeliveryError("SMTP email failed") from e
    finally:
        try:
            server.quit()
        except smtplib.SMTPException:
            logger.debug("SMTP quit failed", exc_info=True)

    logger.info("SMTP email sent: to=%s", to_email)


def send_email(to_email: str, subject: str, body: str) -> str | None:
    """
    Sends a plain-text email using the configured provider.
    - EMAIL_ENABLED=false: log only (local dev, tests)
    - EMAIL_PROVIDER=resend (default): Resend API
    - EMAIL_PROVIDER=smtp: SMTP via stdlib
    """
    if not settings.EMAIL_ENABLED:
        logger.info("Email disabled; not sending to=%s subject=%r", to_email, subject)
        return None

    provider = _normalize_provider(settings.EMAIL_PROVIDER)
    if provider == "smtp":
        _send_email_smtp(to_email=to_email, subject=subject, body=body)
        return None
    return _send_email_resend(to_email=to_email, subject=subject, body=body)
