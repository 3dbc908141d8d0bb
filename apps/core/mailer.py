# apps/core/mailer.py
import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import strip_tags

from .exceptions import SideEffectError

logger = logging.getLogger(__name__)


def send_html_mail(to, subject, html):
    """Wysyła e-mail przez skonfigurowany backend Django (SMTP lub konsola)."""
    try:
        send_mail(
            subject,
            strip_tags(html),
            settings.DEFAULT_FROM_EMAIL,
            [to],
            html_message=html,
        )
    except Exception as exc:
        raise SideEffectError("mail", exc) from exc
    logger.info("Mail '%s' sent to %s", subject, to)


def send_password_changed_mail(email, name):
    send_html_mail(
        email,
        "Your password was changed",
        f"<p>Hello {name},</p><p>The password of your account was changed successfully.</p>",
    )
