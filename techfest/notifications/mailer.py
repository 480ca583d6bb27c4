"""
Transport SMTP (SSL sur 465, STARTTLS sinon) pour un compte du pool.
"""
import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Optional

from techfest import config
from techfest.notifications.accounts import EmailAccount

logger = logging.getLogger(__name__)

# Codes SMTP signalant un problème de compte (auth refusée, quota, débit)
_ACCOUNT_CODES = {421, 454, 535}
_LIMIT_HINTS = ("limit", "quota", "rate")

def is_account_error(exc: BaseException) -> bool:
    """Vrai si l'erreur justifie de passer au compte suivant (auth ou limite d'envoi)."""
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return True
    if isinstance(exc, smtplib.SMTPResponseException):
        if exc.smtp_code in _ACCOUNT_CODES:
            return True
        message = exc.smtp_error.decode("utf-8", "ignore") if isinstance(exc.smtp_error, bytes) else str(exc.smtp_error)
        return exc.smtp_code == 550 and any(hint in message.lower() for hint in _LIMIT_HINTS)
    return False

def build_message(account: EmailAccount, sender_name: str, to: str, subject: str, html: str, text: Optional[str]) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = formataddr((sender_name, account.email))
    msg["To"] = to
    msg["Message-ID"] = make_msgid(domain=account.email.rpartition("@")[2] or None)
    msg.set_content(text or "")
    msg.add_alternative(html, subtype="html")
    return msg

def send_message(account: EmailAccount, sender_name: str, to: str, subject: str, html: str, text: Optional[str] = None) -> str:
    """
    Envoie le message avec le compte donné; retourne le Message-ID.
    Les erreurs SMTP remontent à l'appelant (qui décide du retry).
    """
    msg = build_message(account, sender_name, to, subject, html, text)
    if config.SMTP_PORT == 465:
        with smtplib.SMTP_SSL(config.SMTP_HOST, config.SMTP_PORT, context=ssl.create_default_context(), timeout=30) as s:
            s.login(account.email, account.password)
            s.send_message(msg)
    else:
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=30) as s:
            s.starttls(context=ssl.create_default_context())
            s.login(account.email, account.password)
            s.send_message(msg)
    return msg["Message-ID"]
