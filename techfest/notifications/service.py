"""
Notifications email (best effort).

Aucune fonction de ce module ne lève: le résultat est un dict
{success, messageId?, usedEmail?, currentUsage?, error?} journalisé par l'appelant.
Sur erreur d'authentification ou de limite SMTP, on passe au compte suivant et
on réessaie une seule fois.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import BackgroundTasks

from techfest.catalog.repository import Catalog, get_catalog
from techfest.notifications import mailer
from techfest.notifications.accounts import EmailAccountPool, mask_email
from techfest.notifications.templates import render_registration_email

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 2

# module techfest.notifications.service
def _deliver(pool: EmailAccountPool, to: str, subject: str, html: str, text: Optional[str]) -> Dict[str, Any]:
    if not to:
        return {"success": False, "error": "Missing recipient"}
    if pool is None or not pool.configured:
        logger.error("No email configuration available, message to %s not sent", to)
        return {"success": False, "error": "Email service not configured"}

    last_error: Optional[BaseException] = None
    for attempt in range(_MAX_ATTEMPTS):
        account = pool.select()
        try:
            message_id = mailer.send_message(account, pool.sender_name, to, subject, html, text)
        except Exception as e:
            last_error = e
            if mailer.is_account_error(e) and attempt + 1 < _MAX_ATTEMPTS and len(pool) > 1:
                logger.warning("Email account %s rejected the send (%s), trying next account", mask_email(account.email), e)
                pool.advance()
                continue
            break
        usage = pool.record_success(account)
        logger.info("Email sent to %s using %s (usage %s/%s)", to, mask_email(account.email), usage, account.daily_limit)
        return {"success": True, "messageId": message_id, "usedEmail": account.email, "currentUsage": usage}

    logger.error("Email to %s failed: %s", to, last_error)
    return {"success": False, "error": str(last_error), "code": getattr(last_error, "smtp_code", None)}

def send_notification(to: str, subject: str, html: str, text: Optional[str], pool: EmailAccountPool) -> Dict[str, Any]:
    """Envoi générique (même rotation de comptes, même retry unique)."""
    try:
        return _deliver(pool, to, subject, html, text)
    except Exception as e:
        logger.exception("notifications.send_notification failed to=%s", to)
        return {"success": False, "error": str(e)}

def send_registration_confirmation(
    registration: Dict[str, Any],
    pool: EmailAccountPool,
    catalog: Optional[Catalog] = None,
) -> Dict[str, Any]:
    """Email de confirmation d'inscription; n'influence jamais le résultat de l'inscription."""
    registration_id = (registration or {}).get("registration_id")
    try:
        subject, html, text = render_registration_email(registration, catalog or get_catalog())
        to = registration.get("user_email") or registration.get("email")
        result = _deliver(pool, to, subject, html, text)
    except Exception as e:
        logger.exception("notifications: confirmation failed registration_id=%s", registration_id)
        return {"success": False, "error": str(e)}
    if not result.get("success"):
        logger.warning("notifications: confirmation not sent registration_id=%s error=%s", registration_id, result.get("error"))
    return result

def schedule_confirmation(background_tasks: BackgroundTasks, app_state: Any, registration: Dict[str, Any]) -> None:
    """Planifie l'email de confirmation après la réponse HTTP."""
    pool = getattr(app_state, "email_pool", None)
    if pool is None:
        logger.warning("notifications: no email pool, confirmation skipped registration_id=%s", registration.get("registration_id"))
        return
    background_tasks.add_task(send_registration_confirmation, registration, pool)
