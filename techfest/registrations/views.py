# module techfest.registrations.views
"""Routes d'inscription (authentifiées).
- submit: inscription gratuite immédiate, sinon indique le montant à régler
- check-duplicate: email / numéro déjà inscrits ?
- my-registrations: inscriptions de l'utilisateur courant
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from techfest import config
from techfest.utils.security import require_user
from techfest.utils.rate_limit import optional_rate_limit
from techfest.payments import service as payments_service
from techfest.registrations import service as registrations_service
from techfest.registrations.models import DuplicateCheckRequest, RegistrationRequest
from techfest.notifications import service as notifier

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/registration", tags=["Registration API"])


@router.post("/submit", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def submit_registration(
    body: RegistrationRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: Dict[str, Any] = Depends(require_user),
):
    quote = payments_service.quote_registration(user, body)
    if not quote.is_free:
        return {
            "requiresPayment": True,
            "amount": quote.total,
            "currency": config.PAYMENT_CURRENCY,
            "breakdown": quote.breakdown,
        }
    registration = registrations_service.commit_free(body, user)
    notifier.schedule_confirmation(background_tasks, request.app.state, registration)
    return {
        "registrationId": registration["registration_id"],
        "status": registration["status"],
        "paymentStatus": registration["payment_status"],
        "eventCount": registration.get("event_count", 0),
    }


@router.post("/check-duplicate")
def check_duplicate(body: DuplicateCheckRequest, user: Dict[str, Any] = Depends(require_user)):
    return registrations_service.check_duplicate(body.email, body.whatsapp)


@router.get("/my-registrations")
def my_registrations(user: Dict[str, Any] = Depends(require_user)):
    rows = registrations_service.list_user_registrations(user)
    return {"items": [registrations_service.to_public(r) for r in rows]}
