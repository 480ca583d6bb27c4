import logging
from typing import Any, Dict

import stripe
from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from techfest.utils.security import require_user
from techfest.utils.rate_limit import optional_rate_limit
from techfest.utils.errors import InvalidInput
from techfest.payments import stripe_client
from techfest.payments import service as payments_service
from techfest.notifications import service as notifier
from techfest.registrations.models import CreateOrderRequest, VerifyPaymentRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/payment", tags=["Payments API"])

# module techfest.payments.views
@router.post("/create-order", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_order(
    body: CreateOrderRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: Dict[str, Any] = Depends(require_user),
):
    """
    Crée la commande Stripe (PaymentIntent) de l'inscription de l'utilisateur.
    - Entrée JSON: { "currency"?, "notes"?, "registrationData": {...} }
    - Montant calculé côté serveur (le client n'envoie que ses sélections)
    - Montant nul: inscription immédiate, réponse {freeRegistration: true, registrationId, ...}
    - Erreurs: 400 (email d'un autre utilisateur), 409 (doublon), 502/503 (Stripe)
    """
    result, registration = payments_service.create_order(user, body)
    if registration:
        notifier.schedule_confirmation(background_tasks, request.app.state, registration)
    return result

@router.post("/verify-payment")
def verify_payment(
    body: VerifyPaymentRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    user: Dict[str, Any] = Depends(require_user),
):
    """
    Vérifie le paiement (signature HMAC, ou sentinelle 'poll_verified' -> statut Stripe)
    puis enregistre l'inscription. Rejouable: renvoie la même inscription.
    - Erreurs: 404 commande inconnue, 403 commande d'un autre utilisateur,
      400 vérification échouée (aucune écriture)
    """
    result, registration, created = payments_service.verify_payment(user, body)
    if created:
        notifier.schedule_confirmation(background_tasks, request.app.state, registration)
    return result

@router.get("/status/{order_id}")
def order_status(order_id: str, user: Dict[str, Any] = Depends(require_user)):
    return payments_service.get_order_status(order_id, user)

@router.post("/webhook", include_in_schema=False)
async def webhook_stripe(request: Request, background_tasks: BackgroundTasks):
    """
    Webhook Stripe (PaymentIntent).
    - Signature: stripe_client.parse_event (stripe-signature + STRIPE_WEBHOOK_SECRET)
    - payment_intent.succeeded: commit idempotent; déjà liée -> no-op
    - payment_intent.payment_failed: commande 'failed'
    - Autres types: acceptés et ignorés
    - Réponse: {"status": "ok"}; 400 si signature/payload invalide
    """
    try:
        event = await stripe_client.parse_event(request)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.warning("payments.webhook rejected: %s", e)
        raise InvalidInput("Invalid Stripe webhook payload")
    registration = await run_in_threadpool(payments_service.handle_webhook_event, event)
    if registration:
        notifier.schedule_confirmation(background_tasks, request.app.state, registration)
    return JSONResponse({"status": "ok"})
