"""
Cas d'usage 'payments': orchestre pricing, stripe_client, repository et le registre.

Flux: devis (pricing) -> commande Stripe + ligne payment_orders -> [paiement côté
client] -> vérification (signature HMAC ou statut Stripe) -> commit au registre.
Le webhook Stripe est une seconde entrée vers le même commit idempotent.
"""
import logging
import time
from typing import Any, Dict, Optional, Tuple
from datetime import datetime, timezone

from techfest import config
from techfest.auth.service import is_discount_eligible
from techfest.catalog.repository import get_catalog
from techfest.payments import pricing
from techfest.payments import repository as orders_repo
from techfest.payments import signature as proofs
from techfest.payments import stripe_client
from techfest.registrations import service as ledger
from techfest.registrations.models import CreateOrderRequest, RegistrationRequest, VerifyPaymentRequest
from techfest.utils.errors import (
    DuplicateRegistration,
    Forbidden,
    NotFound,
    StoreUnavailable,
    VerificationFailed,
)

logger = logging.getLogger(__name__)

# module techfest.payments.service
def quote_registration(user: Dict[str, Any], request: RegistrationRequest) -> pricing.Quote:
    """Devis pour l'utilisateur authentifié (contrôle de propriété + tarif réduit)."""
    ledger.ensure_own_submission(user, request)
    return pricing.compute_amount(request, get_catalog(), is_discount_eligible(user.get("email")))

def _guard_duplicate(request: RegistrationRequest) -> None:
    """Contrôle de doublon avant paiement; une panne du store ne bloque pas la commande."""
    try:
        duplicate = ledger.check_duplicate(request.email, request.whatsapp)
    except StoreUnavailable:
        logger.warning("payments: duplicate pre-check skipped email=%s", request.email)
        return
    if duplicate["exists"]:
        raise DuplicateRegistration(duplicate["duplicateFields"])

def _stripe_metadata(user: Dict[str, Any], notes: Dict[str, Any]) -> Dict[str, str]:
    # Stripe n'accepte que des valeurs texte
    meta = {str(k): str(v) for k, v in (notes or {}).items() if v is not None}
    meta.update({"user_id": str(user.get("id") or ""), "user_email": str(user.get("email") or "")})
    return meta

def create_order(user: Dict[str, Any], body: CreateOrderRequest) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """
    Crée la commande d'une inscription payante, ou inscrit directement si le devis est nul.
    Retour: (réponse API, inscription créée sur le chemin gratuit sinon None)
    """
    request = body.registration_data
    quote = quote_registration(user, request)

    if quote.is_free:
        registration = ledger.commit_free(request, user)
        return {
            "freeRegistration": True,
            "registrationId": registration["registration_id"],
            "status": registration["status"],
            "paymentStatus": registration["payment_status"],
            "amount": 0,
        }, registration

    _guard_duplicate(request)

    currency = (body.currency or config.PAYMENT_CURRENCY).upper()
    receipt = f"{config.REGISTRATION_ID_PREFIX}_{int(time.time() * 1000)}"
    amount_minor = quote.total * 100
    gateway_order = stripe_client.create_order(
        amount_minor=amount_minor,
        currency=currency,
        receipt=receipt,
        metadata=_stripe_metadata(user, body.notes),
    )

    row = {
        "order_id": gateway_order["id"],
        "amount": quote.total,
        "amount_minor": amount_minor,
        "currency": currency,
        "status": "created",
        "user_id": user.get("id"),
        "user_email": user.get("email"),
        "registration_data": request.snapshot(),
        "notes": body.notes or {},
        "breakdown": quote.breakdown,
        "receipt": receipt,
        "registration_id": None,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    if not orders_repo.insert_order(row):
        raise StoreUnavailable("Could not record the payment order")
    logger.info(
        "payments: order created order_id=%s amount=%s %s user_id=%s",
        row["order_id"], quote.total, currency, user.get("id"),
    )
    return {
        "orderId": row["order_id"],
        "amount": quote.total,
        "amountMinor": amount_minor,
        "currency": currency,
        "gatewayKey": config.STRIPE_PUBLIC_KEY,
        "clientSecret": gateway_order.get("client_secret"),
        "breakdown": quote.breakdown,
    }, None

def _load_owned_order(order_id: str, user: Dict[str, Any], action: str) -> Dict[str, Any]:
    order = orders_repo.get_order(order_id)
    if not order:
        raise NotFound("Order not found")
    if order.get("user_id") != user.get("id"):
        raise Forbidden(f"You are not authorized to {action} this order")
    return order

def verify_proof(order_id: str, payment_id: str, proof: str) -> str:
    """
    Vérifie la preuve de paiement; retourne la méthode utilisée.
    - sentinelle POLL_VERIFIED: statut Stripe (succeeded ou amount_received > 0)
    - sinon: signature HMAC-SHA256 de "order_id|payment_id"
    """
    if proofs.is_poll_sentinel(proof):
        if not stripe_client.is_paid(stripe_client.fetch_order(order_id)):
            raise VerificationFailed("Payment has not been completed")
        return "status_lookup"
    if not proofs.verify_signature(order_id, payment_id, proof, config.PAYMENT_SIGNATURE_SECRET):
        raise VerificationFailed("Invalid payment signature")
    return "signature"

def verify_payment(user: Dict[str, Any], body: VerifyPaymentRequest) -> Tuple[Dict[str, Any], Dict[str, Any], bool]:
    """
    Confirme un paiement côté client puis commit au registre.
    Ordre des contrôles: commande connue, propriétaire, preuve. Aucun état
    n'est écrit tant que la preuve n'est pas validée. Une commande 'failed'
    reste payable: Stripe accepte une nouvelle tentative sur le même PaymentIntent.
    Retour: (réponse API, inscription, created)
    """
    order = _load_owned_order(body.order_id, user, "verify")
    method = verify_proof(body.order_id, body.payment_id, body.signature)
    registration, created = ledger.commit_order(order, body.payment_id, method)
    return {
        "registrationId": registration["registration_id"],
        "status": registration.get("status"),
        "paymentStatus": registration.get("payment_status"),
        "amount": order.get("amount"),
    }, registration, created

def get_order_status(order_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    order = _load_owned_order(order_id, user, "view")
    return {
        "orderId": order.get("order_id"),
        "amount": order.get("amount"),
        "currency": order.get("currency"),
        "status": order.get("status"),
        "createdAt": order.get("created_at"),
        "registrationId": order.get("registration_id"),
    }

def handle_webhook_event(event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Traite un événement Stripe déjà authentifié.
    - payment_intent.succeeded: commit (no-op si la commande est déjà liée),
      y compris après un échec précédent
    - payment_intent.payment_failed: commande 'failed' si encore 'created'
      (dernier échec noté, la commande reste payable)
    - autres types: ignorés
    Retourne l'inscription nouvellement créée, sinon None.
    """
    event_type = (event or {}).get("type")
    intent = ((event or {}).get("data") or {}).get("object") or {}
    order_id = intent.get("id")

    if event_type == "payment_intent.succeeded":
        order = orders_repo.get_order(order_id) if order_id else None
        if not order:
            logger.warning("payments.webhook: unknown order_id=%s", order_id)
            return None
        if order.get("registration_id"):
            logger.info(
                "payments.webhook: order_id=%s already linked to %s, nothing to do",
                order_id, order["registration_id"],
            )
            return None
        registration, created = ledger.commit_order(order, intent.get("latest_charge") or order_id, "webhook")
        return registration if created else None

    if event_type == "payment_intent.payment_failed":
        reason = (intent.get("last_payment_error") or {}).get("message")
        updated = orders_repo.mark_order_failed(order_id, reason)
        logger.info("payments.webhook: order_id=%s failed updated=%s reason=%s", order_id, bool(updated), reason)
        return None

    logger.debug("payments.webhook: event type=%s ignored", event_type)
    return None
