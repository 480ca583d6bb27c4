"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.

Une « commande » (Order) correspond à un PaymentIntent Stripe:
- create_order: PaymentIntent.create avec le montant calculé (unité mineure)
- fetch_order: PaymentIntent.retrieve pour la vérification par statut
- parse_event: validation de la signature du webhook (en-tête stripe-signature)
"""
import json
import logging
from typing import Any, Dict, Optional

import stripe
from fastapi import Request

from techfest import config
from techfest.utils.errors import GatewayRejected, GatewayUnavailable, InvalidInput

logger = logging.getLogger(__name__)

# module techfest.payments.stripe_client
def _field(obj: Any, key: str, default: Any = None) -> Any:
    """Lecture tolérante d'un champ (dict ou StripeObject)."""
    try:
        return obj[key]
    except (KeyError, TypeError):
        return getattr(obj, key, default)

def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l’emploi.
    - Soulève GatewayUnavailable (« paiement non configuré ») sans STRIPE_SECRET_KEY.
    """
    if not is_configured():
        raise GatewayUnavailable("Payment gateway is not configured")
    stripe.api_key = config.STRIPE_SECRET_KEY
    return stripe

def is_configured() -> bool:
    """Vrai si STRIPE_SECRET_KEY est renseignée (exposé par /api/health)."""
    return bool(config.STRIPE_SECRET_KEY)

def create_order(*, amount_minor: int, currency: str, receipt: str, metadata: Dict[str, str]) -> Dict[str, Any]:
    """
    Crée un PaymentIntent Stripe.
    - amount_minor: montant en unité mineure (paise), égal au montant calculé.
    - Pas de retry automatique: l'erreur du fournisseur remonte en GatewayRejected.
    Retour: dict {id, amount, currency, client_secret, status}
    """
    if amount_minor <= 0:
        raise InvalidInput("Amount must be positive")
    require_stripe()
    try:
        intent = stripe.PaymentIntent.create(
            amount=amount_minor,
            currency=currency.lower(),
            description=receipt,
            metadata={**metadata, "receipt": receipt},
            automatic_payment_methods={"enabled": True},
        )
    except stripe.StripeError as e:
        logger.warning("stripe.PaymentIntent.create rejected receipt=%s: %s", receipt, e)
        raise GatewayRejected(getattr(e, "user_message", None) or str(e))
    return {
        "id": _field(intent, "id"),
        "amount": _field(intent, "amount"),
        "currency": _field(intent, "currency"),
        "client_secret": _field(intent, "client_secret"),
        "status": _field(intent, "status"),
    }

def fetch_order(order_id: str) -> Dict[str, Any]:
    """Récupère le PaymentIntent (statut, amount_received) pour la vérification par statut."""
    require_stripe()
    try:
        intent = stripe.PaymentIntent.retrieve(order_id)
    except stripe.StripeError as e:
        logger.warning("stripe.PaymentIntent.retrieve failed order_id=%s: %s", order_id, e)
        raise GatewayRejected(getattr(e, "user_message", None) or str(e))
    return {
        "id": _field(intent, "id"),
        "status": _field(intent, "status"),
        "amount": _field(intent, "amount"),
        "amount_received": _field(intent, "amount_received") or 0,
        "latest_charge": _field(intent, "latest_charge"),
    }

def is_paid(gateway_order: Optional[Dict[str, Any]]) -> bool:
    order = gateway_order or {}
    return order.get("status") == "succeeded" or int(order.get("amount_received") or 0) > 0

async def parse_event(request: Request) -> Dict[str, Any]:
    """
    Parse et valide un événement Stripe signé (webhook).
    - Lit le body brut + en-tête stripe-signature
    - Valide la signature via Webhook.construct_event (STRIPE_WEBHOOK_SECRET)
    - Soulève GatewayUnavailable si le secret webhook est absent, ValueError /
      SignatureVerificationError si le payload est invalide
    """
    if not config.STRIPE_WEBHOOK_SECRET:
        raise GatewayUnavailable("Webhook secret is not configured")
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature") or ""
    event = stripe.Webhook.construct_event(payload, sig_header, config.STRIPE_WEBHOOK_SECRET)
    # Signature valide: on travaille sur le JSON brut plutôt que sur l'objet SDK
    logger.info("stripe webhook received id=%s type=%s", _field(event, "id"), _field(event, "type"))
    return json.loads(payload.decode("utf-8"))
