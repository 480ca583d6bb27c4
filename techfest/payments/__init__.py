"""
Module 'payments' (feature-first): point d'entrée public.
Réunit le calcul du montant, les preuves de paiement, le client Stripe, le
repository payment_orders et les cas d'usage (service).
"""

from .pricing import WORKSHOP_FEE, Quote, compute_amount, item_price
from .signature import POLL_VERIFIED, compute_signature, verify_signature, is_poll_sentinel

__all__ = [
    # pricing
    "WORKSHOP_FEE",
    "Quote",
    "compute_amount",
    "item_price",
    # signature
    "POLL_VERIFIED",
    "compute_signature",
    "verify_signature",
    "is_poll_sentinel",
]
