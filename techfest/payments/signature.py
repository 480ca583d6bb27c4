"""
Preuves de paiement côté client.

- Signature: HMAC-SHA256 (hex) de "order_id|payment_id" avec le secret partagé.
- POLL_VERIFIED: valeur sentinelle envoyée quand le front a constaté le paiement
  par sondage; la vérification passe alors par le statut Stripe.
"""
import hashlib
import hmac

POLL_VERIFIED = "poll_verified"

def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    body = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()

def verify_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """Comparaison en temps constant; False si le secret ou la signature manque."""
    if not secret or not signature:
        return False
    expected = compute_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.strip().encode("utf-8"))

def is_poll_sentinel(proof: str) -> bool:
    return (proof or "").strip() == POLL_VERIFIED
