"""
Accès aux données pour la table 'payment_orders' (clé: order_id = id Stripe).
Toutes les opérations passent par le client service-role.
"""
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging
import techfest.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

TABLE = "payment_orders"

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

# module techfest.payments.repository
def insert_order(row: Dict[str, Any]) -> Optional[dict]:
    """
    Enregistre une commande (statut 'created').
    - Retourne la ligne insérée, ou None en cas d'erreur.
    """
    try:
        res = supabase_client.get_service_supabase().table(TABLE).insert(row).execute()
        rows = res.data or []
        return rows[0] if rows else dict(row)
    except Exception:
        logger.exception("payments.repository.insert_order failed order_id=%s", row.get("order_id"))
        return None

def get_order(order_id: str) -> Optional[dict]:
    """Commande par identifiant passerelle, None si absente ou en cas d'erreur."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("*")
            .eq("order_id", order_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("payments.repository.get_order failed order_id=%s", order_id)
        return None

def link_registration(order_id: str, registration_id: str, payment_id: str, method: str) -> List[dict]:
    """
    Passe la commande à 'completed' et la relie à l'inscription.
    - Mise à jour conditionnelle (registration_id IS NULL): une commande n'est liée qu'une fois.
    - Retourne les lignes modifiées ([] si déjà liée ou en cas d'erreur).
    """
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .update({
                "status": "completed",
                "registration_id": registration_id,
                "payment_id": payment_id,
                "verification_method": method,
                "completed_at": _now_iso(),
            })
            .eq("order_id", order_id)
            .is_("registration_id", "null")
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception(
            "payments.repository.link_registration failed order_id=%s registration_id=%s",
            order_id, registration_id,
        )
        return []

def mark_order_failed(order_id: str, reason: Optional[str] = None) -> List[dict]:
    """Statut 'failed' si la commande est encore 'created'. Elle reste payable ensuite (nouvelle tentative Stripe)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .update({"status": "failed", "failure_reason": reason, "failed_at": _now_iso()})
            .eq("order_id", order_id)
            .eq("status", "created")
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("payments.repository.mark_order_failed failed order_id=%s", order_id)
        return []
