"""
Accès aux données pour la table 'registrations'.
- Lectures/écritures via le client service-role.
- Les inscriptions annulées (status='cancelled') ne comptent pas comme doublons.
"""
from typing import Any, Dict, List, Optional
import logging
import techfest.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

TABLE = "registrations"

# module techfest.registrations.repository
def insert_registration(row: Dict[str, Any]) -> Optional[dict]:
    """Insère une inscription; retourne la ligne, ou None en cas d'erreur."""
    try:
        res = supabase_client.get_service_supabase().table(TABLE).insert(row).execute()
        rows = res.data or []
        return rows[0] if rows else dict(row)
    except Exception:
        logger.exception(
            "registrations.repository.insert_registration failed registration_id=%s",
            row.get("registration_id"),
        )
        return None

def get_registration(registration_id: str) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("*")
            .eq("registration_id", registration_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("registrations.repository.get_registration failed registration_id=%s", registration_id)
        return None

def find_active_by_field(field: str, value: str) -> Optional[dict]:
    """
    Première inscription non annulée dont `field` (email | whatsapp) vaut `value`.
    Soulève en cas d'erreur: un contrôle de doublon ne doit pas passer en silence.
    """
    res = (
        supabase_client.get_service_supabase()
        .table(TABLE)
        .select("*")
        .eq(field, value)
        .neq("status", "cancelled")
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def list_by_user_email(user_email: str) -> List[dict]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("*")
            .eq("user_email", user_email)
            .order("created_at", desc=True)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("registrations.repository.list_by_user_email failed user_email=%s", user_email)
        return []

def list_registrations(limit: int = 100, offset: int = 0, status: Optional[str] = None) -> List[dict]:
    """Listing admin, du plus récent au plus ancien."""
    try:
        query = supabase_client.get_service_supabase().table(TABLE).select("*")
        if status:
            query = query.eq("status", status)
        res = query.order("created_at", desc=True).range(offset, offset + limit - 1).execute()
        return res.data or []
    except Exception:
        logger.exception("registrations.repository.list_registrations failed status=%s", status)
        return []

def update_registration(registration_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .update(data)
            .eq("registration_id", registration_id)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("registrations.repository.update_registration failed registration_id=%s", registration_id)
        return None

def delete_registration(registration_id: str) -> bool:
    try:
        supabase_client.get_service_supabase().table(TABLE).delete().eq("registration_id", registration_id).execute()
        return True
    except Exception:
        logger.exception("registrations.repository.delete_registration failed registration_id=%s", registration_id)
        return False
