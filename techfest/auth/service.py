from typing import Optional, Dict, Any
from techfest.config import ADMIN_EMAILS, DISCOUNT_EMAIL_DOMAINS
from .repository import get_user_from_access_token as _repo_get_user_from_token

def determine_role(email: Optional[str], metadata: Dict[str, Any] | None) -> str:
    """Rôle applicatif: 'admin' si user_metadata.role == admin ou email listé dans ADMIN_EMAILS."""
    role_lower = str((metadata or {}).get("role", "")).lower()
    if role_lower == "admin":
        return "admin"
    if email and email.strip().lower() in ADMIN_EMAILS:
        return "admin"
    return "user"

def is_discount_eligible(email: Optional[str]) -> bool:
    """Tarif réduit si le domaine de l'email appartient à DISCOUNT_EMAIL_DOMAINS."""
    domain = (email or "").strip().lower().rpartition("@")[2]
    return bool(domain) and domain in DISCOUNT_EMAIL_DOMAINS

def get_user_from_token(access_token: str) -> Dict[str, Any]:
    """Normalise user issu de supabase.auth.get_user(access_token):
    - Retourne {id, email, metadata, role, token}
    """
    raw = _repo_get_user_from_token(access_token)
    email = raw.get("email")
    metadata = raw.get("user_metadata") or {}
    # Un rôle posé côté serveur (app_metadata) prime sur celui du profil
    app_role = (raw.get("app_metadata") or {}).get("role")
    return {
        "id": raw.get("id"),
        "email": email,
        "metadata": metadata,
        "role": determine_role(email, {"role": app_role} if app_role else metadata),
        "token": access_token,
    }
