import logging
from typing import Any, Dict

from techfest.infra.supabase_client import get_supabase

logger = logging.getLogger(__name__)

# module techfest.auth.repository
def get_user_from_access_token(access_token: str) -> Dict[str, Any]:
    """
    Vérifie le token auprès de Supabase Auth (auth.get_user) et retourne
    {id, email, user_metadata, app_metadata}. Les erreurs du fournisseur remontent.
    """
    res = get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None)
    if user is None:
        logger.info("auth.get_user returned no user")
        return {}
    if isinstance(user, dict):
        return user
    return {
        "id": getattr(user, "id", None),
        "email": getattr(user, "email", None),
        "user_metadata": getattr(user, "user_metadata", None) or {},
        "app_metadata": getattr(user, "app_metadata", None) or {},
    }
