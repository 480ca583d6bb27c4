import logging
from fastapi import Request, Depends
from typing import Dict, Any

from techfest.infra import supabase_client
from techfest.utils.errors import Unauthorized, Forbidden, AuthUnavailable

logger = logging.getLogger(__name__)

def get_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.lower().startswith("bearer "):
        raise Unauthorized("Missing or invalid authorization header")
    token = auth_header[7:].strip()
    if not token:
        raise Unauthorized("No token provided")
    return token

def get_current_user(request: Request) -> Dict[str, Any]:
    """
    Vérifie le Bearer token auprès de Supabase Auth.
    - 401 si le header est absent ou le token refusé.
    - 503 (auth désactivée) si Supabase n'est pas configuré, sans faire tomber le process.
    """
    token = get_bearer_token(request)
    if not supabase_client.is_configured():
        raise AuthUnavailable()
    try:
        from techfest.auth.service import get_user_from_token as _svc_get_user_from_token
        user = _svc_get_user_from_token(token)
    except Exception:
        logger.warning("Token verification failed", exc_info=True)
        raise Unauthorized("Invalid token")
    if not user.get("id") or not user.get("email"):
        raise Unauthorized("Invalid token")
    return user

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user

def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != "admin":
        raise Forbidden("Admin access required")
    return user
