from typing import Optional
from techfest.infra.supabase_client import get_service_supabase
import logging

logger = logging.getLogger(__name__)

# module techfest.admin.repository
def count_table_rows(table_name: str, status: Optional[str] = None, key: str = "registration_id") -> int:
    """
    Compte les lignes d'une table via Supabase (filtre optionnel sur status).
    Utilise count='exact' si disponible, sinon fallback sur len(data).
    """
    try:
        query = get_service_supabase().table(table_name).select(key, count="exact")
        if status:
            query = query.eq("status", status)
        res = query.execute()
        if getattr(res, "count", None) is not None:
            return int(res.count)  # type: ignore
        return len(res.data or [])
    except Exception:
        logger.exception("admin.repository.count_table_rows failed table=%s", table_name)
        return 0
