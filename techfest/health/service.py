from urllib.parse import urlparse
import socket
import logging

import httpx

from techfest.config import SUPABASE_URL, SUPABASE_ANON
from techfest.infra.supabase_client import get_service_supabase

logger = logging.getLogger(__name__)

TABLES = ("payment_orders", "registrations")

def _check_table(client, name: str):
    try:
        res = client.table(name).select("*").limit(1).execute()
        cnt = len(res.data or [])
        return {"ok": True, "rows": cnt}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def _check_rest(url: str) -> dict:
    """Joignabilité de l'API REST Supabase (tout statut HTTP < 500 compte comme joignable)."""
    try:
        r = httpx.get(f"{url}/rest/v1/", headers={"apikey": SUPABASE_ANON}, timeout=5.0)
        return {"ok": r.status_code < 500, "status": r.status_code}
    except httpx.HTTPError as e:
        return {"ok": False, "error": str(e)}

def health_supabase_info():
    effective_url = SUPABASE_URL
    parsed = urlparse(effective_url) if effective_url else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except OSError as e:
            dns_ok = False
            dns_error = str(e)

    info = {
        "supabase_url": effective_url,
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "rest": _check_rest(effective_url) if dns_ok else None,
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    try:
        client = get_service_supabase()
        for t in TABLES:
            info["tables"][t] = _check_table(client, t)
        info["connect_ok"] = True
    except Exception as e:
        logger.warning("health.supabase: service client unavailable: %s", e)
        info["error"] = str(e)
    return info
