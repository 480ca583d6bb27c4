"""
Rendu des emails (Jinja2): une version HTML et une version texte par message.
Les titres des pass/événements/workshops sont résolus depuis le catalogue.
"""
from typing import Any, Dict, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

from techfest import config
from techfest.auth.service import is_discount_eligible
from techfest.catalog.repository import Catalog, get_catalog

_env: Optional[Environment] = None

def get_environment() -> Environment:
    global _env
    if _env is None:
        _env = Environment(
            loader=FileSystemLoader(str(config.TEMPLATES_DIR / "emails")),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
    return _env

def _resolve(ids: List[Any], lookup) -> List[Dict[str, Any]]:
    items = []
    for item_id in ids or []:
        item = lookup(item_id)
        items.append(item if item else {"id": item_id, "title": f"Event #{item_id}"})
    return items

def registration_context(registration: Dict[str, Any], catalog: Optional[Catalog] = None) -> Dict[str, Any]:
    catalog = catalog or get_catalog()
    payment = registration.get("payment_details") or {}
    selected_pass = registration.get("selected_pass")
    pass_def = catalog.get_pass(selected_pass) if selected_pass is not None else None
    email = registration.get("user_email") or registration.get("email") or ""
    return {
        "registration_id": registration.get("registration_id"),
        "name": registration.get("name") or "",
        "email": email,
        "student_type": "CIT Student" if is_discount_eligible(email) else "Regular Student",
        "amount": registration.get("amount") or payment.get("amount") or 0,
        "payment_id": payment.get("payment_id"),
        "payment_status": registration.get("payment_status"),
        "selected_pass": pass_def or ({"title": f"Pass #{selected_pass}"} if selected_pass is not None else None),
        "tech_events": _resolve(registration.get("selected_events"), catalog.get_event),
        "workshops": _resolve(registration.get("selected_workshops"), catalog.get_workshop),
        "non_tech_events": _resolve(registration.get("selected_non_tech_events"), catalog.get_event),
        "dashboard_url": f"{config.FRONTEND_URL}/dashboard",
        "support_email": config.SUPPORT_EMAIL,
    }

def render_registration_email(registration: Dict[str, Any], catalog: Optional[Catalog] = None) -> Tuple[str, str, str]:
    """Retourne (sujet, html, texte) de l'email de confirmation."""
    ctx = registration_context(registration, catalog)
    env = get_environment()
    subject = f"Tech Fiesta 2025 - Registration Confirmed ({ctx['registration_id']})"
    html = env.get_template("registration_confirmed.html").render(**ctx)
    text = env.get_template("registration_confirmed.txt").render(**ctx)
    return subject, html, text
