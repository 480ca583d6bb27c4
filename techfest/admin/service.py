# module techfest.admin.service
"""Opérations admin sur les inscriptions (accueil, workshops, présence, notes)."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from techfest.admin import repository as admin_repository
from techfest.catalog.repository import get_catalog
from techfest.registrations import repository as registrations_repo
from techfest.utils.errors import InvalidInput, NotFound, StoreUnavailable
import logging

logger = logging.getLogger(__name__)

ADMIN_STATUSES = ("confirmed", "cancelled")

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def list_registrations(limit: int = 100, offset: int = 0, status: Optional[str] = None) -> Dict[str, Any]:
    items = registrations_repo.list_registrations(limit=limit, offset=offset, status=status)
    total = admin_repository.count_table_rows("registrations", status=status)
    return {"items": items, "total": total, "limit": limit, "offset": offset}

def get_registration(registration_id: str) -> Dict[str, Any]:
    registration = registrations_repo.get_registration(registration_id)
    if not registration:
        raise NotFound(f"Registration {registration_id} not found")
    return registration

def _update(registration_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    data = {**data, "updated_at": _now_iso()}
    updated = registrations_repo.update_registration(registration_id, data)
    if not updated:
        raise StoreUnavailable("Could not update the registration")
    return updated

def check_in(registration_id: str, admin: Dict[str, Any]) -> Dict[str, Any]:
    """Enregistre l'arrivée sur place; une seconde tentative renvoie l'état existant."""
    registration = get_registration(registration_id)
    if registration.get("status") == "cancelled":
        raise InvalidInput("Cancelled registrations cannot be checked in")
    if registration.get("checked_in"):
        return {"alreadyCheckedIn": True, "registration": registration}
    updated = _update(registration_id, {
        "checked_in": True,
        "checked_in_at": _now_iso(),
        "checked_in_by": admin.get("email"),
    })
    logger.info("admin: check-in registration_id=%s by=%s", registration_id, admin.get("email"))
    return {"alreadyCheckedIn": False, "registration": updated}

def reassign_workshops(registration_id: str, workshop_ids: List[int], admin: Dict[str, Any]) -> Dict[str, Any]:
    """Remplace les workshops d'une inscription (identifiants du catalogue, disponibles)."""
    registration = get_registration(registration_id)
    catalog = get_catalog()
    unique: List[int] = []
    for workshop_id in workshop_ids:
        workshop = catalog.get_workshop(workshop_id)
        if not workshop or not workshop.get("available", True):
            raise InvalidInput(f"Workshop {workshop_id} is not available")
        if workshop_id not in unique:
            unique.append(workshop_id)
    event_count = (
        len(registration.get("selected_events") or [])
        + len(unique)
        + len(registration.get("selected_non_tech_events") or [])
    )
    logger.info("admin: workshops registration_id=%s -> %s by=%s", registration_id, unique, admin.get("email"))
    return _update(registration_id, {"selected_workshops": unique, "event_count": event_count})

def mark_attendance(registration_id: str, event_id: int, attended: bool, admin: Dict[str, Any]) -> Dict[str, Any]:
    """Présence à un événement ou workshop choisi par l'inscrit."""
    registration = get_registration(registration_id)
    selected = (
        list(registration.get("selected_events") or [])
        + list(registration.get("selected_workshops") or [])
        + list(registration.get("selected_non_tech_events") or [])
    )
    if event_id not in selected:
        raise InvalidInput(f"Event {event_id} is not part of this registration")
    attendance = dict(registration.get("attendance") or {})
    attendance[str(event_id)] = {"attended": attended, "markedAt": _now_iso(), "markedBy": admin.get("email")}
    return _update(registration_id, {"attendance": attendance})

def update_details(registration_id: str, changes: Dict[str, Any], admin: Dict[str, Any]) -> Dict[str, Any]:
    """Notes, drapeaux et statut (confirmed | cancelled)."""
    get_registration(registration_id)
    data = {k: v for k, v in changes.items() if v is not None}
    if "status" in data and data["status"] not in ADMIN_STATUSES:
        raise InvalidInput(f"Status must be one of {', '.join(ADMIN_STATUSES)}")
    if not data:
        raise InvalidInput("Nothing to update")
    logger.info("admin: update registration_id=%s fields=%s by=%s", registration_id, sorted(data), admin.get("email"))
    return _update(registration_id, data)
