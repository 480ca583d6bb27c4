# module techfest.catalog.views
"""Endpoints publics du catalogue (lecture seule, sans authentification).
- /api/events: tous les événements, filtres tech / non-tech, détail par id.
- /api/workshops: liste, disponibles, catégories, niveaux, filtres, détail.
- /api/passes: pass disponibles et détail.
Les routes statiques sont déclarées avant les routes paramétrées ({id}).
"""
from fastapi import APIRouter

from techfest.catalog.repository import get_catalog
from techfest.utils.errors import NotFound

events_router = APIRouter(prefix="/api/events", tags=["Catalog API"])
workshops_router = APIRouter(prefix="/api/workshops", tags=["Catalog API"])
passes_router = APIRouter(prefix="/api/passes", tags=["Catalog API"])


@events_router.get("")
def list_events():
    return {"items": get_catalog().events}

@events_router.get("/tech")
def list_tech_events():
    return {"items": get_catalog().tech_events()}

@events_router.get("/non-tech")
def list_non_tech_events():
    return {"items": get_catalog().non_tech_events()}

@events_router.get("/{event_id}")
def get_event(event_id: int):
    """Détail d'un événement; 404 si l'identifiant n'existe pas."""
    event = get_catalog().get_event(event_id)
    if not event:
        raise NotFound(f"Event with ID {event_id} does not exist")
    return event


@workshops_router.get("")
def list_workshops():
    return {"items": get_catalog().workshops}

@workshops_router.get("/available")
def list_available_workshops():
    return {"items": get_catalog().available_workshops()}

@workshops_router.get("/categories")
def list_workshop_categories():
    return {"items": get_catalog().workshop_categories()}

@workshops_router.get("/levels")
def list_workshop_levels():
    return {"items": get_catalog().workshop_levels()}

@workshops_router.get("/category/{category}")
def list_workshops_by_category(category: str):
    return {"items": get_catalog().workshops_by_category(category)}

@workshops_router.get("/level/{level}")
def list_workshops_by_level(level: str):
    return {"items": get_catalog().workshops_by_level(level)}

@workshops_router.get("/{workshop_id}")
def get_workshop(workshop_id: int):
    workshop = get_catalog().get_workshop(workshop_id)
    if not workshop:
        raise NotFound(f"Workshop with ID {workshop_id} does not exist")
    return workshop


@passes_router.get("")
def list_passes():
    """Pass actuellement proposés à la vente (available=True)."""
    return {"items": get_catalog().available_passes()}

@passes_router.get("/{pass_id}")
def get_pass(pass_id: int):
    item = get_catalog().get_pass(pass_id)
    if not item:
        raise NotFound(f"Pass with ID {pass_id} does not exist")
    return item
