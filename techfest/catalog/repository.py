"""
Accès au catalogue (lecture seule, données statiques de catalog.data).
- Catalog: index par identifiant + vues filtrées (tech, non-tech, disponibles).
- get_catalog(): instance partagée, construite une seule fois.
- parse_price: "₹99" -> 99 (unités entières de la devise).
"""
import re
from typing import Any, Dict, List, Optional

from techfest.catalog import data

_PRICE_RE = re.compile(r"^\s*₹?\s*(\d+)(?:\.(\d{1,2}))?\s*$")

def parse_price(value: Any) -> int:
    """
    Convertit un prix affichable en entier (roupies).
    - Accepte int/float et chaînes "₹99", "99", "₹99.00".
    - Soulève ValueError si la chaîne n'est pas un montant valide.
    """
    if isinstance(value, bool):
        raise ValueError(f"Prix invalide: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"Prix négatif: {value!r}")
        return int(round(value))
    m = _PRICE_RE.match(str(value or ""))
    if not m:
        raise ValueError(f"Prix invalide: {value!r}")
    whole = int(m.group(1))
    cents = int((m.group(2) or "0").ljust(2, "0"))
    return whole + (1 if cents >= 50 else 0)

def _index(items: List[Dict[str, Any]], kind: str) -> Dict[int, Dict[str, Any]]:
    by_id: Dict[int, Dict[str, Any]] = {}
    for item in items:
        item_id = int(item["id"])
        if item_id in by_id:
            raise ValueError(f"Identifiant {kind} dupliqué: {item_id}")
        for key in ("price", "citPrice"):
            if key in item:
                parse_price(item[key])
        by_id[item_id] = item
    return by_id


class Catalog:
    """Catalogue immuable des événements, workshops et pass."""

    def __init__(self, events: List[dict], workshops: List[dict], passes: List[dict]):
        self.events = list(events)
        self.workshops = list(workshops)
        self.passes = list(passes)
        self._events = _index(self.events, "event")
        self._workshops = _index(self.workshops, "workshop")
        self._passes = _index(self.passes, "pass")

    # --- Événements ---
    def get_event(self, event_id: Any) -> Optional[dict]:
        return self._events.get(_as_id(event_id))

    def tech_events(self) -> List[dict]:
        return [e for e in self.events if e.get("type") == "tech"]

    def non_tech_events(self) -> List[dict]:
        return [e for e in self.events if e.get("type") == "non-tech"]

    def get_tech_event(self, event_id: Any) -> Optional[dict]:
        event = self.get_event(event_id)
        return event if event and event.get("type") == "tech" else None

    # --- Workshops ---
    def get_workshop(self, workshop_id: Any) -> Optional[dict]:
        return self._workshops.get(_as_id(workshop_id))

    def available_workshops(self) -> List[dict]:
        return [w for w in self.workshops if w.get("available", True)]

    def workshops_by_category(self, category: str) -> List[dict]:
        wanted = (category or "").strip().lower()
        return [w for w in self.workshops if str(w.get("category", "")).lower() == wanted]

    def workshops_by_level(self, level: str) -> List[dict]:
        wanted = (level or "").strip().lower()
        return [w for w in self.workshops if str(w.get("level", "")).lower() == wanted]

    def workshop_categories(self) -> List[str]:
        return sorted({w["category"] for w in self.workshops if w.get("category")})

    def workshop_levels(self) -> List[str]:
        return sorted({w["level"] for w in self.workshops if w.get("level")})

    # --- Pass ---
    def get_pass(self, pass_id: Any) -> Optional[dict]:
        return self._passes.get(_as_id(pass_id))

    def available_passes(self) -> List[dict]:
        return [p for p in self.passes if p.get("available", True)]


def _as_id(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


_catalog: Optional[Catalog] = None

def get_catalog() -> Catalog:
    global _catalog
    if _catalog is None:
        _catalog = Catalog(data.EVENTS, data.WORKSHOPS, data.PASSES)
    return _catalog
