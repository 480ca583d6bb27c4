"""
Calcul du montant dû (logique pure: pas de Stripe, pas de DB).

Règles:
- Avec pass: prix du pass (réduit si éligible), plus les événements tech au-delà
  du quota inclus quand la sélection est active, plus les workshops au-delà du
  quota au tarif forfaitaire quand le pass l'autorise.
- Sans pass: chaque événement tech à son prix, chaque workshop au forfait.
- Les événements non-tech ne sont jamais facturés (paiement sur place).
- Les identifiants inconnus du catalogue sont ignorés (ni erreur, ni facturation).
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from techfest.catalog.repository import Catalog, parse_price
from techfest.registrations.models import RegistrationRequest
from techfest.utils.errors import InvalidInput

# module techfest.payments.pricing
WORKSHOP_FEE = 100


@dataclass
class Quote:
    total: int = 0
    breakdown: List[Dict[str, Any]] = field(default_factory=list)

    def add(self, label: str, quantity: int, unit_price: int) -> None:
        if quantity <= 0:
            return
        amount = quantity * unit_price
        self.breakdown.append({"label": label, "quantity": quantity, "unitPrice": unit_price, "amount": amount})
        self.total += amount

    @property
    def is_free(self) -> bool:
        return self.total == 0


def item_price(item: Dict[str, Any], discount_eligible: bool) -> int:
    """Prix d'un élément du catalogue: citPrice si éligible et présent, sinon price."""
    if discount_eligible and item.get("citPrice"):
        return parse_price(item["citPrice"])
    return parse_price(item.get("price") or 0)


def compute_amount(request: RegistrationRequest, catalog: Catalog, discount_eligible: bool) -> Quote:
    """
    Retourne le devis (total en roupies entières + lignes de détail).
    - Soulève InvalidInput si un pass sans workshops supplémentaires reçoit plus
      de workshops que son quota, ou si le pass choisi n'est pas disponible.
    """
    quote = Quote()
    tech_events = [e for e in (catalog.get_tech_event(i) for i in request.selected_events) if e]
    workshops = [w for w in (catalog.get_workshop(i) for i in request.selected_workshops) if w]

    pass_def = catalog.get_pass(request.selected_pass) if request.selected_pass is not None else None
    if pass_def and not pass_def.get("available", True):
        raise InvalidInput(f"Pass {request.selected_pass} is not available")
    if pass_def:
        quote.add(pass_def.get("title") or "Pass", 1, item_price(pass_def, discount_eligible))

        tech_rules = pass_def.get("techEvents") or {}
        if tech_rules.get("selectionEnabled"):
            included = int(tech_rules.get("included") or 0)
            for event in tech_events[included:]:
                quote.add(f"Extra event: {event['title']}", 1, item_price(event, discount_eligible))

        ws_rules = pass_def.get("workshops") or {}
        ws_included = int(ws_rules.get("included") or 0)
        extra_ws = max(0, len(workshops) - ws_included)
        if extra_ws and not ws_rules.get("allowExtra"):
            raise InvalidInput(f"{pass_def.get('title')} includes at most {ws_included} workshop(s)")
        quote.add("Extra workshops", extra_ws, WORKSHOP_FEE)
    else:
        for event in tech_events:
            quote.add(event["title"], 1, item_price(event, discount_eligible))
        quote.add("Workshops", len(workshops), WORKSHOP_FEE)

    return quote
