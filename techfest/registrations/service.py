"""
Registre des inscriptions (ledger).

- commit_order: crée l'inscription d'une commande payée, exactement une fois par
  commande (clé d'idempotence = order_id). L'inscription est écrite d'abord,
  le lien retour sur la commande ensuite: un lien raté est toléré (journalisé),
  une course perdue supprime notre doublon et renvoie l'inscription gagnante.
- commit_free: chemin gratuit sans commande, protégé par le contrôle de doublon
  (email, numéro WhatsApp) sur les inscriptions non annulées.
"""
import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from techfest import config
from techfest.payments import repository as orders_repo
from techfest.registrations import repository as registrations_repo
from techfest.registrations.models import RegistrationRequest, normalize_contact
from techfest.utils.errors import DuplicateRegistration, InvalidInput, StoreUnavailable

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_uppercase + string.digits
_ID_LENGTH = 8

# module techfest.registrations.service
def generate_registration_id() -> str:
    """TF2025-XXXXXXXX (8 caractères majuscules/chiffres, aléa cryptographique)."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))
    return f"{config.REGISTRATION_ID_PREFIX}-{suffix}"

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def ensure_own_submission(user: Dict[str, Any], request: RegistrationRequest) -> None:
    """L'email de l'inscrit doit être celui de l'utilisateur authentifié."""
    if (user.get("email") or "").strip().lower() != request.email:
        raise InvalidInput("You can only submit registration for your own email address")

def _event_count(snapshot: Dict[str, Any]) -> int:
    return sum(
        len(snapshot.get(key) or [])
        for key in ("selected_events", "selected_workshops", "selected_non_tech_events")
    )

def build_registration_row(
    snapshot: Dict[str, Any],
    *,
    user_id: Optional[str],
    user_email: Optional[str],
    amount: int,
    payment_status: str,
    payment_details: Optional[Dict[str, Any]] = None,
    order_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Ligne 'registrations': instantané des sélections + paiement + champs de suivi admin."""
    now = _now_iso()
    return {
        **snapshot,
        "registration_id": generate_registration_id(),
        "user_id": user_id,
        "user_email": user_email,
        "order_id": order_id,
        "amount": amount,
        "payment_details": payment_details,
        "status": "confirmed",
        "payment_status": payment_status,
        "event_count": _event_count(snapshot),
        "checked_in": False,
        "checked_in_at": None,
        "attendance": {},
        "notes": None,
        "flags": [],
        "created_at": now,
        "updated_at": now,
    }

def _existing_for_order(order: Dict[str, Any]) -> Dict[str, Any]:
    registration = registrations_repo.get_registration(order["registration_id"])
    if not registration:
        logger.error(
            "ledger: order_id=%s links missing registration_id=%s",
            order.get("order_id"), order.get("registration_id"),
        )
        raise StoreUnavailable("Linked registration could not be loaded")
    return registration

def commit_order(order: Dict[str, Any], payment_id: str, method: str) -> Tuple[Dict[str, Any], bool]:
    """
    Enregistre l'inscription d'une commande vérifiée.
    Retour: (inscription, created). created=False quand la commande était déjà
    liée (retry client, webhook en double): rien n'est réécrit.
    """
    order_id = order["order_id"]
    if order.get("registration_id"):
        logger.info("ledger: order_id=%s already committed as %s", order_id, order["registration_id"])
        return _existing_for_order(order), False

    amount = int(order.get("amount") or 0)
    payment_details = {
        "order_id": order_id,
        "payment_id": payment_id,
        "amount": amount,
        "currency": order.get("currency"),
        "method": method,
        "status": "paid",
        "paid_at": _now_iso(),
    }
    row = build_registration_row(
        order.get("registration_data") or {},
        user_id=order.get("user_id"),
        user_email=order.get("user_email"),
        amount=amount,
        payment_status="verified",
        payment_details=payment_details,
        order_id=order_id,
    )
    saved = registrations_repo.insert_registration(row)
    if not saved:
        raise StoreUnavailable("Could not record the registration")
    registration_id = saved["registration_id"]

    if orders_repo.link_registration(order_id, registration_id, payment_id, method):
        logger.info("ledger: committed registration_id=%s order_id=%s method=%s", registration_id, order_id, method)
        return saved, True

    current = orders_repo.get_order(order_id) or {}
    winner = current.get("registration_id")
    if winner and winner != registration_id:
        # Un autre commit (webhook ou client) a lié la commande avant nous
        registrations_repo.delete_registration(registration_id)
        logger.info("ledger: order_id=%s lost race, keeping %s", order_id, winner)
        return _existing_for_order(current), False

    logger.warning(
        "ledger: back-link failed order_id=%s registration_id=%s (registration kept)",
        order_id, registration_id,
    )
    return saved, True

def check_duplicate(email: Optional[str], whatsapp: Optional[str]) -> Dict[str, Any]:
    """
    Cherche une inscription non annulée avec le même email ou numéro.
    Retour: {exists, duplicateFields, existingRegistration{registrationId, status}}
    """
    lookups = [
        ("email", (email or "").strip().lower()),
        ("whatsapp", normalize_contact(whatsapp)),
    ]
    fields: List[str] = []
    existing: Optional[Dict[str, Any]] = None
    for field, value in lookups:
        if not value:
            continue
        try:
            row = registrations_repo.find_active_by_field(field, value)
        except Exception:
            logger.exception("ledger: duplicate lookup failed field=%s", field)
            raise StoreUnavailable("Duplicate check is temporarily unavailable")
        if row:
            fields.append(field)
            existing = existing or row
    return {
        "exists": bool(fields),
        "duplicateFields": fields,
        "existingRegistration": (
            {"registrationId": existing.get("registration_id"), "status": existing.get("status")}
            if existing else None
        ),
    }

def commit_free(request: RegistrationRequest, user: Dict[str, Any]) -> Dict[str, Any]:
    """Inscription gratuite (montant 0): contrôle de doublon puis écriture directe."""
    duplicate = check_duplicate(request.email, request.whatsapp)
    if duplicate["exists"]:
        raise DuplicateRegistration(
            duplicate["duplicateFields"],
            "A registration already exists for " + " and ".join(duplicate["duplicateFields"]),
        )
    row = build_registration_row(
        request.snapshot(),
        user_id=user.get("id"),
        user_email=user.get("email"),
        amount=0,
        payment_status="not-required",
    )
    saved = registrations_repo.insert_registration(row)
    if not saved:
        raise StoreUnavailable("Could not record the registration")
    logger.info("ledger: free registration_id=%s user_email=%s", saved["registration_id"], user.get("email"))
    return saved

def list_user_registrations(user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return registrations_repo.list_by_user_email(user.get("email") or "")

def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)

def _public_value(value: Any) -> Any:
    if isinstance(value, dict):
        return to_public(value)
    if isinstance(value, list):
        return [_public_value(item) for item in value]
    return value

def to_public(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Vue API d'une inscription (clés en camelCase, comme attendu par le front).
    Les dicts imbriqués, y compris dans des listes, sont convertis; 'attendance'
    est gardé tel quel (clés = identifiants d'événements).
    """
    out: Dict[str, Any] = {}
    for key, value in (row or {}).items():
        out[_camel(key)] = value if key == "attendance" else _public_value(value)
    return out
