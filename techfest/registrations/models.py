# module techfest.registrations.models
"""Modèles d'entrée (pydantic) des flux d'inscription et de paiement.
Le front envoie du camelCase (selectedEvents, registrationData...): les alias
sont acceptés, les noms Python restent en snake_case.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def normalize_contact(raw: Optional[str]) -> str:
    """Conserve uniquement les chiffres (et un + initial) pour une comparaison stable."""
    raw = (raw or "").strip()
    digits = "".join(ch for ch in raw if ch.isdigit())
    return ("+" + digits) if raw.startswith("+") and digits else digits


class RegistrationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    whatsapp: str = Field(min_length=6, max_length=20)
    college: str = Field(default="", max_length=200)
    department: Optional[str] = None
    year: Optional[str] = None
    selected_pass: Optional[int] = Field(default=None, alias="selectedPass")
    selected_events: List[int] = Field(default_factory=list, alias="selectedEvents")
    selected_workshops: List[int] = Field(default_factory=list, alias="selectedWorkshops")
    selected_non_tech_events: List[int] = Field(default_factory=list, alias="selectedNonTechEvents")

    @field_validator("name", "college")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return str(v).strip().lower()

    @field_validator("whatsapp")
    @classmethod
    def check_contact(cls, v: str) -> str:
        contact = normalize_contact(v)
        if len(contact.lstrip("+")) < 6:
            raise ValueError("Invalid contact number")
        return contact

    @field_validator("selected_events", "selected_workshops", "selected_non_tech_events")
    @classmethod
    def dedupe_ids(cls, v: List[int]) -> List[int]:
        seen: List[int] = []
        for item in v or []:
            if item not in seen:
                seen.append(item)
        return seen

    def snapshot(self) -> Dict[str, Any]:
        """Représentation stockée (colonnes de la table registrations)."""
        return self.model_dump(mode="json")

    @property
    def event_count(self) -> int:
        return len(self.selected_events) + len(self.selected_workshops) + len(self.selected_non_tech_events)


class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    currency: Optional[str] = None
    notes: Dict[str, Any] = Field(default_factory=dict)
    registration_data: RegistrationRequest = Field(alias="registrationData")


class VerifyPaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(min_length=1, alias="orderId")
    payment_id: str = Field(min_length=1, alias="paymentId")
    signature: str = Field(min_length=1)
    # Accepté pour compat front; l'instantané de la commande fait foi
    registration_data: Optional[Dict[str, Any]] = Field(default=None, alias="registrationData")


class DuplicateCheckRequest(BaseModel):
    email: str = Field(min_length=3)
    whatsapp: str = Field(min_length=1)
