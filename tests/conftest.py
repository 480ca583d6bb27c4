import os

# Configuration déterministe avant l'import de l'application (constantes lues à l'import)
os.environ["DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS"] = "1"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_PUBLIC_KEY"] = "pk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_dummy"
os.environ["PAYMENT_SIGNATURE_SECRET"] = "test-signature-secret"
os.environ["DISCOUNT_EMAIL_DOMAINS"] = "citchennai.net"
os.environ["EMAIL_1"] = "first.sender@example.com"
os.environ["EMAIL_1_PASSWORD"] = "app-password-1"
os.environ["EMAIL_2"] = "second.sender@example.com"
os.environ["EMAIL_2_PASSWORD"] = "app-password-2"
os.environ["EMAIL_DAILY_LIMIT"] = "500"

import copy
import itertools
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from techfest.app import app as fastapi_app
from techfest.utils.security import require_user, require_admin

TEST_USER: Dict[str, Any] = {
    "id": "test-user",
    "email": "test@example.com",
    "role": "user",
    "metadata": {"full_name": "Test User"},
    "token": "fake-token",
}

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


class FakeStore:
    """Tables payment_orders / registrations en mémoire (mêmes signatures que les repositories)."""

    def __init__(self):
        self.orders: Dict[str, dict] = {}
        self.registrations: List[dict] = []
        self.fail_link = False

    # --- payment_orders ---
    def insert_order(self, row):
        self.orders[row["order_id"]] = copy.deepcopy(row)
        return copy.deepcopy(row)

    def get_order(self, order_id):
        row = self.orders.get(order_id)
        return copy.deepcopy(row) if row else None

    def link_registration(self, order_id, registration_id, payment_id, method):
        row = self.orders.get(order_id)
        if self.fail_link or not row or row.get("registration_id"):
            return []
        row.update({"status": "completed", "registration_id": registration_id,
                    "payment_id": payment_id, "verification_method": method})
        return [copy.deepcopy(row)]

    def mark_order_failed(self, order_id, reason=None):
        row = self.orders.get(order_id)
        if not row or row.get("status") != "created":
            return []
        row.update({"status": "failed", "failure_reason": reason})
        return [copy.deepcopy(row)]

    # --- registrations ---
    def insert_registration(self, row):
        self.registrations.append(copy.deepcopy(row))
        return copy.deepcopy(row)

    def get_registration(self, registration_id):
        for row in self.registrations:
            if row["registration_id"] == registration_id:
                return copy.deepcopy(row)
        return None

    def find_active_by_field(self, field, value):
        for row in self.registrations:
            if row.get(field) == value and row.get("status") != "cancelled":
                return copy.deepcopy(row)
        return None

    def list_by_user_email(self, user_email):
        return [copy.deepcopy(r) for r in self.registrations if r.get("user_email") == user_email]

    def list_registrations(self, limit=100, offset=0, status=None):
        rows = [r for r in self.registrations if not status or r.get("status") == status]
        return [copy.deepcopy(r) for r in rows[offset:offset + limit]]

    def update_registration(self, registration_id, data):
        for row in self.registrations:
            if row["registration_id"] == registration_id:
                row.update(copy.deepcopy(data))
                return copy.deepcopy(row)
        return None

    def delete_registration(self, registration_id):
        self.registrations = [r for r in self.registrations if r["registration_id"] != registration_id]
        return True

    def count(self, table_name, status=None, key="registration_id"):
        rows = self.registrations if table_name == "registrations" else list(self.orders.values())
        return len([r for r in rows if not status or r.get("status") == status])


class FakeGateway:
    """Remplace l'adaptateur Stripe: commandes numérotées, statut pilotable."""

    def __init__(self):
        self.created: List[dict] = []
        self.statuses: Dict[str, dict] = {}
        self._ids = itertools.count(1)

    def create_order(self, *, amount_minor, currency, receipt, metadata):
        order = {
            "id": f"pi_test_{next(self._ids)}",
            "amount": amount_minor,
            "currency": currency.lower(),
            "client_secret": "pi_secret_test",
            "status": "requires_payment_method",
        }
        self.created.append({**order, "receipt": receipt, "metadata": metadata})
        return order

    def fetch_order(self, order_id):
        return self.statuses.get(order_id, {"id": order_id, "status": "requires_payment_method", "amount_received": 0})


@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Simuler un utilisateur authentifié pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_require_user(app):
    app.dependency_overrides[require_user] = lambda: dict(TEST_USER)
    try:
        yield
    finally:
        app.dependency_overrides.pop(require_user, None)

@pytest.fixture
def as_user(app):
    """Remplace l'utilisateur courant: as_user(email=..., id=...)."""
    def _set(**fields):
        user = {**TEST_USER, **fields}
        app.dependency_overrides[require_user] = lambda: user
        return user
    return _set

@pytest.fixture
def authenticated_admin_client(app, client):
    def _override_require_admin():
        return {"id": "admin-user-id", "role": "admin", "email": "admin@example.com"}
    app.dependency_overrides[require_admin] = _override_require_admin
    yield client
    app.dependency_overrides.pop(require_admin, None)

# Tables Supabase en mémoire pour tous les tests
@pytest.fixture(autouse=True)
def store(monkeypatch) -> FakeStore:
    fake = FakeStore()
    for name in ("insert_order", "get_order", "link_registration", "mark_order_failed"):
        monkeypatch.setattr(f"techfest.payments.repository.{name}", getattr(fake, name))
    for name in (
        "insert_registration", "get_registration", "find_active_by_field", "list_by_user_email",
        "list_registrations", "update_registration", "delete_registration",
    ):
        monkeypatch.setattr(f"techfest.registrations.repository.{name}", getattr(fake, name))
    monkeypatch.setattr("techfest.admin.repository.count_table_rows", fake.count)
    return fake

# Mocks Stripe (aucun appel réseau)
@pytest.fixture(autouse=True)
def gateway(monkeypatch) -> FakeGateway:
    fake = FakeGateway()
    monkeypatch.setattr("techfest.payments.stripe_client.create_order", fake.create_order)
    monkeypatch.setattr("techfest.payments.stripe_client.fetch_order", fake.fetch_order)
    return fake

# Envoi SMTP remplacé par une boîte d'envoi en mémoire
@pytest.fixture(autouse=True)
def outbox(monkeypatch) -> List[dict]:
    sent: List[dict] = []

    def _fake_send(account, sender_name, to, subject, html, text=None):
        sent.append({"from": account.email, "to": to, "subject": subject, "html": html, "text": text})
        return f"<msg-{len(sent)}@example.com>"

    monkeypatch.setattr("techfest.notifications.mailer.send_message", _fake_send)
    return sent

def registration_payload(**overrides) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "name": "Test User",
        "email": "test@example.com",
        "whatsapp": "+91 98765 43210",
        "college": "Example College",
        "department": "CSE",
        "year": "3",
        "selectedPass": None,
        "selectedEvents": [],
        "selectedWorkshops": [],
        "selectedNonTechEvents": [],
    }
    data.update(overrides)
    return data

@pytest.fixture
def make_registration():
    return registration_payload

def seed_order(store: FakeStore, order_id: str = "pi_seed", *, user_id: str = "test-user",
               amount: int = 198, registration_id: Optional[str] = None, status: str = "created",
               **snapshot_overrides) -> dict:
    snapshot = {
        "name": "Test User", "email": "test@example.com", "whatsapp": "+919876543210",
        "college": "Example College", "department": "CSE", "year": "3",
        "selected_pass": None, "selected_events": [1, 2], "selected_workshops": [],
        "selected_non_tech_events": [],
    }
    snapshot.update(snapshot_overrides)
    row = {
        "order_id": order_id, "amount": amount, "amount_minor": amount * 100, "currency": "INR",
        "status": status, "user_id": user_id, "user_email": "test@example.com",
        "registration_data": snapshot, "notes": {}, "breakdown": [], "receipt": "TF2025_1",
        "registration_id": registration_id, "created_at": "2025-01-01T00:00:00+00:00",
    }
    store.insert_order(row)
    return row

@pytest.fixture
def order_factory(store):
    def _make(order_id: str = "pi_seed", **kwargs) -> dict:
        return seed_order(store, order_id, **kwargs)
    return _make
