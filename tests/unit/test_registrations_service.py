import re

import pytest

from techfest.registrations import service as ledger
from techfest.registrations.models import RegistrationRequest
from techfest.utils.errors import DuplicateRegistration, InvalidInput, StoreUnavailable

ID_PATTERN = re.compile(r"^TF2025-[A-Z0-9]{8}$")


def _request(**overrides) -> RegistrationRequest:
    data = {
        "name": "Test User",
        "email": "test@example.com",
        "whatsapp": "+91 98765 43210",
        "college": "Example College",
        "selectedNonTechEvents": [7],
    }
    data.update(overrides)
    return RegistrationRequest(**data)


def test_generate_registration_id_format():
    ids = {ledger.generate_registration_id() for _ in range(50)}
    assert all(ID_PATTERN.match(i) for i in ids)
    assert len(ids) == 50

def test_ensure_own_submission_rejects_other_email():
    with pytest.raises(InvalidInput):
        ledger.ensure_own_submission({"email": "someone@example.com"}, _request())
    ledger.ensure_own_submission({"email": " Test@Example.com "}, _request())

def test_commit_order_creates_registration_and_links_order(store, order_factory):
    order = order_factory("pi_a")
    registration, created = ledger.commit_order(order, "ch_1", "signature")

    assert created
    assert ID_PATTERN.match(registration["registration_id"])
    assert registration["payment_status"] == "verified"
    assert registration["payment_details"]["amount"] == 198
    assert registration["payment_details"]["payment_id"] == "ch_1"
    assert registration["event_count"] == 2
    assert store.orders["pi_a"]["registration_id"] == registration["registration_id"]
    assert store.orders["pi_a"]["status"] == "completed"

def test_commit_order_twice_returns_same_registration(store, order_factory):
    order_factory("pi_a")
    first, created_first = ledger.commit_order(store.get_order("pi_a"), "ch_1", "signature")
    second, created_second = ledger.commit_order(store.get_order("pi_a"), "ch_1", "webhook")

    assert created_first and not created_second
    assert first["registration_id"] == second["registration_id"]
    assert len(store.registrations) == 1

def test_commit_order_with_stale_order_loses_race(store, order_factory):
    order_factory("pi_a")
    stale = store.get_order("pi_a")
    winner, _ = ledger.commit_order(store.get_order("pi_a"), "ch_1", "webhook")

    # La copie périmée ne voit pas le lien: le lien conditionnel échoue
    loser, created = ledger.commit_order(stale, "ch_1", "signature")
    assert not created
    assert loser["registration_id"] == winner["registration_id"]
    assert len(store.registrations) == 1

def test_failed_back_link_keeps_registration(store, order_factory):
    order_factory("pi_a")
    store.fail_link = True
    registration, created = ledger.commit_order(store.get_order("pi_a"), "ch_1", "signature")

    assert created
    assert store.get_registration(registration["registration_id"])
    assert store.orders["pi_a"]["registration_id"] is None

def test_commit_order_raises_when_insert_fails(store, order_factory, monkeypatch):
    order_factory("pi_a")
    monkeypatch.setattr("techfest.registrations.repository.insert_registration", lambda row: None)
    with pytest.raises(StoreUnavailable):
        ledger.commit_order(store.get_order("pi_a"), "ch_1", "signature")
    assert store.orders["pi_a"]["registration_id"] is None

def test_check_duplicate_matches_email_and_normalized_whatsapp(store):
    ledger.commit_free(_request(), {"id": "test-user", "email": "test@example.com"})

    result = ledger.check_duplicate("TEST@example.com", "+91-98765-43210")
    assert result["exists"]
    assert result["duplicateFields"] == ["email", "whatsapp"]
    assert result["existingRegistration"]["status"] == "confirmed"
    assert set(result["existingRegistration"]) == {"registrationId", "status"}

    assert ledger.check_duplicate("other@example.com", "+44 7000 000000") == {
        "exists": False, "duplicateFields": [], "existingRegistration": None,
    }

def test_check_duplicate_ignores_cancelled(store):
    saved = ledger.commit_free(_request(), {"id": "test-user", "email": "test@example.com"})
    store.update_registration(saved["registration_id"], {"status": "cancelled"})
    assert not ledger.check_duplicate("test@example.com", "+919876543210")["exists"]

def test_check_duplicate_store_failure_is_store_unavailable(monkeypatch):
    def boom(field, value):
        raise RuntimeError("connection reset")

    monkeypatch.setattr("techfest.registrations.repository.find_active_by_field", boom)
    with pytest.raises(StoreUnavailable):
        ledger.check_duplicate("test@example.com", "9876543210")

def test_commit_free_records_not_required_payment(store):
    saved = ledger.commit_free(_request(), {"id": "test-user", "email": "test@example.com"})
    assert saved["amount"] == 0
    assert saved["payment_status"] == "not-required"
    assert saved["payment_details"] is None
    assert saved["user_id"] == "test-user"
    assert saved["whatsapp"] == "+919876543210"

def test_commit_free_rejects_duplicate(store):
    ledger.commit_free(_request(), {"id": "test-user", "email": "test@example.com"})
    with pytest.raises(DuplicateRegistration) as exc:
        ledger.commit_free(_request(email="new@example.com"), {"id": "u2", "email": "new@example.com"})
    assert exc.value.fields == ["whatsapp"]
    assert len(store.registrations) == 1

def test_to_public_camel_cases_nested_keys():
    row = {
        "registration_id": "TF2025-ABCDEFGH",
        "payment_details": {"payment_id": "ch_1", "paid_at": "now"},
        "attendance": {"1": {"attended": True}},
    }
    assert ledger.to_public(row) == {
        "registrationId": "TF2025-ABCDEFGH",
        "paymentDetails": {"paymentId": "ch_1", "paidAt": "now"},
        "attendance": {"1": {"attended": True}},
    }

def test_to_public_converts_dicts_inside_lists():
    row = {
        "selected_events": [1, 2],
        "breakdown": [{"item_id": 1, "unit_price": 99}, {"item_id": 2, "unit_price": 99}],
        "history": [[{"changed_by": "admin@example.com"}]],
    }
    assert ledger.to_public(row) == {
        "selectedEvents": [1, 2],
        "breakdown": [{"itemId": 1, "unitPrice": 99}, {"itemId": 2, "unitPrice": 99}],
        "history": [[{"changedBy": "admin@example.com"}]],
    }
