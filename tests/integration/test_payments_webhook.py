import hashlib
import hmac
import json
import time

from techfest import config


def _post_event(client, event, secret=None):
    payload = json.dumps(event)
    ts = int(time.time())
    sig = hmac.new(
        (secret or config.STRIPE_WEBHOOK_SECRET).encode(), f"{ts}.{payload}".encode(), hashlib.sha256
    ).hexdigest()
    return client.post(
        "/api/payment/webhook",
        content=payload,
        headers={"stripe-signature": f"t={ts},v1={sig}", "content-type": "application/json"},
    )

def _event(event_type, intent):
    return {"id": "evt_test", "object": "event", "type": event_type, "data": {"object": intent}}


def test_succeeded_event_commits_registration(client, store, order_factory, outbox):
    order_factory("pi_hook")
    r = _post_event(client, _event("payment_intent.succeeded", {"id": "pi_hook", "latest_charge": "ch_hook"}))
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}

    registration_id = store.orders["pi_hook"]["registration_id"]
    assert registration_id
    assert store.get_registration(registration_id)["payment_details"]["method"] == "webhook"
    assert len(outbox) == 1

def test_event_for_already_linked_order_is_a_no_op(client, store, order_factory, outbox):
    order_factory("pi_hook")
    event = _event("payment_intent.succeeded", {"id": "pi_hook"})
    _post_event(client, event)
    before = len(store.registrations)

    r = _post_event(client, event)
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert len(store.registrations) == before == 1
    assert len(outbox) == 1

def test_webhook_after_client_verification_keeps_single_registration(client, store, order_factory):
    from techfest.payments.signature import compute_signature

    order_factory("pi_both")
    sig = compute_signature("pi_both", "pay_1", config.PAYMENT_SIGNATURE_SECRET)
    verified = client.post(
        "/api/payment/verify-payment", json={"orderId": "pi_both", "paymentId": "pay_1", "signature": sig},
    ).json()

    _post_event(client, _event("payment_intent.succeeded", {"id": "pi_both"}))
    assert [r["registration_id"] for r in store.registrations] == [verified["registrationId"]]

def test_payment_failed_marks_order(client, store, order_factory):
    order_factory("pi_fail")
    r = _post_event(client, _event(
        "payment_intent.payment_failed", {"id": "pi_fail", "last_payment_error": {"message": "Your card was declined."}},
    ))
    assert r.status_code == 200
    assert store.orders["pi_fail"]["status"] == "failed"
    assert store.registrations == []

def test_retry_after_decline_commits_registration(client, store, order_factory, outbox):
    order_factory("pi_retry")
    _post_event(client, _event("payment_intent.payment_failed", {"id": "pi_retry"}))
    assert store.orders["pi_retry"]["status"] == "failed"

    r = _post_event(client, _event("payment_intent.succeeded", {"id": "pi_retry", "latest_charge": "ch_2"}))
    assert r.status_code == 200
    assert store.orders["pi_retry"]["status"] == "completed"
    assert len(store.registrations) == 1
    assert len(outbox) == 1

def test_unknown_event_type_is_acknowledged(client, store):
    r = _post_event(client, _event("charge.refunded", {"id": "ch_1"}))
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}

def test_bad_signature_is_rejected(client, store, order_factory):
    order_factory("pi_hook")
    r = _post_event(client, _event("payment_intent.succeeded", {"id": "pi_hook"}), secret="whsec_wrong")
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_input"
    assert store.registrations == []

def test_missing_signature_header_is_rejected(client):
    r = client.post("/api/payment/webhook", content=b"{}", headers={"content-type": "application/json"})
    assert r.status_code == 400

def test_webhook_secret_not_configured_is_503(client, monkeypatch):
    monkeypatch.setattr("techfest.config.STRIPE_WEBHOOK_SECRET", "")
    r = client.post("/api/payment/webhook", content=b"{}", headers={"stripe-signature": "t=1,v1=x"})
    assert r.status_code == 503
