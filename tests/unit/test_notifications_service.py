import smtplib

from fastapi import BackgroundTasks

from techfest.notifications import service
from techfest.notifications.accounts import EmailAccount, EmailAccountPool
from techfest.notifications.mailer import is_account_error
from techfest.notifications.templates import render_registration_email


def _pool(count=2) -> EmailAccountPool:
    return EmailAccountPool([EmailAccount(f"sender{i}@example.com", "pw", 500) for i in range(1, count + 1)])

def _registration(**overrides):
    row = {
        "registration_id": "TF2025-ABCD1234",
        "name": "Asha <b>",
        "email": "asha@example.com",
        "user_email": "asha@example.com",
        "amount": 198,
        "payment_status": "verified",
        "payment_details": {"payment_id": "ch_42", "amount": 198},
        "selected_pass": None,
        "selected_events": [1, 2],
        "selected_workshops": [3],
        "selected_non_tech_events": [7],
    }
    row.update(overrides)
    return row


def test_render_registration_email_has_both_parts():
    subject, html, text = render_registration_email(_registration())
    assert subject == "Tech Fiesta 2025 - Registration Confirmed (TF2025-ABCD1234)"
    for part in (html, text):
        assert "TF2025-ABCD1234" in part
        assert "Reverse Code" in part
        assert "Cyber Security Essentials" in part
        assert "BGMI" in part
        assert "ch_42" in part
    assert "Asha &lt;b&gt;" in html
    assert "Asha <b>" in text

def test_confirmation_is_sent_to_registrant(outbox):
    result = service.send_registration_confirmation(_registration(), _pool())
    assert result["success"]
    assert result["currentUsage"] == 1
    assert outbox[0]["to"] == "asha@example.com"
    assert outbox[0]["from"] == "sender1@example.com"

def test_account_error_retries_once_on_next_account(monkeypatch):
    calls = []

    def flaky(account, sender_name, to, subject, html, text=None):
        calls.append(account.email)
        if len(calls) == 1:
            raise smtplib.SMTPAuthenticationError(535, b"Username and Password not accepted")
        return "<ok@example.com>"

    monkeypatch.setattr("techfest.notifications.mailer.send_message", flaky)
    result = service.send_notification("x@example.com", "s", "<p>h</p>", "h", _pool())
    assert result["success"]
    assert calls == ["sender1@example.com", "sender2@example.com"]

def test_second_failure_is_reported_not_raised(monkeypatch):
    calls = []

    def always_fail(account, sender_name, to, subject, html, text=None):
        calls.append(account.email)
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    monkeypatch.setattr("techfest.notifications.mailer.send_message", always_fail)
    result = service.send_registration_confirmation(_registration(), _pool(3))
    assert not result["success"]
    assert len(calls) == 2

def test_non_account_error_is_not_retried(monkeypatch):
    calls = []

    def broken(account, sender_name, to, subject, html, text=None):
        calls.append(account.email)
        raise smtplib.SMTPRecipientsRefused({"x@example.com": (550, b"no such user")})

    monkeypatch.setattr("techfest.notifications.mailer.send_message", broken)
    result = service.send_notification("x@example.com", "s", "h", None, _pool())
    assert not result["success"]
    assert calls == ["sender1@example.com"]

def test_single_account_is_not_retried(monkeypatch):
    calls = []

    def always_fail(account, sender_name, to, subject, html, text=None):
        calls.append(account.email)
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    monkeypatch.setattr("techfest.notifications.mailer.send_message", always_fail)
    assert not service.send_notification("x@example.com", "s", "h", None, _pool(1))["success"]
    assert len(calls) == 1

def test_unconfigured_pool_reports_failure(outbox):
    result = service.send_registration_confirmation(_registration(), EmailAccountPool([]))
    assert result == {"success": False, "error": "Email service not configured"}
    assert outbox == []

def test_is_account_error():
    assert is_account_error(smtplib.SMTPAuthenticationError(535, b"x"))
    assert is_account_error(smtplib.SMTPResponseException(454, b"temporary"))
    assert is_account_error(smtplib.SMTPResponseException(550, b"Daily user sending quota exceeded"))
    assert not is_account_error(smtplib.SMTPResponseException(550, b"mailbox unavailable"))
    assert not is_account_error(ConnectionError("reset"))

def test_schedule_confirmation_queues_background_task(outbox):
    class State:
        email_pool = _pool()

    tasks = BackgroundTasks()
    service.schedule_confirmation(tasks, State(), _registration())
    assert len(tasks.tasks) == 1
    assert outbox == []

    service.schedule_confirmation(tasks, object(), _registration())
    assert len(tasks.tasks) == 1
