import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.flow.states import SubscriptionRecord
from app.main import app
from conftest import Harness

ADMIN = {"X-Admin-Token": "s3cret"}
USER = "+15550001111"


class RecordingDispatcher:
    def __init__(self):
        self.messages = []

    async def dispatch_message(self, message):
        self.messages.append(message)
        return {"status": "ignored", "command": None}


@pytest.fixture
def harness(monkeypatch):
    harness = Harness()
    monkeypatch.setattr(settings, "ADMIN_TOKEN", "s3cret")
    monkeypatch.setattr(settings, "TWILIO_WHATSAPP_NUMBER", "whatsapp:+14155238886")
    monkeypatch.setattr(app.state, "machine", harness.machine, raising=False)
    return harness


@pytest.fixture
def dispatcher(monkeypatch):
    dispatcher = RecordingDispatcher()
    monkeypatch.setattr(app.state, "dispatcher", dispatcher, raising=False)
    return dispatcher


@pytest.fixture
def client():
    return TestClient(app)


# ============================================================
# WEBHOOK
# ============================================================

def test_webhook_normalizes_twilio_message(client, harness, dispatcher):
    response = client.post("/api/v1/webhook", data={
        "From": f"whatsapp:{USER}",
        "Body": "!inspire",
        "ProfileName": "Jane",
        "MessageSid": "SM42",
    })

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert "<Response></Response>" in response.text

    message = dispatcher.messages[0]
    assert message.user_id == USER
    assert message.channel == f"whatsapp:{USER}"
    assert message.text == "!inspire"
    assert message.name == "Jane"
    assert message.is_automated is False


def test_webhook_flags_own_messages_as_automated(client, harness, dispatcher):
    client.post("/api/v1/webhook", data={"From": "whatsapp:+14155238886", "Body": "!inspire"})

    assert dispatcher.messages[0].is_automated is True


def test_webhook_swallows_dispatch_errors_for_twilio(client, harness, monkeypatch):
    class BrokenDispatcher:
        async def dispatch_message(self, message):
            raise RuntimeError("boom")

    monkeypatch.setattr(app.state, "dispatcher", BrokenDispatcher(), raising=False)

    response = client.post("/api/v1/webhook", data={"From": f"whatsapp:{USER}", "Body": "!inspire"})

    assert response.status_code == 200


# ============================================================
# SUBSCRIPTION ADMIN
# ============================================================

def test_get_subscription_requires_token(client, harness):
    response = client.get(f"/api/v1/subscriptions/{USER}")

    assert response.status_code == 401
    assert response.json()["code"] == "AUTHENTICATION_FAILED"


def test_get_subscription_without_configured_token(client, harness, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_TOKEN", None)

    response = client.get(f"/api/v1/subscriptions/{USER}", headers=ADMIN)

    assert response.status_code == 500
    assert response.json()["code"] == "CONFIGURATION_ERROR"


def test_get_subscription_unset(client, harness):
    response = client.get(f"/api/v1/subscriptions/{USER}", headers=ADMIN)

    assert response.status_code == 200
    assert response.json() == {"user_id": USER, "state": "UNSET", "phone_number": None}


def test_confirm_pending_subscription(client, harness):
    harness.store.records[USER] = SubscriptionRecord.pending(USER, "+15551234567")

    response = client.post(f"/api/v1/subscriptions/{USER}/confirm", headers=ADMIN)

    assert response.status_code == 200
    assert response.json() == {"user_id": USER, "state": "CONFIRMED", "phone_number": "+15551234567"}
    assert harness.store.records[USER].is_confirmed


@pytest.mark.parametrize("record", [
    None,
    SubscriptionRecord.confirmed(USER, "+15551234567"),
])
def test_confirm_rejects_non_pending(client, harness, record):
    if record is not None:
        harness.store.records[USER] = record

    response = client.post(f"/api/v1/subscriptions/{USER}/confirm", headers=ADMIN)

    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_TRANSITION"


def test_confirmed_user_then_receives_sms(harness, run):
    harness.store.records[USER] = SubscriptionRecord.pending(USER, "+15551234567")

    async def scenario():
        await harness.machine.confirm(USER)
        return await harness.machine.handle_inspire(USER, f"whatsapp:{USER}")

    result = run(scenario())

    assert result["sms_message_id"] is not None
    assert ("notifier.send", "+15551234567", harness.quotes.quote) in harness.log.calls


# ============================================================
# HEALTH
# ============================================================

def test_live(client):
    assert client.get("/live").json() == {"status": "alive"}


def test_health_without_database_is_degraded(client):
    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["checks"]["database"] == "unhealthy"
