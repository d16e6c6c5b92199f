"""
Messenger Webhook Integration Tests

End-to-end flow through the FastAPI app: webhook → normalize → relay → sender.
The Send API is replaced by RecordingSender.
"""

import pytest
from fastapi.testclient import TestClient

from config import Config
from conftest import RecordingSender, page_payload, text_event
from inference import StubModelBackend
from main import HEALTH_TEXT, create_app
from relay import NOT_CONFIGURED_NOTICE, START_ACK, MessageRelay


def make_client(sender, backend=None, verify_token="verify-token"):
    config = Config(page_access_token="PAGE_TOKEN", verify_token=verify_token)
    app = create_app(config, relay=MessageRelay(sender=sender, backend=backend))
    return TestClient(app, raise_server_exceptions=False)


class TestVerificationEndpoint:
    """GET /webhook handshake."""

    def test_subscribe_with_matching_token(self, recording_sender):
        client = make_client(recording_sender, verify_token="secret")

        response = client.get(
            "/webhook",
            params={"hub.mode": "subscribe", "hub.verify_token": "secret", "hub.challenge": "1158201444"},
        )

        assert response.status_code == 200
        assert response.text == "1158201444"

    def test_default_verify_token(self, recording_sender):
        client = make_client(recording_sender)

        response = client.get(
            "/webhook",
            params={"hub.mode": "subscribe", "hub.verify_token": "verify-token", "hub.challenge": "abc"},
        )

        assert response.status_code == 200
        assert response.text == "abc"

    @pytest.mark.parametrize("params", [
        {"hub.mode": "subscribe", "hub.verify_token": "wrong", "hub.challenge": "abc"},
        {"hub.mode": "unsubscribe", "hub.verify_token": "secret", "hub.challenge": "abc"},
        {"hub.challenge": "abc"},
        {},
    ])
    def test_mismatch_is_forbidden(self, recording_sender, params):
        client = make_client(recording_sender, verify_token="secret")

        response = client.get("/webhook", params=params)

        assert response.status_code == 403
        assert "abc" not in response.text


class TestMessageEndpoint:
    """POST /webhook event relay."""

    def test_start_chat_without_provider(self, recording_sender):
        """Trigger phrase with no provider key: acknowledgement then notice."""
        client = make_client(recording_sender)

        response = client.post("/webhook", json=page_payload(text_event("U1", "start chat")))

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        assert recording_sender.sent == [
            ("U1", START_ACK),
            ("U1", NOT_CONFIGURED_NOTICE),
        ]

    def test_start_chat_with_provider(self, recording_sender):
        client = make_client(recording_sender, backend=StubModelBackend(output="Hello! How can I help?"))

        response = client.post("/webhook", json=page_payload(text_event("U1", "  START Chat ")))

        assert response.status_code == 200
        assert recording_sender.sent == [
            ("U1", START_ACK),
            ("U1", "Hello! How can I help?"),
        ]

    def test_echo(self, recording_sender):
        client = make_client(recording_sender)

        response = client.post("/webhook", json=page_payload(text_event("U1", "Hello")))

        assert response.status_code == 200
        assert recording_sender.sent == [("U1", "I got: Hello")]

    def test_event_without_sender_is_skipped(self, recording_sender):
        client = make_client(recording_sender)

        response = client.post("/webhook", json=page_payload({"message": {"text": "Hello"}}))

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        assert recording_sender.sent == []

    def test_multiple_events_processed_in_order(self, recording_sender):
        client = make_client(recording_sender)
        body = page_payload(
            text_event("U1", "one"),
            {"message": {"text": "skipped"}},
            text_event("U2", "two"),
        )

        response = client.post("/webhook", json=body)

        assert response.status_code == 200
        assert recording_sender.sent == [("U1", "I got: one"), ("U2", "I got: two")]

    def test_non_page_object_is_404(self, recording_sender):
        client = make_client(recording_sender)

        response = client.post(
            "/webhook",
            json=page_payload(text_event("U1", "Hello"), object_type="whatsapp_business_account"),
        )

        assert response.status_code == 404
        assert recording_sender.sent == []

    def test_malformed_json_is_500(self, recording_sender):
        client = make_client(recording_sender)

        response = client.post(
            "/webhook",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert recording_sender.sent == []

    def test_non_object_json_is_500(self, recording_sender):
        client = make_client(recording_sender)

        response = client.post("/webhook", json=["page"])

        assert response.status_code == 500

    def test_failed_sends_still_acknowledge(self):
        sender = RecordingSender(ok=False)
        client = make_client(sender)

        response = client.post("/webhook", json=page_payload(text_event("U1", "Hello")))

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        assert sender.sent == [("U1", "I got: Hello")]


class TestHealthEndpoints:
    """Root and probe endpoints."""

    def test_root_health_text(self, recording_sender):
        response = make_client(recording_sender).get("/")

        assert response.status_code == 200
        assert response.text == HEALTH_TEXT

    def test_live(self, recording_sender):
        assert make_client(recording_sender).get("/health/live").json() == {"status": "alive"}

    def test_ready(self, recording_sender):
        assert make_client(recording_sender).get("/health/ready").json() == {"status": "ready"}

    def test_not_ready_without_page_token(self, recording_sender):
        app = create_app(Config(page_access_token=""), relay=MessageRelay(sender=recording_sender))
        response = TestClient(app).get("/health/ready")

        assert response.json() == {"status": "not_ready", "missing": ["FACEBOOK_PAGE_ACCESS_TOKEN"]}
