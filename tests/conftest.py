"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from transport.messenger.schemas import SendResult  # noqa: E402


class RecordingSender:
    """Stands in for MessengerSender; records every send instead of calling the Send API."""

    def __init__(self, ok: bool = True):
        self.ok = ok
        self.sent: list[tuple[str, str]] = []

    async def send_text(self, recipient_id: str, text: str) -> SendResult:
        self.sent.append((recipient_id, text))
        return SendResult(ok=self.ok, recipient_id=recipient_id, status_code=200 if self.ok else 500)


def page_payload(*events, object_type: str = "page") -> dict:
    """Build a Messenger webhook body with one entry holding the given events."""
    return {
        "object": object_type,
        "entry": [{
            "id": "PAGE_ID",
            "time": 1707500000000,
            "messaging": list(events),
        }],
    }


def text_event(sender_id, text) -> dict:
    return {
        "sender": {"id": sender_id},
        "recipient": {"id": "PAGE_ID"},
        "timestamp": 1707500000000,
        "message": {"mid": "m_1", "text": text},
    }


@pytest.fixture
def recording_sender():
    return RecordingSender()
