"""Messenger Transport Layer - Module Exports"""

from .normalize import (
    NormalizationError,
    extract_text_events,
    is_page_event,
    parse_payload,
)
from .schemas import (
    IncomingMessage,
    MessagingEvent,
    MessengerWebhookPayload,
    OutboundMessage,
    Participant,
    SendResult,
    TextEvent,
)
from .security import verify_webhook_challenge
from .sender import MessengerSender, MessengerSenderError

__all__ = [
    # Schemas
    "MessengerWebhookPayload",
    "MessagingEvent",
    "Participant",
    "IncomingMessage",
    "TextEvent",
    "OutboundMessage",
    "SendResult",
    # Normalization
    "parse_payload",
    "is_page_event",
    "extract_text_events",
    "NormalizationError",
    # Security
    "verify_webhook_challenge",
    # Sender
    "MessengerSender",
    "MessengerSenderError",
]
