"""Relay logic: what to reply to each Messenger text event."""

from .handler import (
    ECHO_PREFIX,
    GREETING_PROMPT,
    NOT_CONFIGURED_NOTICE,
    START_ACK,
    TRIGGER_PHRASE,
    MessageRelay,
    normalize_text,
)

__all__ = [
    "MessageRelay",
    "normalize_text",
    "TRIGGER_PHRASE",
    "START_ACK",
    "GREETING_PROMPT",
    "NOT_CONFIGURED_NOTICE",
    "ECHO_PREFIX",
]
