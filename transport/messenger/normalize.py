"""
Messenger Input Normalization

PURE CONVERSION - NO LOGIC, NO MODEL CALLS

Turns a raw webhook body into the list of TextEvents worth replying to.
- Events without a sender id are skipped
- Events without text (attachments, echoes, postbacks) are skipped
- Malformed entries/events are skipped, the rest still go through
"""

import logging
from typing import Any

from pydantic import ValidationError

from .schemas import MessagingEvent, MessengerWebhookPayload, TextEvent

logger = logging.getLogger(__name__)

PAGE_OBJECT = "page"


class NormalizationError(Exception):
    """Input normalization failed."""
    pass


def parse_payload(body: Any) -> MessengerWebhookPayload:
    """
    Validate the top-level shape of a webhook body.

    Raises:
        NormalizationError: body is not a JSON object
    """
    if not isinstance(body, dict):
        raise NormalizationError(f"Webhook body must be an object, got {type(body).__name__}")

    entry = body.get("entry")
    if not isinstance(entry, list):
        # Missing or wrong-typed entry means nothing to process
        body = {**body, "entry": []}

    try:
        return MessengerWebhookPayload.model_validate(body)
    except ValidationError as e:
        raise NormalizationError(f"Invalid payload structure: {e}")


def is_page_event(payload: MessengerWebhookPayload) -> bool:
    """True when the payload is addressed to a Facebook Page subscription."""
    return payload.object == PAGE_OBJECT


def _to_text_event(raw_event: Any) -> TextEvent | None:
    """Convert one raw messaging event, or return None if it must be skipped."""
    try:
        event = MessagingEvent.model_validate(raw_event)
    except ValidationError as e:
        logger.debug(f"Skipping malformed messaging event: {e.error_count()} errors")
        return None

    sender_id = event.sender.id if event.sender else None
    if not sender_id:
        logger.debug("Skipping messaging event without sender id")
        return None

    text = event.message.text if event.message else None
    if not text:
        logger.debug("Skipping non-text messaging event", extra={"sender_id": sender_id})
        return None

    return TextEvent(sender_id=sender_id, text=text)


def extract_text_events(payload: MessengerWebhookPayload) -> list[TextEvent]:
    """
    Flatten entry[].messaging[] into TextEvents, in arrival order.
    """
    events: list[TextEvent] = []

    for entry in payload.entry:
        if not isinstance(entry, dict):
            continue

        messaging = entry.get("messaging")
        if not isinstance(messaging, list):
            continue

        for raw_event in messaging:
            text_event = _to_text_event(raw_event)
            if text_event is not None:
                events.append(text_event)

    return events
