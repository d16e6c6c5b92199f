"""
Messenger Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Only defines the contract between Facebook Messenger and the relay.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# MESSENGER WEBHOOK PAYLOAD SCHEMAS (INPUT)
# ============================================================================

class Participant(BaseModel):
    """Sender or recipient of a messaging event."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: Optional[str] = None


class IncomingMessage(BaseModel):
    """The `message` object of a messaging event. Only text is validated."""

    model_config = ConfigDict(extra="allow")

    mid: Optional[Any] = None
    text: Optional[str] = None


class MessagingEvent(BaseModel):
    """
    A single entry in entry[].messaging[].

    ref: https://developers.facebook.com/docs/messenger-platform/webhooks

    Only sender.id and message.text are validated; the rest is carried as-is.
    """

    model_config = ConfigDict(extra="allow")

    sender: Optional[Participant] = None
    recipient: Optional[Any] = None
    timestamp: Optional[Any] = None
    message: Optional[IncomingMessage] = None


class MessengerWebhookPayload(BaseModel):
    """
    Full Messenger webhook payload.

    Entries and events are kept raw here; normalize.py validates them
    one by one so a single malformed event cannot reject the batch.
    """

    model_config = ConfigDict(extra="allow")

    object: Optional[Any] = Field(None, description="Always 'page' for Messenger")
    entry: list[Any] = Field(default_factory=list, description="Webhook entries")


# ============================================================================
# NORMALIZED EVENT (THE CONTRACT)
# ============================================================================

class TextEvent(BaseModel):
    """
    One relayable event: a sender id and the text they sent.

    Text is kept exactly as received; the relay decides how to normalize it.
    """

    model_config = ConfigDict(frozen=True)

    sender_id: str = Field(..., min_length=1, description="Platform-assigned sender id")
    text: str = Field(..., min_length=1, description="Message text, untrimmed")


# ============================================================================
# SEND API PAYLOAD (OUTPUT)
# ============================================================================

class Recipient(BaseModel):
    id: str


class OutgoingText(BaseModel):
    text: str


class OutboundMessage(BaseModel):
    """Body POSTed to the Send API: {recipient: {id}, message: {text}}."""

    recipient: Recipient
    message: OutgoingText

    @classmethod
    def text_to(cls, recipient_id: str, text: str) -> "OutboundMessage":
        return cls(recipient=Recipient(id=recipient_id), message=OutgoingText(text=text))


@dataclass(frozen=True)
class SendResult:
    """
    Delivery status of one Send API call.

    Returned instead of raised; callers are free to ignore it.
    """

    ok: bool
    recipient_id: str
    status_code: Optional[int] = None
    message_id: Optional[str] = None
    error: Optional[str] = None
