"""
Message relay.

Decides what to say back for each inbound text event:
- the trigger phrase starts a chat (acknowledgement + generated greeting)
- anything else is echoed back with a prefix

Sends go through MessengerSender, which never raises. Each event is
handled on its own; one failing event does not stop the others.
"""

import logging
from typing import Optional, Protocol

from inference import ModelBackend, generate_reply
from transport.messenger.schemas import SendResult, TextEvent

logger = logging.getLogger(__name__)

TRIGGER_PHRASE = "start chat"
START_ACK = "Starting chat..."
GREETING_PROMPT = "The user said 'start chat'. Greet them and ask how you can help."
NOT_CONFIGURED_NOTICE = "Gemini API not configured. Add GEMINI_API_KEY to enable AI replies."
ECHO_PREFIX = "I got: "


class TextSender(Protocol):
    async def send_text(self, recipient_id: str, text: str) -> SendResult: ...


def normalize_text(text: str) -> str:
    """Trim and lower-case for trigger matching."""
    return text.strip().lower()


class MessageRelay:
    """Per-event reply logic between the webhook and the Send API."""

    def __init__(self, sender: TextSender, backend: Optional[ModelBackend] = None):
        self.sender = sender
        self.backend = backend

    @property
    def generation_enabled(self) -> bool:
        return self.backend is not None

    async def handle_event(self, event: TextEvent) -> list[SendResult]:
        """Reply to one event and return the delivery status of every send."""
        normalized = normalize_text(event.text)
        logger.info(f"Message from {event.sender_id}: {normalized}")

        if normalized != TRIGGER_PHRASE:
            return [await self.sender.send_text(event.sender_id, ECHO_PREFIX + event.text)]

        results = [await self.sender.send_text(event.sender_id, START_ACK)]

        if self.backend is not None:
            reply = await generate_reply(self.backend, GREETING_PROMPT, sender_id=event.sender_id)
        else:
            reply = NOT_CONFIGURED_NOTICE

        results.append(await self.sender.send_text(event.sender_id, reply))
        return results

    async def handle_events(self, events: list[TextEvent]) -> list[SendResult]:
        """Handle events sequentially, in arrival order."""
        results: list[SendResult] = []

        for event in events:
            try:
                results.extend(await self.handle_event(event))
            except Exception as e:
                logger.error(
                    f"Failed to relay event: {e}",
                    exc_info=True,
                    extra={"sender_id": event.sender_id},
                )

        failed = [r for r in results if not r.ok]
        if failed:
            logger.warning(
                f"{len(failed)} of {len(results)} sends failed",
                extra={"failed_recipients": [r.recipient_id for r in failed]},
            )

        return results
