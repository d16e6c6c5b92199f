"""
Messenger Webhook Receiver

FastAPI router for the Messenger platform webhook.
- GET  /webhook: subscription verification handshake
- POST /webhook: messaging events, relayed through MessageRelay
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse

from config import Config
from relay import MessageRelay

from .normalize import NormalizationError, extract_text_events, is_page_event, parse_payload
from .security import verify_webhook_challenge

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["Messenger Transport"])

EVENT_RECEIVED = "EVENT_RECEIVED"


# ============================================================================
# DEPENDENCIES (set on app.state by create_app)
# ============================================================================

def get_config(request: Request) -> Config:
    return request.app.state.config


def get_relay(request: Request) -> MessageRelay:
    return request.app.state.relay


# ============================================================================
# WEBHOOK CHALLENGE (Setup only)
# ============================================================================

@router.get("", response_class=PlainTextResponse)
async def messenger_webhook_challenge(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    config: Config = Depends(get_config),
) -> PlainTextResponse:
    """
    Verify webhook subscription challenge from Meta.

    Returns:
        The challenge string (plain text, 200)

    Raises:
        HTTPException(403): Wrong mode, wrong token or missing parameters
    """
    challenge = verify_webhook_challenge(
        hub_mode, hub_challenge, hub_verify_token, config.verify_token
    )
    return PlainTextResponse(challenge, status_code=status.HTTP_200_OK)


# ============================================================================
# WEBHOOK RECEIVER (Message processing)
# ============================================================================

@router.post("", response_class=PlainTextResponse)
async def messenger_webhook_receiver(
    request: Request,
    relay: MessageRelay = Depends(get_relay),
) -> PlainTextResponse:
    """
    Receive Messenger events via webhook.

    Flow:
    1. Parse JSON body (500 if malformed)
    2. Reject anything that is not a page subscription (404)
    3. Normalize to TextEvents, skipping unusable events
    4. Relay each event sequentially
    5. Acknowledge with EVENT_RECEIVED regardless of send outcomes

    Raises:
        HTTPException(404): object is not "page"
        HTTPException(500): Malformed body or unexpected failure
    """
    try:
        body = await request.body()
        payload = parse_payload(json.loads(body))

        if not is_page_event(payload):
            logger.info(f"Ignoring webhook for object {payload.object!r}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Not Found"
            )

        events = extract_text_events(payload)
        logger.info(
            f"Webhook received {len(events)} text event(s)",
            extra={"entries": len(payload.entry)},
        )

        await relay.handle_events(events)

    except HTTPException:
        raise
    except (json.JSONDecodeError, UnicodeDecodeError, NormalizationError) as e:
        logger.error(f"Webhook error: malformed body: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error"
        )
    except Exception as e:
        logger.error(f"Webhook error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error"
        )

    return PlainTextResponse(EVENT_RECEIVED, status_code=status.HTTP_200_OK)
