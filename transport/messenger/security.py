"""
Messenger Webhook Verification

SECURITY BOUNDARY - static verify-token compare for the subscription handshake.
No agent imports. No retries. No logic.
"""

import hmac
import logging
from typing import Optional

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

SUBSCRIBE_MODE = "subscribe"


def verify_webhook_challenge(
    hub_mode: Optional[str],
    hub_challenge: Optional[str],
    hub_verify_token: Optional[str],
    expected_token: str,
) -> str:
    """
    Verify webhook subscription challenge from Meta.

    Meta calls GET /webhook with:
    - hub.mode=subscribe
    - hub.challenge=random_string
    - hub.verify_token=configured_token

    We verify the token and echo back the challenge.

    Args:
        hub_mode: Should be "subscribe"
        hub_challenge: Random string to echo back
        hub_verify_token: Token to verify
        expected_token: FACEBOOK_VERIFY_TOKEN from Config

    Returns:
        The challenge string to echo back ("" if Meta sent none)

    Raises:
        HTTPException(403): Wrong mode, wrong token, or missing parameters
    """

    if hub_mode != SUBSCRIBE_MODE or hub_verify_token is None:
        logger.warning(f"Webhook verification rejected: mode={hub_mode!r}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden"
        )

    if not hmac.compare_digest(hub_verify_token.encode("utf-8"), expected_token.encode("utf-8")):
        logger.warning("Webhook verification rejected: verify token mismatch")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden"
        )

    logger.info("WEBHOOK_VERIFIED")
    return hub_challenge or ""
