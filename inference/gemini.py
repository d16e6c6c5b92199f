import logging
from dataclasses import dataclass
from typing import Any, Literal, Optional

import httpx

from .base import ModelBackend
from .types import ModelRequest, ModelResponse

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Sent to the user whenever the provider gives us nothing usable
FALLBACK_REPLY = "Sorry, I couldn't generate a reply right now."

GenerationKind = Literal["text", "blocked", "error", "unrecognized"]


@dataclass(frozen=True)
class GenerationResult:
    """One parsed generateContent response. Only kind == "text" carries a reply."""

    kind: GenerationKind
    text: Optional[str] = None
    detail: Optional[str] = None


def _first_candidate_text(candidates: Any) -> Optional[str]:
    """Walk candidates[*].content.parts[*].text and return the first non-empty text."""
    if not isinstance(candidates, list):
        return None
    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content")
        if not isinstance(content, dict):
            continue
        parts = content.get("parts")
        if not isinstance(parts, list):
            continue
        for part in parts:
            if isinstance(part, dict):
                text = part.get("text")
                if isinstance(text, str) and text.strip():
                    return text
    return None


def parse_generation(data: Any) -> GenerationResult:
    """
    Classify a provider response body.

    Shapes, checked in order:
      1. {"error": {...}}                                  -> error
      2. {"candidates": [{"content": {"parts": [...]}}]}   -> text
      3. {"text": "..."}  (SDK-style flattened response)   -> text
      4. {"promptFeedback": {"blockReason": "..."}}        -> blocked
      5. anything else                                     -> unrecognized
    """
    if not isinstance(data, dict):
        return GenerationResult(kind="unrecognized", detail=type(data).__name__)

    error = data.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        return GenerationResult(kind="error", detail=message)

    text = _first_candidate_text(data.get("candidates"))
    if text is not None:
        return GenerationResult(kind="text", text=text)

    flat_text = data.get("text")
    if isinstance(flat_text, str) and flat_text.strip():
        return GenerationResult(kind="text", text=flat_text)

    feedback = data.get("promptFeedback")
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        return GenerationResult(kind="blocked", detail=str(feedback["blockReason"]))

    return GenerationResult(kind="unrecognized", detail=",".join(sorted(data.keys())))


class GeminiModelBackend(ModelBackend):
    """
    Google Gemini backend over the generateContent REST endpoint.

    One POST per request, no retries. Every failure is folded into a
    non-success ModelResponse so callers never see an exception.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash",
        base_url: str = GEMINI_BASE_URL,
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Gemini backend.

        Args:
            api_key:    Gemini API key (sent as x-goog-api-key)
            model_name: Model to call (e.g. "gemini-2.0-flash")
            base_url:   API root, overridable for proxies
            timeout_s:  Default timeout when the request has none
            transport:  Optional httpx transport (tests inject a MockTransport)
        """
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model_name}:generateContent"

    async def generate(self, request: ModelRequest) -> ModelResponse:
        """
        Generate a reply for a single prompt.

        Flow:
          1. POST {"contents": [{"parts": [{"text": prompt}]}]}
          2. Non-2xx -> fatal_error (provider_error)
          3. Parse body into a GenerationResult
          4. text -> success, anything else -> error with the variant as error_type
        """
        base_metadata = {
            "backend": "gemini",
            "model": self.model_name,
            "sender_id": request.sender_id,
        }

        payload = {"contents": [{"parts": [{"text": request.prompt}]}]}
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(
                    self.endpoint,
                    json=payload,
                    headers=headers,
                    timeout=request.timeout_s or self.timeout_s,
                )

            if resp.status_code < 200 or resp.status_code >= 300:
                logger.error(
                    f"Gemini API error: {resp.status_code} - {resp.text}",
                    extra={"status_code": resp.status_code},
                )
                return ModelResponse(
                    status="fatal_error",
                    error_type="provider_error",
                    metadata={**base_metadata, "status_code": resp.status_code},
                )

            result = parse_generation(resp.json())

        except httpx.TimeoutException:
            logger.warning("Gemini request timed out", extra=base_metadata)
            return ModelResponse(
                status="recoverable_error",
                error_type="timeout",
                metadata=base_metadata,
            )

        except httpx.RequestError as e:
            logger.error(f"Gemini request failed: {e}", extra=base_metadata)
            return ModelResponse(
                status="fatal_error",
                error_type="backend_unavailable",
                metadata={**base_metadata, "error": str(e)},
            )

        except ValueError as e:
            # Body was not JSON
            logger.error(f"Gemini returned invalid JSON: {e}", extra=base_metadata)
            return ModelResponse(
                status="fatal_error",
                error_type="invalid_output",
                metadata={**base_metadata, "error": str(e)},
            )

        if result.kind == "text":
            return ModelResponse(status="success", output=result.text, metadata=base_metadata)

        error_type = {
            "blocked": "blocked",
            "error": "provider_error",
            "unrecognized": "invalid_output",
        }[result.kind]
        logger.warning(
            f"Gemini returned no text ({result.kind}): {result.detail}",
            extra=base_metadata,
        )
        return ModelResponse(
            status="fatal_error",
            error_type=error_type,
            metadata={**base_metadata, "detail": result.detail},
        )


async def generate_reply(backend: ModelBackend, prompt: str, sender_id: Optional[str] = None) -> str:
    """
    Ask the backend for a reply and always return a string.

    Anything other than a successful, non-empty output becomes FALLBACK_REPLY.
    """
    try:
        response = await backend.generate(ModelRequest(prompt=prompt, sender_id=sender_id))
    except Exception as e:
        logger.error(f"Model backend raised: {e}", exc_info=True)
        return FALLBACK_REPLY

    if response.status == "success" and response.output and response.output.strip():
        return response.output

    return FALLBACK_REPLY
