"""
Model boundary layer for generative replies.

This package provides a clean abstraction for model invocation,
allowing the relay to remain agnostic of the underlying provider.

Supported backends:
- GeminiModelBackend: Google Gemini generateContent over REST
- StubModelBackend: Deterministic fake model (local runs and tests)

Example usage:
    from inference import StubModelBackend, generate_reply

    backend = StubModelBackend()
    text = await generate_reply(backend, "Say hello")
"""

from .types import ModelRequest, ModelResponse, ModelStatus
from .base import ModelBackend
from .stub import StubModelBackend
from .gemini import (
    FALLBACK_REPLY,
    GeminiModelBackend,
    GenerationResult,
    generate_reply,
    parse_generation,
)

__all__ = [
    "ModelRequest",
    "ModelResponse",
    "ModelStatus",
    "ModelBackend",
    "StubModelBackend",
    "GeminiModelBackend",
    "GenerationResult",
    "parse_generation",
    "generate_reply",
    "FALLBACK_REPLY",
]
