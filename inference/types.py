from dataclasses import dataclass
from typing import Optional, Dict, Any, Literal

ModelStatus = Literal["success", "recoverable_error", "fatal_error"]


@dataclass
class ModelRequest:
    prompt: str
    timeout_s: Optional[float] = None  # None uses the backend default
    sender_id: Optional[str] = None    # logging only, never sent to the provider


@dataclass
class ModelResponse:
    status: ModelStatus
    output: Optional[str] = None
    error_type: Optional[str] = None   # timeout | blocked | provider_error | invalid_output | backend_unavailable
    metadata: Optional[Dict[str, Any]] = None
