from .base import ModelBackend
from .types import ModelRequest, ModelResponse


class StubModelBackend(ModelBackend):
    """
    Deterministic fake model for local runs and tests.

    Selected with LLM_BACKEND=stub. Never calls the network.
    """

    def __init__(self, output: str = "Hi there! How can I help you today?"):
        self.output = output

    async def generate(self, request: ModelRequest) -> ModelResponse:
        return ModelResponse(
            status="success",
            output=self.output,
            metadata={"backend": "stub", "sender_id": request.sender_id},
        )
