"""
Configuration management for the Messenger relay.

Loads environment variables from .env file and provides typed access to configuration.
The resulting Config is built once at startup and passed to the app factory.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal, Optional

from dotenv import load_dotenv

from inference import GeminiModelBackend, ModelBackend, StubModelBackend

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


LLMBackendType = Literal["gemini", "stub"]


@dataclass(frozen=True)
class Config:
    """Configuration for the Messenger relay."""

    # Facebook Messenger
    page_access_token: str = ""
    verify_token: str = "verify-token"
    graph_api_version: str = "v15.0"

    # Generative provider
    llm_backend: LLMBackendType = "gemini"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    # Server
    port: int = 3000
    environment: str = "development"
    log_level: str = "INFO"
    http_timeout_s: float = 30.0

    @classmethod
    def from_env(cls) -> "Config":
        """
        Load configuration from environment variables.

        Unset variables fall back to the dataclass defaults.
        """
        return cls(
            page_access_token=os.getenv("FACEBOOK_PAGE_ACCESS_TOKEN", ""),
            verify_token=os.getenv("FACEBOOK_VERIFY_TOKEN") or "verify-token",
            graph_api_version=os.getenv("GRAPH_API_VERSION", "v15.0"),
            llm_backend=os.getenv("LLM_BACKEND", "gemini").lower(),  # type: ignore
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
            port=int(os.getenv("PORT", "3000")),
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            http_timeout_s=float(os.getenv("HTTP_TIMEOUT_S", "30")),
        )

    def validate(self) -> List[str]:
        """Return the names of required settings that are not set."""
        missing = []
        if not self.page_access_token:
            missing.append("FACEBOOK_PAGE_ACCESS_TOKEN")
        return missing

    def create_llm_backend(self) -> Optional[ModelBackend]:
        """
        Create the generative backend, or None when replies are not configured.

        The gemini backend requires GEMINI_API_KEY; without it the relay
        answers the trigger phrase with a "not configured" notice.
        """
        if self.llm_backend == "stub":
            return StubModelBackend()

        if not self.gemini_api_key:
            return None

        return GeminiModelBackend(
            api_key=self.gemini_api_key,
            model_name=self.gemini_model,
            timeout_s=self.http_timeout_s,
        )


if __name__ == "__main__":
    # Test configuration loading
    config = Config.from_env()
    print("Configuration loaded:")
    print(f"  Page Access Token: {'✓ Set' if config.page_access_token else '✗ Missing'}")
    print(f"  Gemini API Key: {'✓ Set' if config.gemini_api_key else '✗ Missing'}")
    print(f"  LLM Backend: {config.llm_backend}")
    print(f"  Port: {config.port}")
    print(f"  Environment: {config.environment}")
    missing = config.validate()
    print(f"\n  Validation: {'✓ PASSED' if not missing else '✗ FAILED ' + ', '.join(missing)}")
