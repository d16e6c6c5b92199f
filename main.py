"""
FastAPI Application Entry Point

Integrates:
  - Messenger webhook (verification + event relay)
  - Health checks
  - Middleware for request logging & error handling

Run: uvicorn main:app --host 0.0.0.0 --port 3000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from config import Config
from relay import MessageRelay
from transport.messenger.sender import MessengerSender
from transport.messenger.webhook import router as messenger_router

logger = logging.getLogger(__name__)

HEALTH_TEXT = "Facebook Gemini Bot is running."


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_relay(config: Config) -> MessageRelay:
    """Wire the Send API client and the optional generative backend."""
    sender = MessengerSender(
        page_access_token=config.page_access_token,
        api_version=config.graph_api_version,
        timeout_s=config.http_timeout_s,
    )
    return MessageRelay(sender=sender, backend=config.create_llm_backend())


def create_app(config: Optional[Config] = None, relay: Optional[MessageRelay] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Explicit configuration; read from the environment when omitted
        relay: Pre-built relay (tests pass one with a fake sender)
    """
    config = config or Config.from_env()
    relay = relay or build_relay(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan: startup and shutdown handlers.
        """
        # Startup
        logger.info("=" * 60)
        logger.info("Messenger relay starting up...")
        logger.info(f"Port: {config.port}")
        logger.info(f"Environment: {config.environment}")
        logger.info(f"Graph API: {config.graph_api_version}")
        logger.info(
            f"Generative replies: {'enabled (' + config.llm_backend + ')' if relay.generation_enabled else 'disabled'}"
        )
        for name in config.validate():
            logger.warning(f"Missing required environment variable: {name}")
        logger.info("=" * 60)

        yield

        # Shutdown
        logger.info("Messenger relay shutting down...")

    app = FastAPI(
        title="Messenger Relay",
        description="Facebook Messenger webhook relay with optional Gemini replies",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.relay = relay

    # Middleware for logging
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        logger.debug(f"{request.method} {request.url.path}")
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Request error: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error"},
            )

    # Include routers
    app.include_router(messenger_router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Health text."""
        return HEALTH_TEXT

    @app.get("/health/live")
    async def health_live():
        """Live health check (liveness probe)."""
        return {"status": "alive"}

    @app.get("/health/ready")
    async def health_ready():
        """Readiness health check: the Send API token must be set."""
        missing = config.validate()
        if missing:
            return {"status": "not_ready", "missing": missing}
        return {"status": "ready"}

    return app


_startup_config = Config.from_env()
setup_logging(_startup_config.log_level)
app = create_app(_startup_config)


if __name__ == "__main__":
    import uvicorn

    config: Config = app.state.config
    if config.environment == "development":
        # reload needs an import string
        uvicorn.run("main:app", host="0.0.0.0", port=config.port, reload=True)
    else:
        uvicorn.run(app, host="0.0.0.0", port=config.port)
