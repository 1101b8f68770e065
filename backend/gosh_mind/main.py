"""
GOSH-MIND - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings, settings
from .api import chat_router
from .core import InvalidRequestError, RelayError
from .core.chat_relay import ChatRelay
from .core.errors import format_validation_errors
from .core.logging_config import setup_logging
from .llm import create_provider_from_settings
from .middleware import RequestLoggingMiddleware
from .storage import InMemorySessionStore

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)

CHAT_FAILURE_MESSAGE = "Failed to process chat request"


def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request data", "errors": format_validation_errors(exc.errors())},
        )

    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(request: Request, exc: InvalidRequestError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        # Full cause goes to the log; clients only see the opaque message.
        logger.error(
            f"Chat request failed: {exc}",
            exc_info=exc,
            extra={"extra_fields": {
                "path": request.url.path,
                "error_type": type(exc).__name__,
                "status_code": getattr(exc, "status_code", None),
            }}
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": CHAT_FAILURE_MESSAGE},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "An unexpected error occurred while processing your request"},
        )


def create_app(chat_relay: Optional[ChatRelay] = None, config: Settings = settings) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        chat_relay: Relay to serve; built from config when omitted
        config: Settings object

    Returns:
        FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        setup_logging(config)
        relay: ChatRelay = app.state.chat_relay
        logger.info(f"Starting {config.app_name} v{config.app_version}")
        logger.info(f"Upstream strategy: {config.upstream_strategy}")
        if relay.provider is None:
            logger.warning("OPENAI_API_KEY is not set; chat requests will fail until it is configured")
        logger.info(f"Log level: {config.log_level.upper()}")
        yield
        logger.info(f"Shutting down {config.app_name}")

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        description="Conversation relay between the voice/text chat client and the upstream language model",
        lifespan=lifespan
    )

    if chat_relay is None:
        chat_relay = ChatRelay(
            InMemorySessionStore(),
            create_provider_from_settings(config),
            max_message_length=config.max_message_length,
        )
    app.state.chat_relay = chat_relay

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging wraps CORS
    if config.log_api_requests:
        app.add_middleware(RequestLoggingMiddleware)

    _register_exception_handlers(app)
    app.include_router(chat_router)

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        relay: ChatRelay = request.app.state.chat_relay
        return {
            "status": "healthy",
            "upstream": config.upstream_strategy,
            "upstream_configured": relay.provider is not None,
            "sessions": await relay.store.count(),
            "version": config.app_version,
        }

    static_dir = Path(config.static_dir) if config.static_dir else None
    if static_dir is not None and static_dir.is_dir():
        # Compiled client bundle; mounted last so API routes take precedence.
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="client")
    else:
        @app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "app": config.app_name,
                "version": config.app_version,
                "status": "running",
            }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "gosh_mind.main:app",
        host="0.0.0.0",
        port=5000,
        reload=settings.debug
    )
