import os
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from core.settings import get_settings
from core.exceptions import MirrorError
from core.logging_config import setup_logging
from services.api.routes import router as v1_router
from services.api.exception_handlers import mirror_exception_handler
from services.api.middleware import SecurityHeadersMiddleware, WebhookKeyMiddleware


def create_app() -> FastAPI:
    # Setup structured logging
    json_logging = os.getenv("JSON_LOGGING", "false").lower() in {"true", "1", "yes"}
    log_level = os.getenv("LOG_LEVEL", "INFO")
    log_file = os.getenv("LOG_FILE")
    setup_logging(
        level=log_level,
        json_format=json_logging,
        log_file=Path(log_file) if log_file else None,
    )

    app = FastAPI(
        title="Lakemirror API",
        version="0.1.0",
        description="Event Grid webhook mirroring Data Lake mutations into a backup account",
    )

    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(WebhookKeyMiddleware, secret=os.getenv("LAKEMIRROR_WEBHOOK_SECRET") or None)

    @app.on_event("startup")
    async def _load_settings() -> None:
        settings = get_settings()
        logger.info(
            "API initialised with backend={backend} file_system={file_system} mode={mode}",
            backend=settings.storage.backend,
            file_system=settings.storage.file_system,
            mode=settings.dispatch.mode,
        )

    @app.get("/healthz", tags=["meta"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    # Register exception handlers
    app.add_exception_handler(MirrorError, mirror_exception_handler)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception("Unhandled exception", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": type(exc).__name__,
                "message": str(exc),
            },
        )

    app.include_router(v1_router)

    return app


app = create_app()


__all__ = ["app", "create_app"]
