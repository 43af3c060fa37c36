"""
FastAPI application entry point for the card backend.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from card_api.config import get_settings
from card_api.routes import router
from card_shared.errors import (
    AIServiceError,
    CardError,
    Conflict,
    Forbidden,
    InvalidAttributes,
    MalformedDocument,
    NotFound,
    QuotaExceeded,
    StorageError,
    UnsupportedVersion,
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = (
    (NotFound, 404),
    (Forbidden, 403),
    (InvalidAttributes, 422),
    (MalformedDocument, 422),
    (UnsupportedVersion, 422),
    (Conflict, 409),
    (QuotaExceeded, 429),
    (AIServiceError, 502),
    (StorageError, 503),
)


def status_code_for(exc: CardError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def card_error_handler(request: Request, exc: CardError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Greeting Cards Backend (FastAPI)", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CardError, card_error_handler)
    app.include_router(router, prefix=settings.api_prefix)

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()
