"""
FastAPI application entry point for the inventory API.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inventory_api.config import get_settings
from inventory_api.dependencies import init_clients
from inventory_api.errors import ApiError
from inventory_api.routes import router

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_clients()
    yield


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure with the ``{error, details?}`` envelope."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error(
                "%s %s -> %s: %s (%s)",
                request.method,
                request.url.path,
                exc.status_code,
                exc.error,
                exc.details,
                exc_info=exc.__cause__,
            )
        else:
            logger.warning(
                "%s %s -> %s: %s",
                request.method,
                request.url.path,
                exc.status_code,
                exc.error,
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ):
        # Drop the offending input so credentials never reach logs or clients.
        errors = [
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        ]
        details = "; ".join(errors)
        logger.warning(
            "Invalid request on %s %s: %s", request.method, request.url.path, details
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Requisição inválida", "details": details},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s", request.method, request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Erro interno do servidor"},
        )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title="Inventory API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    return app


app = create_app()
