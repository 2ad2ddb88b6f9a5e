"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sazio.api.procedures import router as procedures_router
from sazio.app_logging import configure_logging
from sazio.config import parse_cors_origins
from sazio.containers import AppContainer
from sazio.errors import (
    ConflictError,
    EngineError,
    InvalidInputError,
    NotFoundError,
    UnauthenticatedError,
)

_STATUS_BY_ERROR: dict[type[EngineError], int] = {
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Sazio")
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(procedures_router)

    @app.exception_handler(EngineError)
    async def engine_error_handler(request: Request, exc: EngineError) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Unhandled engine error on %s: %s", request.url.path, exc)
        return _error_response(status_code, exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            InvalidInputError.code,
            "Invalid request input",
            issues=jsonable_encoder(exc.errors()),
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _status_for(exc: EngineError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(
    status_code: int, code: str, message: str, issues: list | None = None
) -> JSONResponse:
    error: dict[str, object] = {"code": code, "message": message}
    if issues is not None:
        error["issues"] = issues
    return JSONResponse(status_code=status_code, content={"error": error})
