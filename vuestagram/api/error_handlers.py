"""Global exception handlers producing the ``{code, msg}`` error envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vuestagram.core.errors import GENERIC_ERROR_CODE, ValidationFailed, VuestagramError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(VuestagramError)
    async def vuestagram_error_handler(request: Request, exc: VuestagramError):
        if isinstance(exc, ValidationFailed):
            logger.debug(f"Validation failed on {request.url.path}: {exc.errors}")
        else:
            logger.info(f"{exc.code} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.debug(f"Request validation failed on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ValidationFailed().to_response(),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        # never leak internals
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"code": GENERIC_ERROR_CODE, "msg": "An unexpected error occurred"},
        )
