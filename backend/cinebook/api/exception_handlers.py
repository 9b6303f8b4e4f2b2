"""
Exception handlers rendering every error in the {status, message} envelope.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cinebook.api.responses import error_response
from cinebook.core.exceptions import CinebookError
from cinebook.core.logging import get_logger

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Endpoint Not Found"


async def cinebook_error_handler(request: Request, exc: CinebookError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_error", status_code=exc.status_code, message=exc.message)
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and known paths with the wrong method are both "not found"
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    return error_response(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("request_validation_failed", errors=exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body.")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", error=str(exc))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error.")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CinebookError, cinebook_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
