import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lms_admin.config import get_settings
from lms_admin.schemas.generic import ApiResponse
from lms_admin.utils.exceptions import (
    BadRequestException,
    ResourceNotFoundException,
    AccessDeniedException,
    PermissionDeniedException,
    UnauthorizedException,
    ValidationException,
    OperationFailedException,
)

logger = logging.getLogger(__name__)

HTTP_422_UNPROCESSABLE = 422
_REQUEST_SOURCES = {"body", "query", "path", "header", "cookie"}


def wants_html(request: Request) -> bool:
    """True when a browser navigated here rather than a script calling the API"""
    if request.headers.get("X-Requested-With") == "XMLHttpRequest":
        return False
    return "text/html" in request.headers.get("Accept", "")


def _error_response(status_code: int, message: str, errors=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse.error(
            code=status_code, message=message, errors=errors
        ).model_dump(mode="json", exclude_none=True),
    )


def format_validation_errors(raw_errors) -> dict[str, list[str]]:
    """
    Group pydantic errors by dotted field name (``lectures.0.order``),
    dropping the request source prefix.
    """
    errors: dict[str, list[str]] = {}
    for error in raw_errors:
        loc = [str(x) for x in error["loc"]]
        if loc and loc[0] in _REQUEST_SOURCES:
            loc = loc[1:]
        if error.get("type") == "json_invalid":
            loc = []
        field = ".".join(loc) if loc else "body"
        errors.setdefault(field, []).append(error["msg"])
    return errors


def register_exception_handlers(app: FastAPI):
    """
    Register global exception handlers for the FastAPI app.
    Maps exceptions to the ApiResponse error envelope.
    """

    @app.exception_handler(BadRequestException)
    async def bad_request_handler(request: Request, exc: BadRequestException):
        logger.warning(f"BadRequestException: {exc.message}")
        return _error_response(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(ResourceNotFoundException)
    async def resource_not_found_handler(
            request: Request, exc: ResourceNotFoundException
    ):
        logger.warning(f"ResourceNotFoundException: {exc.message}")
        return _error_response(status.HTTP_404_NOT_FOUND, exc.message)

    @app.exception_handler(AccessDeniedException)
    async def access_denied_handler(request: Request, exc: AccessDeniedException):
        logger.warning(f"AccessDeniedException: {exc.message}")
        return _error_response(status.HTTP_403_FORBIDDEN, exc.message)

    @app.exception_handler(PermissionDeniedException)
    async def permission_denied_handler(request: Request, exc: PermissionDeniedException):
        logger.warning(f"PermissionDeniedException: {exc.message}")
        if wants_html(request):
            return RedirectResponse(
                get_settings().home_url, status_code=status.HTTP_303_SEE_OTHER
            )
        return _error_response(status.HTTP_403_FORBIDDEN, exc.message)

    @app.exception_handler(UnauthorizedException)
    async def unauthorized_handler(request: Request, exc: UnauthorizedException):
        logger.warning(f"UnauthorizedException: {exc.message}")
        return _error_response(status.HTTP_401_UNAUTHORIZED, exc.message)

    @app.exception_handler(ValidationException)
    async def validation_handler(request: Request, exc: ValidationException):
        logger.info(f"ValidationException: {exc.errors}")
        return _error_response(
            HTTP_422_UNPROCESSABLE, exc.message, errors=exc.errors
        )

    @app.exception_handler(OperationFailedException)
    async def operation_failed_handler(request: Request, exc: OperationFailedException):
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
            request: Request, exc: RequestValidationError
    ):
        logger.info(f"Validation error: {exc.errors()}")
        errors = format_validation_errors(exc.errors())
        first = next(iter(errors.values()))[0]
        return _error_response(
            HTTP_422_UNPROCESSABLE, first, errors=errors
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTPException: {exc.detail}")
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled Exception: {str(exc)}", exc_info=True)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"
        )
