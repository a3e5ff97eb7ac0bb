"""
Mapping of session failures to HTTP responses, plus app-wide exception handlers.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from sessiongate.api.responses import error_response
from sessiongate.auth.results import AuthFailure, Err
from sessiongate.log import get_logger

logger = get_logger(__name__)

# failure -> (status code, client-facing message)
FAILURE_STATUS: dict[AuthFailure, tuple[int, str]] = {
    AuthFailure.USERNAME_TAKEN: (409, "Username has already existed"),
    AuthFailure.INVALID_CREDENTIALS: (401, "Invalid username or password"),
    AuthFailure.MALFORMED_CREDENTIAL: (401, "Unauthorized"),
    AuthFailure.REFRESH_TOKEN_NOT_FOUND: (404, "Refresh token not found"),
    AuthFailure.TOKEN_INVALID: (400, "Refresh token expired"),
    AuthFailure.UNKNOWN_ACCOUNT: (401, "Unauthorized"),
    AuthFailure.DUPLICATE_TOKEN: (409, "Refresh token already exists"),
    AuthFailure.RENEWAL_TOKEN_REJECTED: (401, "Unauthorized"),
    AuthFailure.ACCESS_TOKEN_INVALID: (401, "Unauthorized"),
    AuthFailure.INTERNAL: (500, "Internal server error"),
}


def failure_response(err: Err):
    status_code, message = FAILURE_STATUS.get(err.failure, (500, "Internal server error"))
    logger.warning("%s: %s", err.failure.value, err.message)
    return error_response(message, status_code)


def _format_validation_errors(exc: RequestValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors[".".join(loc) or "body"] = error.get("msg", "invalid value")
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation_failed(request: Request, exc: RequestValidationError):
        logger.error("Validation Failed on %s: %s", request.url.path, exc.errors())
        return error_response("Validation Failed", 400, details=_format_validation_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return error_response(str(exc.detail), exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception("Unexpected Exception on %s", request.url.path)
        return error_response("Internal server error", 500)
