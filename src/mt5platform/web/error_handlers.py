import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from mt5platform.errors import AccessDeniedError, AuthenticationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def create_json_error_response(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"error": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, AccessDeniedError):
        status_code = 403
        error_type = "access_denied"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)


async def request_validation_handler(_: Request, exc: Exception) -> Response:
    """Report missing or malformed request fields as 400."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    if any(error.get("type") == "json_invalid" for error in errors):
        message = "Bad Request"
    elif errors:
        field = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Invalid or missing field: {field}" if field else "Bad Request"
    else:
        message = "Bad Request"
    return create_json_error_response(status_code=400, message=message, error_type="validation_error")


async def store_unavailable_handler(_: Request, exc: Exception) -> Response:
    """Handle key-value store failures without exposing driver details."""
    logger.error("Store unavailable: %s", exc, exc_info=exc.__cause__ or exc)
    return create_json_error_response(
        status_code=500, message="Service temporarily unavailable", error_type="store_unavailable"
    )


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(status_code=500, message="Internal server error", error_type="internal_server_error")
