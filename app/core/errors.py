from fastapi import HTTPException, status
from pydantic import ValidationError


class ApiError(Exception):
    """
    Failure talking to the remote performance API.

    status_code is None when the request never got a response.
    """

    def __init__(self, message: str, status_code: int | None = None, path: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.path = path


class TransportError(ApiError):
    pass


class AuthorizationError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class FormValidationError(Exception):
    """Client-side validation failure. Raised before any network call."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def error_for_status(status_code: int, message: str, path: str | None = None) -> ApiError:
    if status_code == 403:
        return AuthorizationError(message, status_code, path)
    if status_code == 404:
        return NotFoundError(message, status_code, path)
    return ApiError(message, status_code, path)


def to_http_exception(err: Exception, fallback: str = "Request failed") -> HTTPException:
    """Map an ApiError / FormValidationError to the response a page route returns."""
    if isinstance(err, FormValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=err.message)
    if isinstance(err, ValidationError):
        first = err.errors()[0] if err.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()))
        detail = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "Invalid value")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
    if isinstance(err, ApiError):
        code = err.status_code if err.status_code and err.status_code >= 400 else status.HTTP_502_BAD_GATEWAY
        return HTTPException(status_code=code, detail=err.message or fallback)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=fallback)
