"""Errors raised by the API client and their user-facing messages."""

import httpx

NETWORK_MESSAGE = "Network error. Please check your connection and try again."
UNAUTHORIZED_MESSAGE = "You are not authorized. Please log in again."


class ApiError(Exception):
    """A backend call failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(ApiError):
    """Connection failure or timeout; no response was received."""


class AuthenticationError(ApiError):
    """HTTP 401. The stored token has already been cleared."""


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    """HTTP 400/422: the backend rejected the request body or parameters."""


class ServerError(ApiError):
    pass


_STATUS_ERRORS = {
    400: ValidationError,
    401: AuthenticationError,
    403: ForbiddenError,
    404: NotFoundError,
    422: ValidationError,
}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            if body.get(key):
                return str(body[key])
    text = response.text.strip()
    return text or f"HTTP {response.status_code}"


def error_for_response(response: httpx.Response) -> ApiError:
    """Build the ApiError subclass matching an error response."""
    status = response.status_code
    if status in _STATUS_ERRORS:
        cls = _STATUS_ERRORS[status]
    elif status >= 500:
        cls = ServerError
    else:
        cls = ApiError
    return cls(_error_message(response), status_code=status)


def describe_error(
    exc: Exception,
    fallback: str,
    validation_message: str | None = None,
) -> str:
    """Message to show a user for ``exc``."""
    if isinstance(exc, NetworkError):
        return NETWORK_MESSAGE
    if isinstance(exc, AuthenticationError):
        return UNAUTHORIZED_MESSAGE
    if isinstance(exc, ValidationError):
        return validation_message or exc.message
    if isinstance(exc, ServerError):
        return fallback
    if isinstance(exc, ApiError):
        return exc.message or fallback
    return fallback
