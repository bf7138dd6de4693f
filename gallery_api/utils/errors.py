"""
API error taxonomy.
Every error the API reports deliberately is an ApiError; main.py renders them
all into the same JSON envelope.
"""
from datetime import datetime, timezone
from typing import Optional
from fastapi import HTTPException, status


class ApiError(HTTPException):
    """Base class for errors carrying a client-facing message and status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, headers: Optional[dict] = None):
        self.message = message or self.default_message
        super().__init__(status_code=self.status_code, detail=self.message, headers=headers)


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation error"


class UnauthenticatedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidCredentialsError(UnauthenticatedError):
    default_message = "Invalid username or password"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class TooManyRequestsError(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests, please try again later."


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"


def error_envelope(message: str, status_code: int, path: str, stack: Optional[str] = None) -> dict:
    """
    Build the JSON body shared by every non-2xx response.

    Args:
        message: Client-facing error message
        status_code: HTTP status code
        path: Request path (including query string)
        stack: Formatted traceback, only passed outside production

    Returns:
        dict: {message, status, path, timestamp[, stack]}
    """
    body = {
        "message": message,
        "status": status_code,
        "path": path,
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }
    if stack:
        body["stack"] = stack
    return body


def format_validation_errors(errors: list) -> str:
    """
    Concatenate pydantic error entries into one message.

    Example: "Validation error: title: Field required, featured: Input should be a valid boolean"
    """
    parts = []
    for error in errors:
        # Drop the request section ("body", "query", "path") from the location
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        msg = error.get("msg", "Invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return f"{ValidationError.default_message}: {', '.join(parts)}"
