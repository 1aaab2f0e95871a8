from __future__ import annotations

from typing import Any

from fastapi import status


class ApiError(Exception):
    """Base class for errors that map directly onto a JSON error response.

    Services and handlers raise these; the exception handlers registered in
    ``create_app()`` render them as ``{"message": ..., "statusCode": ...}``.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server Error"

    def __init__(self, message: str | None = None, *, headers: dict[str, str] | None = None) -> None:
        if message is not None:
            self.message = message
        self.headers = headers
        super().__init__(self.message)

    def to_content(self) -> dict[str, Any]:
        return {"message": self.message, "statusCode": self.status_code}


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation Error"

    def __init__(self, error: str) -> None:
        super().__init__()
        self.error = error

    def to_content(self) -> dict[str, Any]:
        content = super().to_content()
        content["error"] = self.error
        return content


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication required"


class InvalidCredentials(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity} couldn't be found")


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT


class TooManyRequests(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = "Too many requests"

    def __init__(self, retry_after: int) -> None:
        super().__init__(headers={"Retry-After": str(retry_after)})
