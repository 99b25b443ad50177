from typing import Any

from fastapi import status


class AppError(Exception):
    """Base for errors that map onto an HTTP status at the request boundary."""

    code: str = "APP_ERROR"
    message: str = "Application error"
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
    ):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code}


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"
    message = "Unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    code = "FORBIDDEN"
    message = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class InvalidInputError(AppError):
    code = "INVALID_INPUT"
    message = "Invalid input"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AppError):
    # Slug collisions are reported as 400 to match the admin UI contract.
    code = "CONFLICT"
    message = "Resource conflict"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    code = "NOT_FOUND"
    message = "Resource not found"
    status_code = status.HTTP_404_NOT_FOUND
