"""Service error values and the exception that carries them out of dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import status


@dataclass(frozen=True)
class ServiceError:
    """A failed operation, rendered by routers as the error envelope."""

    status_code: int
    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiError(Exception):
    """Raised from dependencies when a request must stop with ``error``."""

    def __init__(self, error: ServiceError) -> None:
        super().__init__(error.message)
        self.error = error


def bad_request(code: str, message: str, details: dict[str, Any] | None = None) -> ServiceError:
    return ServiceError(status.HTTP_400_BAD_REQUEST, code, message, details)


def unauthorized(code: str, message: str) -> ServiceError:
    return ServiceError(status.HTTP_401_UNAUTHORIZED, code, message)


def forbidden(message: str) -> ServiceError:
    return ServiceError(status.HTTP_403_FORBIDDEN, "forbidden", message)


def not_found(message: str) -> ServiceError:
    return ServiceError(status.HTTP_404_NOT_FOUND, "not_found", message)


def conflict(code: str, message: str) -> ServiceError:
    return ServiceError(status.HTTP_409_CONFLICT, code, message)


MISSING_FIELDS = bad_request("invalid_request", "Missing required fields")
INVALID_EMAIL = bad_request("invalid_email", "Invalid email format")
EMAIL_CONFLICT = conflict("email_conflict", "Email is already registered")
MAX_MEMBERS_REACHED = conflict("max_members_reached", "Maximum number of active members reached")
MAX_WAITLIST_REACHED = conflict("max_waitlist_reached", "Maximum waitlist capacity reached")
