"""
Error taxonomy shared by repositories, auth and the HTTP layer.

Each error carries the HTTP status it maps to; the exception handlers in
main.py turn them into {"error": message} responses.
"""

from fastapi import status


class CampusPilotError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(CampusPilotError):
    """Missing or malformed required field, or malformed identifier."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(CampusPilotError):
    """Missing or rejected bearer credential."""

    status_code = status.HTTP_401_UNAUTHORIZED

    @classmethod
    def no_token(cls) -> "AuthError":
        return cls("Unauthorized: No token provided")

    @classmethod
    def invalid_token(cls) -> "AuthError":
        return cls("Unauthorized: Invalid token")


class NotFoundError(CampusPilotError):
    """Single-record lookup found nothing."""

    status_code = status.HTTP_404_NOT_FOUND


class StoreError(CampusPilotError):
    """Document store unreachable or failing at the driver level."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
