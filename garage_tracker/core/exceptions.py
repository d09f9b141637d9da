"""
Custom Exceptions

This module defines the error taxonomy of the garage tracker. Every
exception carries a client-safe message; the API layer maps each type to
an HTTP status in one place (see api/errors.py).

Benefits:
- Services raise domain errors, not HTTP errors
- Login failures share one type so callers cannot tell a missing
  account from a wrong password
- Store failures keep the original driver error for logging while the
  client only ever sees an opaque message
"""

from typing import Optional


class GarageTrackerException(Exception):
    """Base exception for the garage tracker service."""
    pass


class DuplicateEmailError(GarageTrackerException):
    """Raised when signing up with an email that already has an account."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email already exists")


class InvalidCredentialsError(GarageTrackerException):
    """Raised when a login does not match any account/password pair."""

    def __init__(self):
        super().__init__("Invalid credentials")


class InvalidTokenError(GarageTrackerException):
    """Raised by the token codec when a token cannot be trusted."""

    def __init__(self, reason: str = "Invalid token"):
        self.reason = reason
        super().__init__(reason)


class UnauthenticatedError(GarageTrackerException):
    """Raised when a request carries no usable bearer token."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ValidationFailedError(GarageTrackerException):
    """Raised when an input payload is malformed."""

    def __init__(self, message: str):
        super().__init__(message)


class RecordNotFoundError(GarageTrackerException):
    """Raised when an update/delete matches no record owned by the caller."""

    def __init__(self, record_id: int):
        self.record_id = record_id
        super().__init__("Vehicle not found")


class StoreFailureError(GarageTrackerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
