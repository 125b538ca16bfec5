# server/core/errors.py

from typing import Any


class ApiError(Exception):
    """
    Base class for every failure a handler reports to the client.
    Rendered as {"message": ...} plus "error" when a detail is attached.
    """
    status_code = 500

    def __init__(self, message: str, detail: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        body = {"message": self.message}
        if self.detail:
            body["error"] = self.detail
        return body


# -------------------------------
# 400: bad input
# -------------------------------

class ValidationError(ApiError):
    status_code = 400


class ConflictError(ValidationError):
    """Unique field (username / email) already taken."""


# -------------------------------
# Authentication
# -------------------------------

class AuthError(ApiError):
    status_code = 403


class MissingTokenError(AuthError):
    status_code = 401

    def __init__(self, message: str = "Authentication token missing."):
        super().__init__(message)


class InvalidTokenError(AuthError):
    status_code = 403

    def __init__(self, message: str = "Invalid or expired token."):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    # Same message whether the user is unknown or the password is wrong
    status_code = 400

    def __init__(self, message: str = "Invalid username or password."):
        super().__init__(message)


# -------------------------------
# Lookup / infrastructure
# -------------------------------

class NotFoundError(ApiError):
    status_code = 404


class InfrastructureError(ApiError):
    status_code = 500
