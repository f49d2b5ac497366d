"""
Domain errors raised by services, stores and the auth decorator.

Every error carries the HTTP status and machine-readable code that
api.errors turns into the uniform error envelope.
"""
from __future__ import annotations


class APIError(Exception):
    status = 500
    error = "INTERNAL_ERROR"
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class ValidationError(APIError):
    status = 400
    error = "VALIDATION_ERROR"
    message = "Invalid input"


class ConflictError(APIError):
    status = 409
    error = "CONFLICT"
    message = "username or email already exists"


class InvalidCredentials(APIError):
    status = 401
    error = "INVALID_CREDENTIALS"
    message = "invalid email or password"


class Unauthorized(APIError):
    status = 401
    error = "UNAUTHORIZED"
    message = "No token provided"


class InvalidToken(Unauthorized):
    error = "INVALID_TOKEN"
    message = "Invalid token"


class ExpiredToken(InvalidToken):
    error = "TOKEN_EXPIRED"
    message = "Token expired"


class InvalidOrExpiredToken(Unauthorized):
    error = "INVALID_OR_EXPIRED_TOKEN"
    message = "invalid or expired refresh token"


class UserNotFound(Unauthorized):
    error = "USER_NOT_FOUND"
    message = "user not found"


class NotFound(APIError):
    status = 404
    error = "NOT_FOUND"
    message = "Resource not found"


class InternalError(APIError):
    pass
