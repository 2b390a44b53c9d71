"""errors.py - application error taxonomy.

Every error carries the HTTP status it is reported with; the handlers in
app.py turn them into ``{"message": ..., "errors": [...]}`` JSON bodies.
"""
from typing import Dict, List, Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 409


class AuthenticationError(AppError):
    status_code = 401


class InvalidTokenError(AuthenticationError):
    status_code = 403


class AuthorizationError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class UpstreamError(AppError):
    status_code = 500


class ConfigurationError(AppError):
    status_code = 500


class InternalError(AppError):
    status_code = 500
