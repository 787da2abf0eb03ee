"""
Domain error classes for the Todo Lists Service.

Each error carries a code that the handler maps to an HTTP status.
"""

from typing import Dict, Any, Optional


class DomainError(Exception):
    """
    Base class for all domain errors.

    Domain errors are expected failures (missing list, bad input) that the
    handler turns into a JSON error response instead of a 500.
    """

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}


class ValidationError(DomainError):
    """Invalid request body or path parameter. Maps to HTTP 400."""

    status_code = 400

    def __init__(self, message: str, details: Dict[str, Any]):
        super().__init__('VALIDATION_ERROR', message, details)


class NotFoundError(DomainError):
    """List or task does not exist for the caller. Maps to HTTP 404."""

    status_code = 404

    def __init__(self, message: str):
        super().__init__('NOT_FOUND', message, {})


class AuthenticationError(DomainError):
    """
    Caller identity is missing or unknown. Maps to HTTP 401.

    API Gateway rejects unauthenticated requests before the function runs,
    so this only fires for tokens whose user no longer exists.
    """

    status_code = 401

    def __init__(self, message: str):
        super().__init__('AUTHENTICATION_ERROR', message, {})
