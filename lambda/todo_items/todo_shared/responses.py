"""
Response helper functions for the items Lambda handler.

Responses use the HTTP API payload format 2.0. Error bodies always have the
shape {"code", "message", "details"}.
"""

import json
from typing import Dict, Any

from .types import ErrorResponse


JSON_HEADERS = {
    'Content-Type': 'application/json'
}


def create_success_response(status_code: int, data: Any) -> Dict[str, Any]:
    """
    Create a successful HTTP response.

    Args:
        status_code: HTTP status code (200, 201, etc.)
        data: Response payload to be JSON serialized

    Returns:
        Lambda proxy integration response object
    """
    return {
        'statusCode': status_code,
        'headers': dict(JSON_HEADERS),
        'body': json.dumps(data, default=str)
    }


def create_empty_response(status_code: int = 204) -> Dict[str, Any]:
    """Create a response without a body (e.g. after a delete). No Content-Type is sent."""
    return {
        'statusCode': status_code,
        'body': ''
    }


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    details: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Create an error HTTP response with consistent structure.

    Args:
        status_code: HTTP status code (400, 401, 404, 500)
        code: Error code string (VALIDATION_ERROR, NOT_FOUND, etc.)
        message: Human-readable error message
        details: Additional error context (field errors, etc.)

    Returns:
        Lambda proxy integration response object
    """
    body: ErrorResponse = {
        'code': code,
        'message': message,
        'details': details
    }
    return {
        'statusCode': status_code,
        'headers': dict(JSON_HEADERS),
        'body': json.dumps(body, default=str)
    }
