"""
Structured logging utility for the items Lambda handler.

Every log entry is a single JSON line on stdout, which Lambda ships to
CloudWatch Logs. Entries carry the API Gateway request id as correlation id
and, for terminal events, the request latency.

Follows steering rules:
- Log request lifecycle with correlation ID
- Log errors with context (no sensitive data)
- Use consistent log format
"""

import json
import time
from typing import Dict, Any
from datetime import datetime, timezone


# Field names that should never be logged
SENSITIVE_FIELDS = {
    'password',
    'token',
    'secret',
    'authorization',
    'auth',
    'credentials',
    'accesstoken',
    'access_token',
    'idtoken',
    'id_token',
    'refreshtoken',
    'refresh_token',
    'cookie',
    'cookies',
}


class StructuredLogger:
    """
    Structured logger for the items Lambda handler.

    Usage:
        logger = StructuredLogger(correlation_id='abc-123', operation='items-create')
        logger.log_request_start(path='/items', method='POST')
        # ... process request ...
        logger.log_request_complete(status_code=201, listId='01H...')
    """

    def __init__(self, correlation_id: str, operation: str):
        """
        Args:
            correlation_id: Unique identifier for request tracing
            operation: Route key being served (e.g. 'POST /items')
        """
        self.correlation_id = correlation_id
        self.operation = operation
        self.start_time = time.time()

    def _sanitize_data(self, data: Any) -> Any:
        """Recursively replace values of sensitive fields with [REDACTED]."""
        if isinstance(data, list):
            return [self._sanitize_data(item) for item in data]
        if not isinstance(data, dict):
            return data

        sanitized = {}
        for key, value in data.items():
            if str(key).lower() in SENSITIVE_FIELDS:
                sanitized[key] = '[REDACTED]'
            else:
                sanitized[key] = self._sanitize_data(value)
        return sanitized

    def _latency_ms(self) -> int:
        return int((time.time() - self.start_time) * 1000)

    def _log(self, event: str, **kwargs: Any) -> None:
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'correlationId': self.correlation_id,
            'operation': self.operation,
            'event': event,
            **self._sanitize_data(kwargs)
        }

        # Use print for CloudWatch Logs
        print(json.dumps(log_entry, default=str))

    def log_request_start(self, path: str, method: str, **additional_fields: Any) -> None:
        """Log the start of request processing."""
        self._log(
            'request_start',
            path=path,
            httpMethod=method,
            **additional_fields
        )

    def log_request_complete(self, status_code: int, **additional_fields: Any) -> None:
        """Log successful completion with latency."""
        self._log(
            'request_complete',
            statusCode=status_code,
            latencyMs=self._latency_ms(),
            **additional_fields
        )

    def log_validation_error(self, errors: Any, **additional_fields: Any) -> None:
        """Log rejected input."""
        self._log(
            'validation_error',
            errors=errors,
            latencyMs=self._latency_ms(),
            **additional_fields
        )

    def log_domain_error(
        self,
        error_code: str,
        error_message: str,
        **additional_fields: Any
    ) -> None:
        """
        Log an expected business error (list not found, unknown user).

        Args:
            error_code: Error code (e.g., 'NOT_FOUND')
            error_message: Human-readable error message
        """
        self._log(
            'domain_error',
            errorCode=error_code,
            errorMessage=error_message,
            latencyMs=self._latency_ms(),
            **additional_fields
        )

    def log_unexpected_error(
        self,
        error_type: str,
        error_message: str,
        **additional_fields: Any
    ) -> None:
        """
        Log an error that should not occur during normal operation
        (DynamoDB failures, programming errors).
        """
        self._log(
            'unexpected_error',
            errorType=error_type,
            errorMessage=error_message,
            latencyMs=self._latency_ms(),
            **additional_fields
        )


def create_logger(event: Dict[str, Any]) -> StructuredLogger:
    """
    Create a structured logger from an HTTP API (payload 2.0) event.

    Args:
        event: API Gateway HTTP API Lambda event

    Returns:
        StructuredLogger instance
    """
    request_context = event.get('requestContext') or {}
    correlation_id = request_context.get('requestId', 'unknown')
    operation = event.get('routeKey', 'unknown')
    return StructuredLogger(correlation_id, operation)
