"""Shared utilities for the Todo Lists Service."""

from .types import (
    TodoList,
    Task,
    ItemStatus,
    TaskInput,
    CreateListRequest,
    UpdateListRequest,
    UpdateStatusRequest,
    ErrorResponse
)

from .errors import (
    DomainError,
    ValidationError,
    NotFoundError,
    AuthenticationError
)

from .responses import (
    create_success_response,
    create_empty_response,
    create_error_response
)

__all__ = [
    # Types
    'TodoList',
    'Task',
    'ItemStatus',
    'TaskInput',
    'CreateListRequest',
    'UpdateListRequest',
    'UpdateStatusRequest',
    'ErrorResponse',
    # Errors
    'DomainError',
    'ValidationError',
    'NotFoundError',
    'AuthenticationError',
    # Responses
    'create_success_response',
    'create_empty_response',
    'create_error_response',
]
