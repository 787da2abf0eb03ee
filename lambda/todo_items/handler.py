"""
Items Lambda handler.

Single entry point for every /items route of the HTTP API. API Gateway has
already validated the caller's Cognito token; the handler reads the caller
from the JWT claims, validates input, delegates to the service and maps
errors to HTTP responses.

Routes (routeKey -> operation):
    POST /items                              create a list
    GET /items                               list the caller's lists
    GET /items/{listID}                      get a list with its tasks
    PATCH /items/{listID}                    rename a list / append tasks
    PATCH /items/{listID}/status             update list status
    PATCH /items/{listID}/{taskID}/status    update task status
    DELETE /items/{listID}                   delete a list and its tasks
    DELETE /items/{listID}/{taskID}          delete a task

Follows steering rules:
- Business logic in services, not handlers
- Fail fast on invalid input
- Configuration read once at startup
- Validate env vars on boot
- Log request lifecycle with correlation ID
"""

import base64
import binascii
import json
import os
import re
from typing import Any, Callable, Dict

from service import TodoService
from validation import (
    validate_create_list_request,
    validate_path_id,
    validate_status_request,
    validate_update_list_request,
)
from todo_shared.errors import AuthenticationError, DomainError, ValidationError
from todo_shared.logger import StructuredLogger, create_logger
from todo_shared.types import CreateListRequest, UpdateListRequest, UpdateStatusRequest
from todo_shared.responses import (
    create_empty_response,
    create_error_response,
    create_success_response,
)


REQUIRED_ENV_VARS = ['TABLE_NAME', 'USER_POOL_ID', 'REGION', 'IDENTITY_POOL_ID']

# Template values that were never replaced, e.g. 'Your USER_POOL_ID'
PLACEHOLDER_PATTERNS = [
    re.compile(r'^your\b', re.IGNORECASE),
    re.compile(r'^<[^>]*>$'),
    re.compile(r'^(changeme|change_me|todo|tbd|placeholder|xxx+)$', re.IGNORECASE),
]


def _is_placeholder(value: str) -> bool:
    stripped = value.strip()
    return not stripped or any(pattern.search(stripped) for pattern in PLACEHOLDER_PATTERNS)


def _load_config() -> Dict[str, str]:
    """
    Load and validate environment variables at startup.

    Returns:
        Configuration dictionary with snake_case keys

    Raises:
        ValueError: If a required variable is missing or still a placeholder
    """
    config = {}
    missing_vars = []
    placeholder_vars = []

    for var in REQUIRED_ENV_VARS:
        value = os.environ.get(var)
        if value is None or not value.strip():
            missing_vars.append(var)
        elif _is_placeholder(value):
            placeholder_vars.append(var)
        else:
            config[var.lower()] = value.strip()

    if missing_vars:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_vars)}"
        )
    if placeholder_vars:
        raise ValueError(
            f"Environment variables still contain placeholder values: {', '.join(placeholder_vars)}"
        )

    return config


# Load configuration at module initialization (cold start)
config = _load_config()

# Initialize service once at cold start
todo_service = TodoService(config)


def _parse_body(event: Dict[str, Any]) -> Any:
    """Decode the JSON request body. A missing body decodes to {}."""
    body = event.get('body')
    if body is None or body == '':
        return {}
    try:
        if event.get('isBase64Encoded'):
            body = base64.b64decode(body, validate=True).decode('utf-8')
        return json.loads(body)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError):
        raise ValidationError(
            'Invalid JSON in request body',
            {'body': 'Request body must be valid JSON'}
        )


def _claims(event: Dict[str, Any]) -> Dict[str, Any]:
    """Return the JWT claims placed on the request by the Cognito authorizer."""
    authorizer = (event.get('requestContext') or {}).get('authorizer') or {}
    claims = (authorizer.get('jwt') or {}).get('claims') or {}
    if not claims.get('sub'):
        raise AuthenticationError('Request has no authenticated user')
    return claims


def _path_ids(event: Dict[str, Any], *names: str) -> Dict[str, str]:
    """
    Read and validate path parameters such as listID and taskID.

    ULIDs are case-insensitive; keys are always built from the uppercase form.
    """
    parameters = event.get('pathParameters') or {}
    errors = []
    for name in names:
        errors.extend(validate_path_id(parameters.get(name), name))
    if errors:
        raise ValidationError('Invalid path parameters', {'errors': errors})
    return {name: parameters[name].upper() for name in names}


def _validated(request: Any, validator: Callable[[Any], list]) -> Any:
    errors = validator(request)
    if errors:
        raise ValidationError('Invalid request data', {'errors': errors})
    return request


def _create_list(event: Dict[str, Any], claims: Dict[str, Any]) -> Dict[str, Any]:
    request: CreateListRequest = _validated(_parse_body(event), validate_create_list_request)
    todo_list = todo_service.create_list(
        claims['sub'],
        request['name'],
        tasks=request.get('tasks'),
        owner_email=todo_service.resolve_owner_email(claims),
    )
    return create_success_response(201, todo_list)


def _list_lists(event: Dict[str, Any], claims: Dict[str, Any]) -> Dict[str, Any]:
    return create_success_response(200, {'items': todo_service.list_lists(claims['sub'])})


def _get_list(event: Dict[str, Any], claims: Dict[str, Any]) -> Dict[str, Any]:
    ids = _path_ids(event, 'listID')
    return create_success_response(200, todo_service.get_list(claims['sub'], ids['listID']))


def _update_list(event: Dict[str, Any], claims: Dict[str, Any]) -> Dict[str, Any]:
    ids = _path_ids(event, 'listID')
    request: UpdateListRequest = _validated(_parse_body(event), validate_update_list_request)
    todo_list = todo_service.update_list(
        claims['sub'],
        ids['listID'],
        name=request.get('name'),
        tasks=request.get('tasks'),
    )
    return create_success_response(200, todo_list)


def _update_list_status(event: Dict[str, Any], claims: Dict[str, Any]) -> Dict[str, Any]:
    ids = _path_ids(event, 'listID')
    request: UpdateStatusRequest = _validated(_parse_body(event), validate_status_request)
    todo_list = todo_service.update_list_status(claims['sub'], ids['listID'], request['status'])
    return create_success_response(200, todo_list)


def _update_task_status(event: Dict[str, Any], claims: Dict[str, Any]) -> Dict[str, Any]:
    ids = _path_ids(event, 'listID', 'taskID')
    request: UpdateStatusRequest = _validated(_parse_body(event), validate_status_request)
    task = todo_service.update_task_status(
        claims['sub'], ids['listID'], ids['taskID'], request['status']
    )
    return create_success_response(200, task)


def _delete_list(event: Dict[str, Any], claims: Dict[str, Any]) -> Dict[str, Any]:
    ids = _path_ids(event, 'listID')
    todo_service.delete_list(claims['sub'], ids['listID'])
    return create_empty_response(204)


def _delete_task(event: Dict[str, Any], claims: Dict[str, Any]) -> Dict[str, Any]:
    ids = _path_ids(event, 'listID', 'taskID')
    todo_service.delete_task(claims['sub'], ids['listID'], ids['taskID'])
    return create_empty_response(204)


ROUTES: Dict[str, Callable[[Dict[str, Any], Dict[str, Any]], Dict[str, Any]]] = {
    'POST /items': _create_list,
    'GET /items': _list_lists,
    'GET /items/{listID}': _get_list,
    'PATCH /items/{listID}': _update_list,
    'PATCH /items/{listID}/status': _update_list_status,
    'PATCH /items/{listID}/{taskID}/status': _update_task_status,
    'DELETE /items/{listID}': _delete_list,
    'DELETE /items/{listID}/{taskID}': _delete_task,
}


def _handle_domain_error(logger: StructuredLogger, error: DomainError) -> Dict[str, Any]:
    if isinstance(error, ValidationError):
        logger.log_validation_error(errors=error.details)
    else:
        logger.log_domain_error(error_code=error.code, error_message=error.message)
    return create_error_response(error.status_code, error.code, error.message, error.details)


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for all /items routes (HTTP API payload format 2.0).

    Args:
        event: API Gateway HTTP API Lambda event
        context: Lambda context object

    Returns:
        API Gateway Lambda proxy integration response

    Response codes:
        200: Read or update succeeded
        201: List created
        204: List or task deleted
        400: Validation error (bad JSON, unknown fields, invalid ids)
        401: Authenticated user missing from the token or the user pool
        404: List or task not found
        500: Internal error
    """
    logger = create_logger(event)
    http = (event.get('requestContext') or {}).get('http') or {}
    logger.log_request_start(
        path=event.get('rawPath', http.get('path', '')),
        method=http.get('method', '')
    )

    route = ROUTES.get(event.get('routeKey', ''))
    if route is None:
        logger.log_domain_error(error_code='NOT_FOUND', error_message='Unknown route')
        return create_error_response(
            404, 'NOT_FOUND', 'Route not found', {'routeKey': event.get('routeKey')}
        )

    try:
        claims = _claims(event)
        response = route(event, claims)
        logger.log_request_complete(status_code=response['statusCode'], userId=claims['sub'])
        return response

    except DomainError as error:
        return _handle_domain_error(logger, error)

    except Exception as error:
        # Do not expose internal details to the client
        logger.log_unexpected_error(
            error_type=type(error).__name__,
            error_message=str(error)
        )
        return create_error_response(
            500,
            'INTERNAL_ERROR',
            'An unexpected error occurred',
            {}
        )
