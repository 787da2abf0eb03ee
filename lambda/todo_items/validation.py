"""
Input validation for the items Lambda handler.

All validation happens before the service layer is called. Each validator
returns a list of {'field', 'message'} dicts; an empty list means the input
is valid.

Follows steering rules:
- Fail fast on invalid input
- Return detailed validation errors
"""

import re
from typing import Any, Dict, List

from todo_shared.types import ITEM_STATUSES


MAX_NAME_LENGTH = 200
MAX_TITLE_LENGTH = 500
MAX_TASKS_PER_REQUEST = 100

# Crockford base32 ULID; the service generates uppercase, clients may send either case
ID_PATTERN = re.compile(r'[0-9A-HJKMNP-TV-Z]{26}', re.IGNORECASE)


def _error(field: str, message: str) -> Dict[str, str]:
    return {'field': field, 'message': message}


NOT_AN_OBJECT = _error('body', 'Request body must be a JSON object')


def _unexpected_fields(request: Dict[str, Any], allowed_fields: set) -> List[Dict[str, str]]:
    return [
        _error(str(field), 'Unexpected field in request')
        for field in sorted(set(request.keys()) - allowed_fields, key=str)
    ]


def _validate_text(value: Any, field: str, max_length: int) -> List[Dict[str, str]]:
    if not isinstance(value, str):
        return [_error(field, 'Must be a string')]
    if not value.strip():
        return [_error(field, 'Cannot be empty')]
    if len(value) > max_length:
        return [_error(field, f'Must be at most {max_length} characters')]
    return []


def _validate_tasks(tasks: Any) -> List[Dict[str, str]]:
    if not isinstance(tasks, list):
        return [_error('tasks', 'Must be a list')]
    if len(tasks) > MAX_TASKS_PER_REQUEST:
        return [_error('tasks', f'At most {MAX_TASKS_PER_REQUEST} tasks per request')]

    errors: List[Dict[str, str]] = []
    for index, task in enumerate(tasks):
        field = f'tasks[{index}]'
        if not isinstance(task, dict):
            errors.append(_error(field, 'Task must be an object'))
            continue
        for extra in sorted(set(task.keys()) - {'title'}, key=str):
            errors.append(_error(f'{field}.{extra}', 'Unexpected field in task'))
        if 'title' not in task:
            errors.append(_error(f'{field}.title', 'Field is required'))
        else:
            errors.extend(_validate_text(task['title'], f'{field}.title', MAX_TITLE_LENGTH))
    return errors


def validate_create_list_request(request: Any) -> List[Dict[str, str]]:
    """
    Validate a POST /items payload.

    Examples:
        >>> validate_create_list_request({'name': 'Groceries'})
        []

        >>> validate_create_list_request({})
        [{'field': 'name', 'message': 'Field is required'}]
    """
    if not isinstance(request, dict):
        return [dict(NOT_AN_OBJECT)]
    errors = _unexpected_fields(request, {'name', 'tasks'})

    if 'name' not in request:
        errors.append(_error('name', 'Field is required'))
    else:
        errors.extend(_validate_text(request['name'], 'name', MAX_NAME_LENGTH))

    if 'tasks' in request:
        errors.extend(_validate_tasks(request['tasks']))

    return errors


def validate_update_list_request(request: Any) -> List[Dict[str, str]]:
    """Validate a PATCH /items/{listID} payload. At least one field is required."""
    if not isinstance(request, dict):
        return [dict(NOT_AN_OBJECT)]
    errors = _unexpected_fields(request, {'name', 'tasks'})

    if 'name' not in request and 'tasks' not in request:
        errors.append(_error('body', 'At least one of name or tasks is required'))
        return errors

    if 'name' in request:
        errors.extend(_validate_text(request['name'], 'name', MAX_NAME_LENGTH))
    if 'tasks' in request:
        errors.extend(_validate_tasks(request['tasks']))

    return errors


def validate_status_request(request: Any) -> List[Dict[str, str]]:
    """Validate a payload for the list and task status routes."""
    if not isinstance(request, dict):
        return [dict(NOT_AN_OBJECT)]
    errors = _unexpected_fields(request, {'status'})

    if 'status' not in request:
        errors.append(_error('status', 'Field is required'))
    elif request['status'] not in ITEM_STATUSES:
        errors.append(_error('status', f"Must be one of: {', '.join(ITEM_STATUSES)}"))

    return errors


def validate_path_id(value: Any, field: str) -> List[Dict[str, str]]:
    """Validate a listID or taskID path parameter."""
    if not isinstance(value, str) or not ID_PATTERN.fullmatch(value):
        return [_error(field, 'Must be a valid identifier')]
    return []
