"""
Shared type definitions for the Todo Lists Service.

TypedDict classes for request payloads and the list/task records returned
to clients.
"""

from typing import TypedDict, Literal, List, Dict, Any, Optional

# Status shared by lists and tasks
ItemStatus = Literal['pending', 'done']

ITEM_STATUSES = ('pending', 'done')


class Task(TypedDict):
    """Task belonging to a todo list."""
    taskId: str
    listId: str
    title: str
    status: ItemStatus
    createdAt: str
    updatedAt: str


class TodoList(TypedDict, total=False):
    """Todo list. `tasks` is only present when a single list is fetched."""
    listId: str
    name: str
    status: ItemStatus
    ownerEmail: Optional[str]
    createdAt: str
    updatedAt: str
    tasks: List[Task]


class TaskInput(TypedDict):
    """Task as submitted by a client."""
    title: str


class CreateListRequest(TypedDict, total=False):
    """Request payload for POST /items."""
    name: str
    tasks: List[TaskInput]


class UpdateListRequest(TypedDict, total=False):
    """Request payload for PATCH /items/{listID}."""
    name: str
    tasks: List[TaskInput]


class UpdateStatusRequest(TypedDict):
    """Request payload for the status routes."""
    status: ItemStatus


class ErrorResponse(TypedDict):
    """Standard error response structure."""
    code: str
    message: str
    details: Dict[str, Any]
