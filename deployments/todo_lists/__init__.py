"""Todo Lists Service CDK constructs."""

from .config import ConfigurationError, TodoListsConfig
from .table_construct import TodoListsTableConstruct
from .auth_construct import TodoListsAuthConstruct
from .lambda_constructs import TodoListsLambdaConstruct
from .api_construct import TodoListsApiConstruct

__all__ = [
    "ConfigurationError",
    "TodoListsConfig",
    "TodoListsTableConstruct",
    "TodoListsAuthConstruct",
    "TodoListsLambdaConstruct",
    "TodoListsApiConstruct",
]
