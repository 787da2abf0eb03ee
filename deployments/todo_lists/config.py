"""
Deployment configuration for the Todo Lists Service.

Configuration is read once from CDK context (``cdk.json`` or ``-c key=value``)
and passed explicitly to each construct. Nothing here is global mutable state.

Context keys:
    tableName, functionName, userPoolName, identityPoolName, apiName
    sesFromEmail, sesRegion          - optional SES sender for Cognito email
    callbackUrls                     - list or comma-separated string
    corsAllowOrigins                 - list or comma-separated string
    functionTimeoutSeconds           - Lambda timeout (default 10)

Follows steering rules:
- Explicit over implicit (all configurations declared)
- Fail fast on invalid input (placeholders rejected at synth time)
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from aws_cdk import Token
from constructs import Node


# Values copied from templates that were never filled in, e.g. 'Your USER_POOL_ID'
PLACEHOLDER_PATTERNS = [
    re.compile(r'^your\b', re.IGNORECASE),
    re.compile(r'^<[^>]*>$'),
    re.compile(r'^(changeme|change_me|todo|tbd|placeholder|xxx+)$', re.IGNORECASE),
]

DEFAULT_CALLBACK_URLS = ['https://example.com/callback']
DEFAULT_CORS_ALLOW_ORIGINS = ['*']
DEFAULT_FUNCTION_TIMEOUT_SECONDS = 10


class ConfigurationError(ValueError):
    """Raised when the stack would be deployed with unusable configuration."""


def is_placeholder(value: Optional[str]) -> bool:
    """
    Check whether a configuration value is missing or an unfilled placeholder.

    Unresolved CDK tokens (e.g. a user pool id) are never placeholders:
    CloudFormation substitutes the real value at deploy time.
    """
    if value is None:
        return True
    if Token.is_unresolved(value):
        return False
    stripped = value.strip()
    if not stripped:
        return True
    return any(pattern.search(stripped) for pattern in PLACEHOLDER_PATTERNS)


def validate_function_environment(environment: Dict[str, str]) -> None:
    """
    Validate Lambda environment variables before the function is declared.

    Args:
        environment: Environment variable mapping for the function

    Raises:
        ConfigurationError: If any variable is empty or a placeholder
    """
    invalid = sorted(
        name for name, value in environment.items() if is_placeholder(value)
    )
    if invalid:
        raise ConfigurationError(
            f"Lambda environment variables are not configured: {', '.join(invalid)}"
        )


def _as_list(value: Any, default: List[str]) -> List[str]:
    if value is None:
        return list(default)
    if isinstance(value, str):
        return [item.strip() for item in value.split(',') if item.strip()]
    return [str(item) for item in value]


@dataclass
class TodoListsConfig:
    """
    Resolved configuration for one deployment of the Todo Lists stack.

    Attributes:
        env_name: Environment name used for naming and tagging
        table_name: DynamoDB table name
        function_name: Lambda function name
        user_pool_name: Cognito user pool name
        identity_pool_name: Cognito identity pool name
        api_name: HTTP API name
        ses_from_email: SES sender address; Cognito's default sender when unset
        ses_region: Region of the SES identity for ses_from_email
        callback_urls: OAuth authorization-code callback URLs
        cors_allow_origins: Allowed CORS origins ('*' for demo deployments)
        function_timeout_seconds: Lambda timeout
    """

    env_name: str
    table_name: str
    function_name: str
    user_pool_name: str
    identity_pool_name: str
    api_name: str
    ses_from_email: Optional[str] = None
    ses_region: Optional[str] = None
    callback_urls: List[str] = field(default_factory=lambda: list(DEFAULT_CALLBACK_URLS))
    cors_allow_origins: List[str] = field(
        default_factory=lambda: list(DEFAULT_CORS_ALLOW_ORIGINS)
    )
    function_timeout_seconds: int = DEFAULT_FUNCTION_TIMEOUT_SECONDS

    @classmethod
    def for_environment(cls, env_name: str, **overrides: Any) -> 'TodoListsConfig':
        """Build a configuration with names derived from the environment name."""
        values: Dict[str, Any] = {
            'env_name': env_name,
            'table_name': f'todo-lists-{env_name}',
            'function_name': f'todo-lists-items-{env_name}',
            'user_pool_name': f'todo-lists-{env_name}',
            'identity_pool_name': f'todo_lists_{env_name}',
            'api_name': f'todo-lists-api-{env_name}',
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    @classmethod
    def from_context(cls, node: Node, env_name: str) -> 'TodoListsConfig':
        """
        Build a configuration from CDK context values.

        Args:
            node: Construct node to read context from (usually ``app.node``)
            env_name: Environment name (dev, staging, prod, etc.)
        """
        timeout = node.try_get_context('functionTimeoutSeconds')
        config = cls.for_environment(
            env_name,
            table_name=node.try_get_context('tableName'),
            function_name=node.try_get_context('functionName'),
            user_pool_name=node.try_get_context('userPoolName'),
            identity_pool_name=node.try_get_context('identityPoolName'),
            api_name=node.try_get_context('apiName'),
            ses_from_email=node.try_get_context('sesFromEmail'),
            ses_region=node.try_get_context('sesRegion'),
            callback_urls=_as_list(
                node.try_get_context('callbackUrls'), DEFAULT_CALLBACK_URLS
            ),
            cors_allow_origins=_as_list(
                node.try_get_context('corsAllowOrigins'), DEFAULT_CORS_ALLOW_ORIGINS
            ),
            function_timeout_seconds=int(timeout) if timeout is not None else None,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ConfigurationError: If any setting is unusable
        """
        errors = []

        for name in ('table_name', 'function_name', 'user_pool_name',
                     'identity_pool_name', 'api_name'):
            if is_placeholder(getattr(self, name)):
                errors.append(f'{name} is not configured')

        if self.ses_from_email is not None:
            if is_placeholder(self.ses_from_email):
                errors.append('ses_from_email is a placeholder')
            if is_placeholder(self.ses_region):
                errors.append('ses_region is required when ses_from_email is set')

        if not self.callback_urls or any(is_placeholder(url) for url in self.callback_urls):
            errors.append('callback_urls must contain at least one URL')

        if not self.cors_allow_origins:
            errors.append('cors_allow_origins must not be empty')

        if self.function_timeout_seconds <= 0:
            errors.append('function_timeout_seconds must be positive')

        if errors:
            raise ConfigurationError('; '.join(errors))
