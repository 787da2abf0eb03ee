"""
Tests for deployment configuration and placeholder detection.

A stack deployed with template placeholders (e.g. 'Your USER_POOL_ID') only
fails when the first request arrives, so placeholders must fail synth.
"""

import pytest
from aws_cdk import App, Aws
from hypothesis import given, settings, strategies as st

from todo_lists.config import (
    ConfigurationError,
    TodoListsConfig,
    is_placeholder,
    validate_function_environment,
)


class TestPlaceholderDetection:

    @pytest.mark.parametrize('value', [
        None,
        '',
        '   ',
        'Your USER_POOL_ID',
        ' Your REGION',
        'Your IDENTITY_POOL_ID',
        'Your e-mail',
        '<USER_POOL_ID>',
        'CHANGEME',
        'todo',
        'XXXX',
    ])
    def test_placeholders_are_detected(self, value):
        assert is_placeholder(value)

    @pytest.mark.parametrize('value', [
        'us-east-1_AbCdEfGhI',
        'us-east-1',
        'us-east-1:0f1e2d3c-4b5a-6978-8899-aabbccddeeff',
        'todo-lists-dev',
        'https://example.com/callback',
        'yourapp@example.com',
    ])
    def test_real_values_are_accepted(self, value):
        assert not is_placeholder(value)

    def test_unresolved_tokens_are_accepted(self):
        assert not is_placeholder(Aws.REGION)
        assert not is_placeholder(Aws.ACCOUNT_ID)

    @given(st.text(min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_your_prefix_is_always_a_placeholder(self, suffix):
        """Property: any value starting with the template word 'Your' is rejected."""
        assert is_placeholder('Your ' + suffix)

    @given(st.text(alphabet=' \t\n', max_size=10))
    def test_blank_values_are_placeholders(self, value):
        assert is_placeholder(value)


class TestFunctionEnvironment:

    def test_real_environment_passes(self):
        validate_function_environment({
            'USER_POOL_ID': 'us-east-1_AbCdEfGhI',
            'REGION': 'us-east-1',
            'IDENTITY_POOL_ID': 'us-east-1:0f1e2d3c-4b5a-6978-8899-aabbccddeeff',
        })

    def test_token_environment_passes(self):
        validate_function_environment({'REGION': Aws.REGION})

    def test_unmodified_template_values_fail(self):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_function_environment({
                'USER_POOL_ID': 'Your USER_POOL_ID',
                'REGION': ' Your REGION',
                'IDENTITY_POOL_ID': 'Your IDENTITY_POOL_ID',
            })

        message = str(exc_info.value)
        assert 'USER_POOL_ID' in message
        assert 'REGION' in message
        assert 'IDENTITY_POOL_ID' in message

    def test_single_placeholder_is_reported(self):
        with pytest.raises(ConfigurationError, match='USER_POOL_ID'):
            validate_function_environment({
                'USER_POOL_ID': 'Your USER_POOL_ID',
                'REGION': 'us-east-1',
            })

    def test_configuration_error_is_a_value_error(self):
        assert issubclass(ConfigurationError, ValueError)


class TestTodoListsConfig:

    def test_defaults_derive_from_environment_name(self):
        config = TodoListsConfig.for_environment('prod')

        assert config.table_name == 'todo-lists-prod'
        assert config.function_name == 'todo-lists-items-prod'
        assert config.user_pool_name == 'todo-lists-prod'
        assert config.api_name == 'todo-lists-api-prod'
        assert config.callback_urls == ['https://example.com/callback']
        assert config.cors_allow_origins == ['*']
        assert config.function_timeout_seconds == 10
        assert config.ses_from_email is None

    def test_from_context_reads_overrides(self):
        app = App(context={
            'tableName': 'tab_custom',
            'callbackUrls': 'https://a.example.com/cb, https://b.example.com/cb',
            'corsAllowOrigins': ['https://a.example.com'],
            'functionTimeoutSeconds': '15',
        })

        config = TodoListsConfig.from_context(app.node, 'dev')

        assert config.table_name == 'tab_custom'
        assert config.function_name == 'todo-lists-items-dev'
        assert config.callback_urls == ['https://a.example.com/cb', 'https://b.example.com/cb']
        assert config.cors_allow_origins == ['https://a.example.com']
        assert config.function_timeout_seconds == 15

    def test_placeholder_ses_sender_fails(self):
        app = App(context={'sesFromEmail': 'Your e-mail', 'sesRegion': 'Your REGION'})

        with pytest.raises(ConfigurationError, match='ses_from_email'):
            TodoListsConfig.from_context(app.node, 'dev')

    def test_ses_sender_requires_region(self):
        config = TodoListsConfig.for_environment('dev', ses_from_email='no-reply@example.com')

        with pytest.raises(ConfigurationError, match='ses_region'):
            config.validate()

    def test_empty_callback_urls_fail(self):
        config = TodoListsConfig.for_environment('dev', callback_urls=[])

        with pytest.raises(ConfigurationError, match='callback_urls'):
            config.validate()

    def test_non_positive_timeout_fails(self):
        config = TodoListsConfig.for_environment('dev', function_timeout_seconds=0)

        with pytest.raises(ConfigurationError, match='function_timeout_seconds'):
            config.validate()

    def test_placeholder_resource_name_fails(self):
        config = TodoListsConfig.for_environment('dev', table_name='Your table')

        with pytest.raises(ConfigurationError, match='table_name'):
            config.validate()
