"""
Shared fixtures for the Todo Lists Service tests.

Infrastructure tests synthesize the stack with asset bundling disabled, so
no Docker daemon is needed. Handler and service tests run against moto.
"""

import os
import sys
from pathlib import Path

import boto3
import pytest
from moto import mock_aws

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / 'deployments'))
sys.path.insert(0, str(ROOT / 'lambda' / 'todo_items'))

# Fake credentials and handler configuration, set before any handler import
os.environ.setdefault('AWS_ACCESS_KEY_ID', 'testing')
os.environ.setdefault('AWS_SECRET_ACCESS_KEY', 'testing')
os.environ.setdefault('AWS_SECURITY_TOKEN', 'testing')
os.environ.setdefault('AWS_SESSION_TOKEN', 'testing')
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')
os.environ.setdefault('TABLE_NAME', 'todo-lists-test')
os.environ.setdefault('USER_POOL_ID', 'us-east-1_testpool')
os.environ.setdefault('REGION', 'us-east-1')
os.environ.setdefault('IDENTITY_POOL_ID', 'us-east-1:00000000-0000-0000-0000-000000000000')

from aws_cdk import App  # noqa: E402
from aws_cdk.assertions import Template  # noqa: E402

from todo_lists.config import TodoListsConfig  # noqa: E402
from todo_lists.todo_lists_stack import TodoListsStack  # noqa: E402

TEST_REGION = 'us-east-1'
TEST_USER_ID = '3f1c9a52-7d1e-4a6b-9a1e-2b8c4d6e8f10'
TEST_EMAIL = 'user@example.com'


def synth_stack(**context):
    """Synthesize a dev stack with the given CDK context, bundling disabled."""
    app = App(context={'aws:cdk:bundling-stacks': [], **context})
    stack = TodoListsStack(
        app,
        'todo-lists-test-stack',
        config=TodoListsConfig.from_context(app.node, 'test'),
    )
    return stack, Template.from_stack(stack)


@pytest.fixture(scope='session')
def synthesized():
    """Stack and template synthesized once for the whole session."""
    return synth_stack()


@pytest.fixture(scope='session')
def stack(synthesized):
    return synthesized[0]


@pytest.fixture(scope='session')
def template(synthesized):
    return synthesized[1]


@pytest.fixture
def aws_backend():
    """Moto DynamoDB table and Cognito user pool with one confirmed user."""
    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name=TEST_REGION)
        dynamodb.create_table(
            TableName=os.environ['TABLE_NAME'],
            KeySchema=[
                {'AttributeName': 'PK', 'KeyType': 'HASH'},
                {'AttributeName': 'SK', 'KeyType': 'RANGE'},
            ],
            AttributeDefinitions=[
                {'AttributeName': 'PK', 'AttributeType': 'S'},
                {'AttributeName': 'SK', 'AttributeType': 'S'},
            ],
            BillingMode='PAY_PER_REQUEST',
        )

        cognito = boto3.client('cognito-idp', region_name=TEST_REGION)
        user_pool_id = cognito.create_user_pool(PoolName='todo-lists-test')['UserPool']['Id']
        user = cognito.admin_create_user(
            UserPoolId=user_pool_id,
            Username='todo-user',
            UserAttributes=[{'Name': 'email', 'Value': TEST_EMAIL}],
        )['User']

        yield {
            'table_name': os.environ['TABLE_NAME'],
            'user_pool_id': user_pool_id,
            'username': user['Username'],
            'region': TEST_REGION,
        }


@pytest.fixture
def todo_service(aws_backend):
    from service import TodoService

    return TodoService({
        'table_name': aws_backend['table_name'],
        'user_pool_id': aws_backend['user_pool_id'],
        'region': aws_backend['region'],
    })
