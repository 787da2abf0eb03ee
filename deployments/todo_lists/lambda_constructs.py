"""
Lambda function construct for the Todo Lists Service.

A single function serves every route of the HTTP API:
- Explicit environment variable configuration, validated at synth time
- Dedicated execution role with explicitly enumerated permissions
- Python 3.11 runtime, dependencies bundled from requirements.txt

Follows steering rules:
- Infrastructure definition only (no business logic)
- Explicit over implicit (all configurations declared)
- Least privilege IAM permissions

Execution role permissions:
1. DynamoDB item operations on the todo lists table only
2. cognito-idp:AdminGetUser on the user pool only
3. CloudWatch Logs writes under /aws/lambda/*
"""

from pathlib import Path

from aws_cdk import (
    aws_lambda as lambda_,
    aws_iam as iam,
    aws_dynamodb as dynamodb,
    aws_cognito as cognito,
    BundlingOptions,
    Duration,
    Stack,
)
from constructs import Construct

from .config import validate_function_environment


# lambda/todo_items relative to the repository root
HANDLER_ASSET_PATH = str(
    Path(__file__).resolve().parents[2] / 'lambda' / 'todo_items'
)

TABLE_ACTIONS = [
    'dynamodb:GetItem',
    'dynamodb:PutItem',
    'dynamodb:UpdateItem',
    'dynamodb:DeleteItem',
    'dynamodb:Scan',
    'dynamodb:Query',
    'dynamodb:BatchWriteItem',
]

USER_POOL_ACTIONS = [
    'cognito-idp:AdminGetUser',
]

LOG_ACTIONS = [
    'logs:CreateLogGroup',
    'logs:CreateLogStream',
    'logs:PutLogEvents',
]


class TodoListsLambdaConstruct(Construct):
    """
    Construct that creates the items Lambda function and its execution role.

    Attributes:
        role: Execution role assumed by the function
        items_lambda: Lambda function behind every /items route
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        table: dynamodb.Table,
        user_pool: cognito.UserPool,
        identity_pool: cognito.CfnIdentityPool,
        function_name: str,
        timeout_seconds: int = 10,
        asset_path: str = HANDLER_ASSET_PATH,
        **kwargs
    ) -> None:
        """
        Initialize the Lambda construct.

        Args:
            scope: CDK construct scope
            construct_id: Unique construct identifier
            table: DynamoDB todo lists table
            user_pool: Cognito user pool the function reads users from
            identity_pool: Cognito identity pool
            function_name: Lambda function name
            timeout_seconds: Invocation timeout
            asset_path: Directory with handler.py and requirements.txt

        Raises:
            ConfigurationError: If an environment variable is a placeholder
        """
        super().__init__(scope, construct_id, **kwargs)

        stack = Stack.of(self)

        self.role = iam.Role(
            self,
            'ExecutionRole',
            assumed_by=iam.ServicePrincipal('lambda.amazonaws.com'),
            description='Execution role for the todo lists items function',
        )

        # Scoped to the one table, never to all tables
        self.role.add_to_policy(
            iam.PolicyStatement(
                effect=iam.Effect.ALLOW,
                actions=TABLE_ACTIONS,
                resources=[table.table_arn],
            )
        )

        # Owner email lookup when the token carries no email claim
        self.role.add_to_policy(
            iam.PolicyStatement(
                effect=iam.Effect.ALLOW,
                actions=USER_POOL_ACTIONS,
                resources=[user_pool.user_pool_arn],
            )
        )

        self.role.add_to_policy(
            iam.PolicyStatement(
                effect=iam.Effect.ALLOW,
                actions=LOG_ACTIONS,
                resources=[
                    f'arn:aws:logs:{stack.region}:{stack.account}:log-group:/aws/lambda/*'
                ],
            )
        )

        environment = {
            'USER_POOL_ID': user_pool.user_pool_id,
            'REGION': stack.region,
            'IDENTITY_POOL_ID': identity_pool.ref,
            'TABLE_NAME': table.table_name,
        }
        validate_function_environment(environment)

        self.items_lambda = lambda_.Function(
            self,
            'ItemsLambda',
            function_name=function_name,
            description='Todo lists API - lists and tasks for the authenticated user',
            runtime=lambda_.Runtime.PYTHON_3_11,
            architecture=lambda_.Architecture.X86_64,
            code=lambda_.Code.from_asset(
                asset_path,
                bundling=BundlingOptions(
                    image=lambda_.Runtime.PYTHON_3_11.bundling_image,
                    command=[
                        'bash', '-c',
                        'pip install -r requirements.txt -t /asset-output && cp -au . /asset-output',
                    ],
                ),
            ),
            handler='handler.handler',
            role=self.role,
            timeout=Duration.seconds(timeout_seconds),
            environment=environment,
        )
