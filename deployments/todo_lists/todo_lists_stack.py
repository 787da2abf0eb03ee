"""
Todo Lists Service CDK Stack.

This module defines the main CDK stack for the Todo Lists Service.
The stack integrates all constructs (DynamoDB table, Cognito, Lambda
function, HTTP API) into a complete, deployable infrastructure.

Stack naming convention: <service>-<env>-stack (e.g., todo-lists-prod-stack)

Architecture:
- DynamoDB table for lists and tasks
- Cognito user pool, app client and identity pool
- 1 Lambda function serving every route
- HTTP API with a Cognito JWT authorizer on every route
- CloudFormation outputs for front-end configuration

Usage Example:
    from aws_cdk import App
    from todo_lists.config import TodoListsConfig
    from todo_lists.todo_lists_stack import TodoListsStack

    app = App()
    TodoListsStack(
        app,
        'todo-lists-dev-stack',
        config=TodoListsConfig.from_context(app.node, 'dev'),
    )
    app.synth()
"""

from aws_cdk import (
    Stack,
    CfnOutput,
    Tags,
)
from constructs import Construct

from .config import TodoListsConfig
from .table_construct import TodoListsTableConstruct
from .auth_construct import TodoListsAuthConstruct
from .lambda_constructs import TodoListsLambdaConstruct
from .api_construct import TodoListsApiConstruct


class TodoListsStack(Stack):
    """
    Main CDK stack for the Todo Lists Service.

    Attributes:
        config: Resolved deployment configuration
        table: DynamoDB table construct
        auth: Cognito construct
        lambdas: Lambda function construct
        api: HTTP API construct
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: TodoListsConfig,
        **kwargs
    ) -> None:
        """
        Initialize the Todo Lists stack.

        Args:
            scope: CDK app scope
            construct_id: Stack identifier (<service>-<env>-stack)
            config: Deployment configuration
            **kwargs: Additional stack properties (env, description, etc.)
        """
        super().__init__(scope, construct_id, **kwargs)

        self.config = config

        Tags.of(self).add('Service', 'todo-lists')
        Tags.of(self).add('Environment', config.env_name)
        Tags.of(self).add('ManagedBy', 'CDK')
        Tags.of(self).add('Domain', 'items')

        # 1. DynamoDB table
        self.table = TodoListsTableConstruct(
            self,
            'Table',
            table_name=config.table_name,
        )

        # 2. Cognito user pool, app client and identity pool
        self.auth = TodoListsAuthConstruct(
            self,
            'Auth',
            user_pool_name=config.user_pool_name,
            identity_pool_name=config.identity_pool_name,
            callback_urls=config.callback_urls,
            ses_from_email=config.ses_from_email,
            ses_region=config.ses_region,
        )

        # 3. Lambda function - depends on the table and the Cognito pools
        self.lambdas = TodoListsLambdaConstruct(
            self,
            'Lambdas',
            table=self.table.table,
            user_pool=self.auth.user_pool,
            identity_pool=self.auth.identity_pool,
            function_name=config.function_name,
            timeout_seconds=config.function_timeout_seconds,
        )

        # 4. HTTP API - wires the function to the routes behind the authorizer
        self.api = TodoListsApiConstruct(
            self,
            'Api',
            items_lambda=self.lambdas.items_lambda,
            user_pool=self.auth.user_pool,
            user_pool_client=self.auth.user_pool_client,
            api_name=config.api_name,
            cors_allow_origins=config.cors_allow_origins,
        )

        # 5. Authenticated identities may call this API and nothing else
        self.auth.grant_invoke_api(self.api.api)

        CfnOutput(
            self,
            'ApiEndpointUrl',
            value=self.api.api.api_endpoint,
            description='Todo Lists HTTP API endpoint URL',
            export_name=f'{construct_id}-api-url',
        )

        CfnOutput(
            self,
            'FunctionArn',
            value=self.lambdas.items_lambda.function_arn,
            description='Items Lambda function ARN',
            export_name=f'{construct_id}-function-arn',
        )

        CfnOutput(
            self,
            'FunctionRoleArn',
            value=self.lambdas.role.role_arn,
            description='Execution role of the items Lambda function',
            export_name=f'{construct_id}-function-role-arn',
        )

        CfnOutput(
            self,
            'IdentityPoolId',
            value=self.auth.identity_pool.ref,
            description='Cognito identity pool ID',
            export_name=f'{construct_id}-identity-pool-id',
        )

        CfnOutput(
            self,
            'UserPoolId',
            value=self.auth.user_pool.user_pool_id,
            description='Cognito user pool ID',
            export_name=f'{construct_id}-user-pool-id',
        )

        CfnOutput(
            self,
            'UserPoolClientId',
            value=self.auth.user_pool_client.user_pool_client_id,
            description='Cognito user pool client ID',
            export_name=f'{construct_id}-user-pool-client-id',
        )

        CfnOutput(
            self,
            'TableName',
            value=self.table.table.table_name,
            description='Todo lists DynamoDB table name',
            export_name=f'{construct_id}-table-name',
        )
