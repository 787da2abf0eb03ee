"""
HTTP API construct for the Todo Lists Service.

This module defines the API Gateway HTTP API for the Todo Lists Service:
- Cognito JWT authorizer on every route (no public routes)
- A single Lambda proxy integration shared by all routes
- CORS preflight configuration

WARNING: CORS defaults to any origin, header and method. Restrict
corsAllowOrigins in cdk.json for anything other than a demo deployment.

API Endpoints:
1. POST /items - Create a list
2. GET /items - List the caller's lists
3. GET /items/{listID} - Get a list with its tasks
4. PATCH /items/{listID} - Rename a list or append tasks
5. PATCH /items/{listID}/status - Update list status
6. PATCH /items/{listID}/{taskID}/status - Update task status
7. DELETE /items/{listID} - Delete a list and its tasks
8. DELETE /items/{listID}/{taskID} - Delete a task
"""

from typing import List, Tuple

from aws_cdk import (
    aws_apigatewayv2 as apigwv2,
    aws_apigatewayv2_authorizers as authorizers,
    aws_apigatewayv2_integrations as integrations,
    aws_cognito as cognito,
    aws_lambda as lambda_,
    Duration,
)
from constructs import Construct


ROUTES: List[Tuple[str, apigwv2.HttpMethod]] = [
    ('/items', apigwv2.HttpMethod.POST),
    ('/items', apigwv2.HttpMethod.GET),
    ('/items/{listID}', apigwv2.HttpMethod.GET),
    ('/items/{listID}', apigwv2.HttpMethod.PATCH),
    ('/items/{listID}/status', apigwv2.HttpMethod.PATCH),
    ('/items/{listID}/{taskID}/status', apigwv2.HttpMethod.PATCH),
    ('/items/{listID}', apigwv2.HttpMethod.DELETE),
    ('/items/{listID}/{taskID}', apigwv2.HttpMethod.DELETE),
]


class TodoListsApiConstruct(Construct):
    """
    Construct that creates the HTTP API for the Todo Lists Service.

    Every route in ROUTES is wired to the items Lambda function behind the
    same Cognito user pool authorizer.

    Attributes:
        api: The HTTP API instance
        authorizer: JWT authorizer bound to the user pool client
        routes: Declared routes
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        items_lambda: lambda_.IFunction,
        user_pool: cognito.IUserPool,
        user_pool_client: cognito.IUserPoolClient,
        api_name: str,
        cors_allow_origins: List[str],
        **kwargs
    ) -> None:
        """
        Initialize the HTTP API construct.

        Args:
            scope: CDK construct scope
            construct_id: Unique construct identifier
            items_lambda: Lambda function serving every route
            user_pool: Cognito user pool that issues the tokens
            user_pool_client: App client whose tokens are accepted
            api_name: HTTP API name
            cors_allow_origins: Origins allowed by the CORS preflight
        """
        super().__init__(scope, construct_id, **kwargs)

        self.api = apigwv2.HttpApi(
            self,
            'ItemsHttpApi',
            api_name=api_name,
            description='Todo Lists Service HTTP API',
            cors_preflight=apigwv2.CorsPreflightOptions(
                allow_headers=['*'],
                allow_methods=[apigwv2.CorsHttpMethod.ANY],
                allow_origins=cors_allow_origins,
                max_age=Duration.days(10),
            ),
        )

        self.authorizer = authorizers.HttpUserPoolAuthorizer(
            'UserPoolAuthorizer',
            user_pool,
            user_pool_clients=[user_pool_client],
        )

        integration = integrations.HttpLambdaIntegration(
            'ItemsIntegration',
            items_lambda,
        )

        self.routes: List[apigwv2.HttpRoute] = []
        for path, method in ROUTES:
            self.routes.extend(
                self.api.add_routes(
                    path=path,
                    methods=[method],
                    integration=integration,
                    authorizer=self.authorizer,
                )
            )
