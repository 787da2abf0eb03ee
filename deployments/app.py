#!/usr/bin/env python3
"""
CDK Application Entry Point.

Creates and configures the Todo Lists stack for deployment.

Usage:
    # Synthesize CloudFormation templates
    cdk synth

    # Deploy to development environment
    cdk deploy todo-lists-dev-stack

    # Send Cognito email through SES instead of the default sender
    cdk deploy -c sesFromEmail=no-reply@example.com -c sesRegion=us-east-1

Environment Configuration:
    Stacks can be configured with AWS account and region via environment variables:
    - CDK_DEFAULT_ACCOUNT: AWS account ID
    - CDK_DEFAULT_REGION: AWS region

    Resource names, callback URLs and CORS origins come from cdk.json context
    (see todo_lists/config.py for the keys).
"""

import os
from aws_cdk import App, Environment

from todo_lists.config import TodoListsConfig
from todo_lists.todo_lists_stack import TodoListsStack


app = App()

account = os.environ.get('CDK_DEFAULT_ACCOUNT')
region = os.environ.get('CDK_DEFAULT_REGION')

env = None
if account and region:
    env = Environment(account=account, region=region)

# Development Stack
dev_stack = TodoListsStack(
    app,
    'todo-lists-dev-stack',
    config=TodoListsConfig.from_context(app.node, 'dev'),
    env=env,
    description='Todo Lists Service - Development Environment',
)

# Production Stack
# Uncomment when ready to deploy to production
# prod_stack = TodoListsStack(
#     app,
#     'todo-lists-prod-stack',
#     config=TodoListsConfig.from_context(app.node, 'prod'),
#     env=env,
#     description='Todo Lists Service - Production Environment',
# )

app.synth()
