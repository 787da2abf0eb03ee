"""
DynamoDB table construct for the Todo Lists Service.

Architecture:
- Single-table design using PK/SK patterns
- No GSIs or LSIs - all access patterns via PK/SK combinations
- On-demand billing mode for variable workloads

Access Patterns:
1. Lists of a user: PK=USER#{sub}, SK begins_with LIST#
2. List with its tasks: PK=USER#{sub}, SK begins_with LIST#{listId}
3. Single task: PK=USER#{sub}, SK=LIST#{listId}#TASK#{taskId}
"""

from aws_cdk import (
    aws_dynamodb as dynamodb,
    RemovalPolicy,
)
from constructs import Construct


class TodoListsTableConstruct(Construct):
    """
    Construct that creates the DynamoDB table for the Todo Lists Service.

    Only the key shape is declared. Record attributes are owned by the
    request handler.

    Attributes:
        table: The todo lists DynamoDB table
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        table_name: str,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.table = dynamodb.Table(
            self,
            "ItemsTable",
            table_name=table_name,
            # Primary key configuration
            partition_key=dynamodb.Attribute(
                name="PK",
                type=dynamodb.AttributeType.STRING
            ),
            sort_key=dynamodb.Attribute(
                name="SK",
                type=dynamodb.AttributeType.STRING
            ),
            # Billing configuration
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            # Data protection
            point_in_time_recovery=True,
            # Deletion policy - retain for production safety
            removal_policy=RemovalPolicy.RETAIN,
        )
