"""
Todo lists service.

This module implements the business logic behind the /items routes:
- Lists and tasks stored in a single DynamoDB table under the caller's partition
- ULID generation for list and task ids
- Batch writes when a list is created or deleted together with its tasks
- Owner email lookup in the Cognito user pool

Item layout:
    List: PK=USER#{sub}, SK=LIST#{listId}
    Task: PK=USER#{sub}, SK=LIST#{listId}#TASK#{taskId}

Follows steering rules:
- Business logic in services, not handlers
- No global mutable state
- Explicit error handling
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from ulid import ULID

from todo_shared.errors import AuthenticationError, NotFoundError
from todo_shared.types import ItemStatus, Task, TaskInput, TodoList


LIST_ENTITY = 'LIST'
TASK_ENTITY = 'TASK'
DEFAULT_STATUS = 'pending'


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def _user_pk(user_id: str) -> str:
    return f'USER#{user_id}'


def _list_sk(list_id: str) -> str:
    return f'LIST#{list_id}'


def _task_sk(list_id: str, task_id: str) -> str:
    return f'LIST#{list_id}#TASK#{task_id}'


def _is_conditional_check_failure(error: ClientError) -> bool:
    return error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'


class TodoService:
    """
    Service class for todo list operations.

    All operations are scoped to the partition of the authenticated user,
    so one user can never read or modify another user's lists.
    """

    def __init__(self, config: Dict[str, str]):
        """
        Args:
            config: Dictionary containing:
                - table_name: Name of the DynamoDB table
                - user_pool_id: Cognito user pool id
                - region: AWS region of the table and the user pool
        """
        self.config = config
        self.dynamodb = boto3.resource('dynamodb', region_name=config['region'])
        self.table = self.dynamodb.Table(config['table_name'])
        self.cognito = boto3.client('cognito-idp', region_name=config['region'])

    def create_list(
        self,
        user_id: str,
        name: str,
        tasks: Optional[List[TaskInput]] = None,
        owner_email: Optional[str] = None
    ) -> TodoList:
        """
        Create a list and its initial tasks.

        Returns:
            The created list, including its tasks
        """
        now = _now()
        list_id = str(ULID())

        list_item = {
            'PK': _user_pk(user_id),
            'SK': _list_sk(list_id),
            'entity': LIST_ENTITY,
            'listId': list_id,
            'name': name.strip(),
            'status': DEFAULT_STATUS,
            'createdAt': now,
            'updatedAt': now,
        }
        if owner_email:
            list_item['ownerEmail'] = owner_email

        task_items = [self._new_task_item(user_id, list_id, task, now) for task in tasks or []]

        with self.table.batch_writer() as batch:
            batch.put_item(Item=list_item)
            for task_item in task_items:
                batch.put_item(Item=task_item)

        todo_list = self._to_list(list_item)
        todo_list['tasks'] = [self._to_task(item) for item in task_items]
        return todo_list

    def list_lists(self, user_id: str) -> List[TodoList]:
        """Return every list of the user, without tasks, oldest first."""
        items = self._query_all(
            KeyConditionExpression=Key('PK').eq(_user_pk(user_id))
            & Key('SK').begins_with('LIST#'),
            FilterExpression=Attr('entity').eq(LIST_ENTITY),
        )
        return [self._to_list(item) for item in items]

    def get_list(self, user_id: str, list_id: str) -> TodoList:
        """
        Return a list with its tasks.

        Raises:
            NotFoundError: If the list does not exist for this user
        """
        todo_list = self._to_list(self._get_list_item(user_id, list_id))
        todo_list['tasks'] = [self._to_task(item) for item in self._task_items(user_id, list_id)]
        return todo_list

    def update_list(
        self,
        user_id: str,
        list_id: str,
        name: Optional[str] = None,
        tasks: Optional[List[TaskInput]] = None
    ) -> TodoList:
        """
        Rename a list and/or append tasks to it.

        Raises:
            NotFoundError: If the list does not exist for this user
        """
        now = _now()

        # Any change to the list or its tasks bumps the list's updatedAt
        values = {'updatedAt': now}
        if name is not None:
            values['name'] = name.strip()
        self._update_item(
            key={'PK': _user_pk(user_id), 'SK': _list_sk(list_id)},
            values=values,
            not_found_message=f"List '{list_id}' not found",
        )

        if tasks:
            with self.table.batch_writer() as batch:
                for task in tasks:
                    batch.put_item(Item=self._new_task_item(user_id, list_id, task, now))

        return self.get_list(user_id, list_id)

    def update_list_status(self, user_id: str, list_id: str, status: ItemStatus) -> TodoList:
        """
        Set the status of a list.

        Raises:
            NotFoundError: If the list does not exist for this user
        """
        item = self._update_item(
            key={'PK': _user_pk(user_id), 'SK': _list_sk(list_id)},
            values={'status': status, 'updatedAt': _now()},
            not_found_message=f"List '{list_id}' not found",
        )
        return self._to_list(item)

    def delete_list(self, user_id: str, list_id: str) -> int:
        """
        Delete a list and all of its tasks.

        Returns:
            Number of deleted tasks

        Raises:
            NotFoundError: If the list does not exist for this user
        """
        self._get_list_item(user_id, list_id)
        task_items = self._task_items(user_id, list_id)

        with self.table.batch_writer() as batch:
            for item in task_items:
                batch.delete_item(Key={'PK': item['PK'], 'SK': item['SK']})
            batch.delete_item(Key={'PK': _user_pk(user_id), 'SK': _list_sk(list_id)})

        return len(task_items)

    def update_task_status(
        self,
        user_id: str,
        list_id: str,
        task_id: str,
        status: ItemStatus
    ) -> Task:
        """
        Set the status of a task.

        Raises:
            NotFoundError: If the task does not exist in this list
        """
        item = self._update_item(
            key={'PK': _user_pk(user_id), 'SK': _task_sk(list_id, task_id)},
            values={'status': status, 'updatedAt': _now()},
            not_found_message=f"Task '{task_id}' not found in list '{list_id}'",
        )
        return self._to_task(item)

    def delete_task(self, user_id: str, list_id: str, task_id: str) -> None:
        """
        Delete a single task.

        Raises:
            NotFoundError: If the task does not exist in this list
        """
        try:
            self.table.delete_item(
                Key={'PK': _user_pk(user_id), 'SK': _task_sk(list_id, task_id)},
                ConditionExpression=Attr('PK').exists(),
            )
        except ClientError as error:
            if _is_conditional_check_failure(error):
                raise NotFoundError(f"Task '{task_id}' not found in list '{list_id}'")
            raise

    def resolve_owner_email(self, claims: Dict[str, Any]) -> Optional[str]:
        """
        Return the caller's email address.

        ID tokens carry an email claim. Access tokens do not, so the user is
        looked up in the user pool by username.

        Raises:
            AuthenticationError: If the user no longer exists in the user pool
        """
        if claims.get('email'):
            return claims['email']

        username = claims.get('username') or claims.get('cognito:username') or claims.get('sub')
        try:
            response = self.cognito.admin_get_user(
                UserPoolId=self.config['user_pool_id'],
                Username=username,
            )
        except ClientError as error:
            if error.response.get('Error', {}).get('Code') == 'UserNotFoundException':
                raise AuthenticationError('Authenticated user does not exist')
            raise

        for attribute in response.get('UserAttributes', []):
            if attribute['Name'] == 'email':
                return attribute['Value']
        return None

    def _get_list_item(self, user_id: str, list_id: str) -> Dict[str, Any]:
        response = self.table.get_item(
            Key={'PK': _user_pk(user_id), 'SK': _list_sk(list_id)}
        )
        if 'Item' not in response:
            raise NotFoundError(f"List '{list_id}' not found")
        return response['Item']

    def _task_items(self, user_id: str, list_id: str) -> List[Dict[str, Any]]:
        return self._query_all(
            KeyConditionExpression=Key('PK').eq(_user_pk(user_id))
            & Key('SK').begins_with(f'{_list_sk(list_id)}#TASK#'),
        )

    def _query_all(self, **query_params: Any) -> List[Dict[str, Any]]:
        """Run a query and follow LastEvaluatedKey until every page is read."""
        items: List[Dict[str, Any]] = []
        while True:
            response = self.table.query(**query_params)
            items.extend(response.get('Items', []))
            if 'LastEvaluatedKey' not in response:
                return items
            query_params['ExclusiveStartKey'] = response['LastEvaluatedKey']

    def _update_item(
        self,
        key: Dict[str, str],
        values: Dict[str, Any],
        not_found_message: str
    ) -> Dict[str, Any]:
        """SET the given attributes on an existing item and return the new item."""
        names = {f'#{field}': field for field in values}
        expression_values = {f':{field}': value for field, value in values.items()}
        update_expression = 'SET ' + ', '.join(f'#{field} = :{field}' for field in values)

        try:
            response = self.table.update_item(
                Key=key,
                UpdateExpression=update_expression,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=expression_values,
                ConditionExpression=Attr('PK').exists(),
                ReturnValues='ALL_NEW',
            )
        except ClientError as error:
            if _is_conditional_check_failure(error):
                raise NotFoundError(not_found_message)
            raise

        return response['Attributes']

    @staticmethod
    def _new_task_item(
        user_id: str,
        list_id: str,
        task: TaskInput,
        now: str
    ) -> Dict[str, Any]:
        task_id = str(ULID())
        return {
            'PK': _user_pk(user_id),
            'SK': _task_sk(list_id, task_id),
            'entity': TASK_ENTITY,
            'listId': list_id,
            'taskId': task_id,
            'title': task['title'].strip(),
            'status': DEFAULT_STATUS,
            'createdAt': now,
            'updatedAt': now,
        }

    @staticmethod
    def _to_list(item: Dict[str, Any]) -> TodoList:
        todo_list: TodoList = {
            'listId': item['listId'],
            'name': item['name'],
            'status': item['status'],
            'ownerEmail': item.get('ownerEmail'),
            'createdAt': item['createdAt'],
            'updatedAt': item['updatedAt'],
        }
        return todo_list

    @staticmethod
    def _to_task(item: Dict[str, Any]) -> Task:
        return {
            'taskId': item['taskId'],
            'listId': item['listId'],
            'title': item['title'],
            'status': item['status'],
            'createdAt': item['createdAt'],
            'updatedAt': item['updatedAt'],
        }
