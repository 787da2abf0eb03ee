"""
Unit tests for the items Lambda handler.

Events use the HTTP API payload format 2.0 with JWT authorizer claims.
The module-level service is replaced by one bound to moto.
"""

import base64
import json

import pytest

import handler
from conftest import TEST_EMAIL, TEST_USER_ID


MISSING_ID = '01HZX3B7Q9T8K2M4N6P8R0S2V4'


def make_event(route_key, body=None, path_parameters=None, claims=None, base64_body=False):
    method, path = route_key.split(' ', 1)
    if claims is None:
        claims = {'sub': TEST_USER_ID, 'email': TEST_EMAIL}

    raw_body = None
    if body is not None:
        raw_body = body if isinstance(body, str) else json.dumps(body)
        if base64_body:
            raw_body = base64.b64encode(raw_body.encode('utf-8')).decode('ascii')

    return {
        'version': '2.0',
        'routeKey': route_key,
        'rawPath': path,
        'body': raw_body,
        'isBase64Encoded': base64_body,
        'pathParameters': path_parameters,
        'requestContext': {
            'requestId': 'req-123',
            'http': {'method': method, 'path': path},
            'authorizer': {'jwt': {'claims': claims}} if claims else {},
        },
    }


def call(route_key, **kwargs):
    response = handler.handler(make_event(route_key, **kwargs), None)
    body = json.loads(response['body']) if response['body'] else None
    return response['statusCode'], body


@pytest.fixture
def service(todo_service, monkeypatch):
    monkeypatch.setattr(handler, 'todo_service', todo_service)
    return todo_service


@pytest.fixture
def groceries(service):
    status, body = call('POST /items', body={
        'name': 'Groceries',
        'tasks': [{'title': 'Milk'}, {'title': 'Bread'}],
    })
    assert status == 201
    return body


class TestCreateList:

    def test_create_returns_201(self, groceries):
        assert groceries['name'] == 'Groceries'
        assert groceries['status'] == 'pending'
        assert groceries['ownerEmail'] == TEST_EMAIL
        assert len(groceries['tasks']) == 2

    def test_base64_body(self, service):
        status, body = call('POST /items', body={'name': 'Chores'}, base64_body=True)

        assert status == 201
        assert body['name'] == 'Chores'

    def test_base64_body_with_invalid_utf8(self, service):
        event = make_event('POST /items')
        event['body'] = base64.b64encode(b'{"name": "\xff\xfe"}').decode('ascii')
        event['isBase64Encoded'] = True

        response = handler.handler(event, None)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['code'] == 'VALIDATION_ERROR'

    def test_body_that_is_not_base64(self, service):
        event = make_event('POST /items')
        event['body'] = 'not*base64!'
        event['isBase64Encoded'] = True

        response = handler.handler(event, None)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['code'] == 'VALIDATION_ERROR'

    def test_owner_email_from_user_pool(self, service, aws_backend):
        claims = {'sub': TEST_USER_ID, 'username': aws_backend['username']}

        status, body = call('POST /items', body={'name': 'Chores'}, claims=claims)

        assert status == 201
        assert body['ownerEmail'] == TEST_EMAIL

    def test_invalid_json(self, service):
        status, body = call('POST /items', body='{"name": ')

        assert status == 400
        assert body['code'] == 'VALIDATION_ERROR'

    def test_missing_name(self, service):
        status, body = call('POST /items', body={'tasks': [{'title': 'Milk'}]})

        assert status == 400
        assert {'field': 'name', 'message': 'Field is required'} in body['details']['errors']

    def test_unexpected_field(self, service):
        status, body = call('POST /items', body={'name': 'Groceries', 'owner': TEST_USER_ID})

        assert status == 400
        assert any(error['field'] == 'owner' for error in body['details']['errors'])


class TestReadLists:

    def test_list_lists(self, groceries):
        status, body = call('GET /items')

        assert status == 200
        assert [item['listId'] for item in body['items']] == [groceries['listId']]

    def test_get_list(self, groceries):
        status, body = call('GET /items/{listID}', path_parameters={'listID': groceries['listId']})

        assert status == 200
        assert {task['title'] for task in body['tasks']} == {'Milk', 'Bread'}

    def test_lowercase_list_id(self, groceries):
        status, body = call(
            'GET /items/{listID}',
            path_parameters={'listID': groceries['listId'].lower()},
        )

        assert status == 200
        assert body['listId'] == groceries['listId']

    def test_get_missing_list(self, service):
        status, body = call('GET /items/{listID}', path_parameters={'listID': MISSING_ID})

        assert status == 404
        assert body['code'] == 'NOT_FOUND'

    def test_invalid_list_id(self, service):
        status, body = call('GET /items/{listID}', path_parameters={'listID': 'LIST#1'})

        assert status == 400
        assert body['details']['errors'] == [
            {'field': 'listID', 'message': 'Must be a valid identifier'}
        ]


class TestUpdates:

    def test_rename_list(self, groceries):
        status, body = call(
            'PATCH /items/{listID}',
            body={'name': 'Weekend groceries'},
            path_parameters={'listID': groceries['listId']},
        )

        assert status == 200
        assert body['name'] == 'Weekend groceries'
        assert len(body['tasks']) == 2

    def test_empty_update(self, groceries):
        status, _ = call(
            'PATCH /items/{listID}',
            body={},
            path_parameters={'listID': groceries['listId']},
        )

        assert status == 400

    def test_update_list_status(self, groceries):
        status, body = call(
            'PATCH /items/{listID}/status',
            body={'status': 'done'},
            path_parameters={'listID': groceries['listId']},
        )

        assert status == 200
        assert body['status'] == 'done'

    def test_invalid_status(self, groceries):
        status, body = call(
            'PATCH /items/{listID}/status',
            body={'status': 'finished'},
            path_parameters={'listID': groceries['listId']},
        )

        assert status == 400
        assert body['details']['errors'][0]['field'] == 'status'

    def test_update_task_status(self, groceries):
        task_id = groceries['tasks'][0]['taskId']

        status, body = call(
            'PATCH /items/{listID}/{taskID}/status',
            body={'status': 'done'},
            path_parameters={'listID': groceries['listId'], 'taskID': task_id},
        )

        assert status == 200
        assert body['taskId'] == task_id
        assert body['status'] == 'done'

    def test_update_missing_task_status(self, groceries):
        status, _ = call(
            'PATCH /items/{listID}/{taskID}/status',
            body={'status': 'done'},
            path_parameters={'listID': groceries['listId'], 'taskID': MISSING_ID},
        )

        assert status == 404


class TestDeletes:

    def test_delete_task(self, groceries):
        task_id = groceries['tasks'][0]['taskId']

        status, body = call(
            'DELETE /items/{listID}/{taskID}',
            path_parameters={'listID': groceries['listId'], 'taskID': task_id},
        )

        assert status == 204
        assert body is None
        _, todo_list = call('GET /items/{listID}', path_parameters={'listID': groceries['listId']})
        assert task_id not in {task['taskId'] for task in todo_list['tasks']}

    def test_no_content_type_without_body(self, groceries):
        event = make_event(
            'DELETE /items/{listID}',
            path_parameters={'listID': groceries['listId']},
        )

        response = handler.handler(event, None)

        assert response['statusCode'] == 204
        assert response['body'] == ''
        assert 'Content-Type' not in response.get('headers', {})

    def test_delete_list(self, groceries):
        status, _ = call('DELETE /items/{listID}', path_parameters={'listID': groceries['listId']})

        assert status == 204
        status, _ = call('GET /items/{listID}', path_parameters={'listID': groceries['listId']})
        assert status == 404

    def test_delete_missing_list(self, service):
        status, _ = call('DELETE /items/{listID}', path_parameters={'listID': MISSING_ID})

        assert status == 404


class TestErrorMapping:

    def test_missing_claims_is_unauthorized(self, service):
        status, body = call('GET /items', claims={})

        assert status == 401
        assert body['code'] == 'AUTHENTICATION_ERROR'

    def test_unknown_route(self, service):
        status, body = call('PUT /items')

        assert status == 404
        assert body['details']['routeKey'] == 'PUT /items'

    def test_unexpected_error_is_hidden(self, service, monkeypatch):
        def boom(user_id):
            raise RuntimeError('table exploded')

        monkeypatch.setattr(service, 'list_lists', boom)

        status, body = call('GET /items')

        assert status == 500
        assert body == {
            'code': 'INTERNAL_ERROR',
            'message': 'An unexpected error occurred',
            'details': {},
        }

    def test_users_cannot_see_each_other(self, groceries):
        other = {'sub': '9b2d4f60-1a3c-4e5f-8a7b-6c5d4e3f2a10', 'email': 'other@example.com'}

        status, body = call('GET /items', claims=other)
        assert status == 200
        assert body['items'] == []

        status, _ = call(
            'GET /items/{listID}',
            path_parameters={'listID': groceries['listId']},
            claims=other,
        )
        assert status == 404


class TestStartupConfiguration:

    def test_real_values_load(self, monkeypatch):
        monkeypatch.setenv('USER_POOL_ID', 'us-east-1_AbCdEfGhI')

        config = handler._load_config()

        assert config['user_pool_id'] == 'us-east-1_AbCdEfGhI'
        assert set(config) == {'table_name', 'user_pool_id', 'region', 'identity_pool_id'}

    def test_placeholder_values_fail(self, monkeypatch):
        monkeypatch.setenv('USER_POOL_ID', 'Your USER_POOL_ID')
        monkeypatch.setenv('REGION', ' Your REGION')

        with pytest.raises(ValueError, match='USER_POOL_ID, REGION'):
            handler._load_config()

    def test_missing_values_fail(self, monkeypatch):
        monkeypatch.delenv('IDENTITY_POOL_ID')

        with pytest.raises(ValueError, match='Missing required environment variables: IDENTITY_POOL_ID'):
            handler._load_config()
