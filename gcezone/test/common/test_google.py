# Licensed to the Apache Software Foundation (ASF) under one or more
# contributor license agreements.  See the NOTICE file distributed with
# this work for additional information regarding copyright ownership.
# The ASF licenses this file to You under the Apache License, Version 2.0
# (the "License"); you may not use this file except in compliance with
# the License.  You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
Tests for Google Connection classes.
"""

import json
import sys
import unittest
from http import client as httplib

import mock

from gcezone.common.google import GoogleAuthError, GoogleBaseConnection, \
    GoogleBaseError, GoogleResponse, InvalidRequestError, JsonParseError, \
    QuotaExceededError, ResourceExistsError, ResourceInUseError, \
    ResourceNotFoundError
from gcezone.common.types import InvalidCredsError
from gcezone.test import MockHttp, GceZoneTestCase


def error_body(code, reason, message):
    return json.dumps({
        'error': {
            'code': code,
            'errors': [{
                'domain': 'global',
                'message': message,
                'reason': reason
            }],
            'message': message
        }
    })


class GoogleResponseMockHttp(MockHttp):
    json_hdr = {'content-type': 'application/json; charset=UTF-8'}

    def _reply(self, status, body):
        return (status, body, self.json_hdr, httplib.responses[status])

    def _ok(self, method, url, body, headers):
        return self._reply(httplib.OK, '{"name": "ok"}')

    def _empty(self, method, url, body, headers):
        return self._reply(httplib.NO_CONTENT, '')

    def _not_json(self, method, url, body, headers):
        return self._reply(httplib.OK, '<html></html>')

    def _not_found(self, method, url, body, headers):
        return self._reply(httplib.NOT_FOUND, error_body(
            404, 'notFound',
            "The resource 'projects/project_name' was not found"))

    def _not_found_html(self, method, url, body, headers):
        return self._reply(httplib.NOT_FOUND, 'Not Found')

    def _exists(self, method, url, body, headers):
        return self._reply(httplib.CONFLICT, error_body(
            409, 'alreadyExists',
            "The resource 'projects/p/global/firewalls/f' already exists"))

    def _exists_in_body(self, method, url, body, headers):
        return self._reply(httplib.OK, json.dumps({
            'error': {'errors': [{'code': 'RESOURCE_ALREADY_EXISTS',
                                  'message': 'exists'}]}}))

    def _quota(self, method, url, body, headers):
        return self._reply(httplib.OK, json.dumps({
            'error': {'errors': [{'code': 'QUOTA_EXCEEDED',
                                  'message': 'Quota exceeded'}]}}))

    def _in_use(self, method, url, body, headers):
        code = 'RESOURCE_IN_USE_BY_ANOTHER_RESOURCE'
        return self._reply(httplib.OK, json.dumps({
            'error': {'errors': [{'code': code, 'message': 'in use'}]}}))

    def _bad_request(self, method, url, body, headers):
        return self._reply(httplib.BAD_REQUEST, error_body(
            400, 'invalid', "Invalid value for field 'resource.name'"))

    def _unauthorized(self, method, url, body, headers):
        return self._reply(httplib.UNAUTHORIZED, error_body(
            401, 'authError', 'Invalid Credentials'))

    def _server_error(self, method, url, body, headers):
        return self._reply(httplib.INTERNAL_SERVER_ERROR, error_body(
            500, 'backendError', 'Backend Error'))


class GoogleTestCase(GceZoneTestCase):
    def setUp(self):
        super(GoogleTestCase, self).setUp()
        GoogleBaseConnection.conn_class = GoogleResponseMockHttp
        GoogleResponseMockHttp.test = self
        self.conn = GoogleBaseConnection('token')

    def tearDown(self):
        del GoogleBaseConnection.conn_class


class GoogleResponseTest(GoogleTestCase):
    """
    Tests for GoogleResponse status and error mapping
    """

    def test_ok(self):
        response = self.conn.request('/ok')
        self.assertTrue(isinstance(response, GoogleResponse))
        self.assertEqual(response.object, {'name': 'ok'})

    def test_empty_body(self):
        self.assertEqual(self.conn.request('/empty').object, {})

    def test_not_json(self):
        with self.assertRaises(JsonParseError) as ctx:
            self.conn.request('/not_json')
        self.assertEqual(ctx.exception.value, '<html></html>')
        self.assertEqual(ctx.exception.response, '<html></html>')

    def test_not_found(self):
        with self.assertRaises(ResourceNotFoundError) as ctx:
            self.conn.request('/not_found')
        self.assertEqual(ctx.exception.http_code, 404)
        self.assertEqual(ctx.exception.code, 'notFound')

    def test_not_found_not_json(self):
        with self.assertRaises(ResourceNotFoundError) as ctx:
            self.conn.request('/not_found_html')
        self.assertEqual(ctx.exception.value, 'Not Found')
        self.assertEqual(ctx.exception.response, 'Not Found')
        self.assertIsNone(ctx.exception.code)

    def test_missing_project_hint(self):
        error = ResourceNotFoundError(
            {'message': "The resource 'projects/project_name' was not found"},
            404, 'notFound')
        self.assertIn('authentication issue', error.value['message'])

    def test_conflict(self):
        with self.assertRaises(ResourceExistsError) as ctx:
            self.conn.request('/exists')
        self.assertEqual(ctx.exception.http_code, 409)
        self.assertEqual(ctx.exception.code, 'alreadyExists')
        self.assertIn('already exists', ctx.exception.value)

    def test_errors_in_successful_response(self):
        self.assertRaises(ResourceExistsError, self.conn.request,
                          '/exists_in_body')
        self.assertRaises(QuotaExceededError, self.conn.request, '/quota')
        self.assertRaises(ResourceInUseError, self.conn.request, '/in_use')

    def test_bad_request(self):
        with self.assertRaises(InvalidRequestError) as ctx:
            self.conn.request('/bad_request')
        self.assertEqual(ctx.exception.http_code, 400)
        self.assertEqual(ctx.exception.code, 'invalid')

    def test_unauthorized(self):
        with self.assertRaises(InvalidCredsError) as ctx:
            self.conn.request('/unauthorized')
        self.assertEqual(ctx.exception.http_code, 401)
        self.assertEqual(ctx.exception.value, 'Invalid Credentials')
        self.assertEqual(ctx.exception.response['error']['code'], 401)

    def test_other_error(self):
        with self.assertRaises(GoogleBaseError) as ctx:
            self.conn.request('/server_error')
        self.assertEqual(ctx.exception.http_code, 500)
        self.assertEqual(ctx.exception.code, 'backendError')
        self.assertEqual(ctx.exception.response['error']['message'],
                         'Backend Error')
        self.assertExecutedMethodCount(1)


class GoogleBaseConnectionTest(GoogleTestCase):
    """
    Tests for GoogleBaseConnection
    """

    def test_add_default_headers(self):
        new_headers = self.conn.add_default_headers({})
        self.assertEqual(new_headers, {'Content-Type': 'application/json'})

    def test_pre_connect_hook(self):
        new_params, new_headers = self.conn.pre_connect_hook({}, {})
        self.assertEqual(new_params, {})
        self.assertEqual(new_headers, {'Authorization': 'Bearer token'})

    def test_token_callable(self):
        token = mock.Mock(side_effect=['first', 'second'])
        self.conn.token = token
        self.assertEqual(self.conn.access_token, 'first')
        self.assertEqual(self.conn.access_token, 'second')

    def test_token_missing(self):
        self.conn.token = None
        self.assertRaises(GoogleAuthError, self.conn.pre_connect_hook, {}, {})
        self.conn.token = lambda: ''
        self.assertRaises(GoogleAuthError, self.conn.pre_connect_hook, {}, {})

    def test_encode_data(self):
        data = {'key': 'value'}
        json_data = '{"key": "value"}'
        encoded_data = self.conn.encode_data(data)
        self.assertEqual(encoded_data, json_data)

    def test_user_agent(self):
        self.assertIn('(Python %s.%s.' % sys.version_info[:2],
                      self.conn._user_agent())

    def test_morph_action_hook(self):
        self.conn.request_path = '/compute/apiver/project/project-name'
        action1 = ('https://www.googleapis.com/compute/apiver/project'
                   '/project-name/instances')
        action2 = '/instances'
        expected_request = '/compute/apiver/project/project-name/instances'
        request1 = self.conn.morph_action_hook(action1)
        request2 = self.conn.morph_action_hook(action2)
        self.assertEqual(request1, expected_request)
        self.assertEqual(request2, expected_request)

    def test_morph_action_hook_keeps_query(self):
        action = 'https://www.googleapis.com/compute/v1/images?pageToken=a'
        self.assertEqual(self.conn.morph_action_hook(action),
                         '/compute/v1/images?pageToken=a')


if __name__ == '__main__':
    sys.exit(unittest.main())
