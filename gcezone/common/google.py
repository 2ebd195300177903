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
Connection and Response classes for Google JSON APIs.

gcezone does not implement an OAuth2 flow. The connection is given an access
token, either as a string or as a callable returning a string. The callable is
invoked before every request, so it can hand out a refreshed token. A typical
source is ``gcloud auth print-access-token`` or the metadata server of a GCE
instance.
"""

import json
import sys
from http import client as httplib
from urllib import parse as urlparse

from gcezone.common.base import Connection, JsonResponse
from gcezone.common.types import GceZoneError, InvalidCredsError, \
    ProviderError

MISSING_PROJECT_HINT = ('. A missing project error may be an authentication '
                        'issue. Please ensure your auth credentials match '
                        'your project. ')


class GoogleAuthError(GceZoneError):
    """No usable access token."""

    def __repr__(self):
        return repr(self.value)


class GoogleBaseError(ProviderError):
    """
    An error reported by a Google API.

    :ivar code: The error ``reason`` (``notFound``, ``alreadyExists``...) or
                the operation error code, ``None`` if the body had none.
    """

    def __init__(self, value, http_code, code, driver=None, response=None):
        self.code = code
        super(GoogleBaseError, self).__init__(value, http_code, driver,
                                              response)


class InvalidRequestError(GoogleBaseError):
    pass


class JsonParseError(GoogleBaseError):
    pass


class ResourceNotFoundError(GoogleBaseError):
    def __init__(self, value, http_code, code, driver=None, response=None):
        # 'projects/<name>' alone usually means the token is for another
        # project
        if isinstance(value, dict):
            message = value.get('message', '')
            if message.count('/') == 1 and 'projects/' in message:
                value['message'] = message + MISSING_PROJECT_HINT
        super(ResourceNotFoundError, self).__init__(value, http_code, code,
                                                    driver, response)


class QuotaExceededError(GoogleBaseError):
    pass


class ResourceExistsError(GoogleBaseError):
    pass


class ResourceInUseError(GoogleBaseError):
    pass


# Errors returned by a request that failed with an error status
STATUS_ERRORS = {
    httplib.BAD_REQUEST: InvalidRequestError,
    httplib.NOT_FOUND: ResourceNotFoundError,
    httplib.CONFLICT: ResourceExistsError,
}


def _error_class_for_code(code):
    """
    Errors embedded in a 2xx body, as long running operations report them.
    """
    if code == 'QUOTA_EXCEEDED':
        return QuotaExceededError
    if code in ('RESOURCE_ALREADY_EXISTS', 'alreadyExists'):
        return ResourceExistsError
    if str(code).startswith('RESOURCE_IN_USE'):
        return ResourceInUseError
    return GoogleBaseError


class GoogleResponse(JsonResponse):
    """
    Every response counts as successful. :meth:`parse_body` raises the
    matching :class:`GoogleBaseError` instead.
    """

    def success(self):
        return True

    def _get_error(self, body):
        """
        Pick the code and message of the first error in ``body``.

        :rtype: ``tuple`` of (``str`` or ``None``, ``str``)
        """
        error = body['error']
        if error.get('errors'):
            error = error['errors'][0]

        if 'reason' in error:
            return error['reason'], error.get('message')
        if 'code' in error:
            return error['code'], error.get('message')
        return None, body.get('error_description', error)

    def parse_body(self):
        """
        Parse the JSON response body, or raise exceptions as appropriate.

        :return:  JSON dictionary
        :rtype:   ``dict``
        """
        if len(self.body) == 0 and not self.parse_zero_length_body:
            return {}

        try:
            body = json.loads(self.body)
        except ValueError:
            # An error status wins over the unparsable body
            body = None

        if self.status in (httplib.OK, httplib.CREATED, httplib.ACCEPTED):
            if body is None:
                raise JsonParseError(self.body, self.status, None,
                                     response=self.body)
            if 'error' not in body:
                return body
            code, message = self._get_error(body)
            raise _error_class_for_code(code)(message, self.status, code,
                                              response=body)

        if isinstance(body, dict) and 'error' in body:
            code, message = self._get_error(body)
        else:
            code, message = None, self.body
        response = self.body if body is None else body

        if self.status == httplib.UNAUTHORIZED:
            raise InvalidCredsError(message, response=response)
        error_class = STATUS_ERRORS.get(self.status, GoogleBaseError)
        raise error_class(message, self.status, code, response=response)


class GoogleBaseConnection(Connection):
    """Base connection class for interacting with Google APIs."""
    responseCls = GoogleResponse
    host = 'www.googleapis.com'

    def __init__(self, token, secure=True, host=None, port=None,
                 timeout=None, proxy_url=None):
        """
        :param  token: OAuth2 access token, or a callable returning one.
        :type   token: ``str`` or ``callable``
        """
        super(GoogleBaseConnection, self).__init__(
            secure=secure, host=host, port=port, timeout=timeout,
            proxy_url=proxy_url)
        self.token = token
        self.user_agent_append('Python %s/%s' % (
            '.'.join(str(part) for part in sys.version_info[:3]),
            sys.platform))

    @property
    def access_token(self):
        token = self.token() if callable(self.token) else self.token
        if not token:
            raise GoogleAuthError('No access token available')
        return token

    def add_default_headers(self, headers):
        headers['Content-Type'] = 'application/json'
        return headers

    def pre_connect_hook(self, params, headers):
        """
        Send the current access token as a bearer token.
        """
        headers['Authorization'] = 'Bearer ' + self.access_token
        return params, headers

    def encode_data(self, data):
        return json.dumps(data)

    def morph_action_hook(self, action):
        """
        Resolve ``action`` to a request path.

        The API refers to resources by full URL (``selfLink``); those keep
        only their path and query. Anything else is relative to
        ``request_path``.

        :param  action: Full resource URL or a path.
        :type   action: ``str``

        :rtype:   ``str``
        """
        if action.startswith('https://'):
            parts = urlparse.urlsplit(action)
            return urlparse.urlunsplit(('', '', parts.path, parts.query,
                                        parts.fragment))
        return self.request_path + action
