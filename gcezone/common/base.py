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
Base Connection and Response classes.

A :class:`Connection` turns an action (a path) plus params and data into an
HTTP request on its ``conn_class`` transport, and wraps the result in its
``responseCls``. Subclasses customize the request through the hook methods.
"""

import json
from http import client as httplib
from urllib import parse as urlparse
from urllib.parse import urlencode

import requests

import gcezone

from gcezone.common.types import GceZoneError
from gcezone.common.types import MalformedResponseError
from gcezone.common.types import ProviderError
from gcezone.http import HttpConnection

__all__ = [
    'Response',
    'JsonResponse',
    'Connection',
    'lowercase_keys'
]

SUCCESS_CODES = (requests.codes.ok, requests.codes.created,
                 httplib.ACCEPTED)


def lowercase_keys(dictionary):
    return dict((k.lower(), v) for k, v in dictionary.items())


class Response(object):
    """
    Response of a :class:`Connection`.

    :ivar object: Parsed response body.
    :ivar body: Raw response text, stripped.
    """

    status = httplib.OK
    headers = {}  # type: dict
    body = None  # type: str
    object = None

    error = None  # Reason returned by the server.
    connection = None
    parse_zero_length_body = False

    def __init__(self, response, connection):
        """
        :param response: Response of the transport.
        :type response: :class:`requests.Response`

        :param connection: Connection that sent the request.
        :type connection: :class:`.Connection`
        """
        self.connection = connection
        self.headers = lowercase_keys(dict(response.headers))
        self.error = response.reason
        self.status = response.status_code
        self.request = response.request
        self.body = (response.text or '').strip()

        if not self.success():
            raise ProviderError(self.parse_error(), self.status,
                                driver=self.connection.driver,
                                response=self.body)

        self.object = self.parse_body()

    def parse_body(self):
        return self.body

    def parse_error(self):
        return self.body

    def success(self):
        """
        :rtype: ``bool``
        """
        return self.status in SUCCESS_CODES


class JsonResponse(Response):
    """
    Response whose body is a JSON document.
    """

    def parse_body(self):
        if len(self.body) == 0 and not self.parse_zero_length_body:
            return self.body

        try:
            return json.loads(self.body)
        except ValueError:
            raise MalformedResponseError('Failed to parse JSON',
                                         body=self.body,
                                         driver=self.connection.driver)

    parse_error = parse_body


class Connection(object):
    """
    A Base Connection class to derive from.

    :cvar conn_class: Transport class, replaced in tests and by
                      :func:`gcezone.enable_debug`.
    """
    conn_class = HttpConnection

    responseCls = Response
    connection = None
    host = '127.0.0.1'  # type: str
    port = 443
    timeout = None  # type: int
    secure = 1
    driver = None  # type: object
    action = None

    def __init__(self, secure=True, host=None, port=None, url=None,
                 timeout=None, proxy_url=None):
        self.secure = 1 if secure else 0
        self.ua = []  # type: list
        self.request_path = ''  # type: str

        if host:
            self.host = host

        if port is not None:
            self.port = port
        else:
            self.port = 443 if self.secure else 80

        if url:
            (self.host, self.port, self.secure,
             self.request_path) = self._tuple_from_url(url)

        self.timeout = timeout or self.timeout
        self.proxy_url = proxy_url

    def _tuple_from_url(self, url):
        """
        :rtype: ``tuple`` (``host``, ``port``, ``secure``, ``path``)
        """
        parsed = urlparse.urlparse(url)

        if parsed.scheme not in ('http', 'https'):
            raise GceZoneError('Invalid scheme: %s in url %s' %
                               (parsed.scheme, url))

        secure = 1 if parsed.scheme == 'https' else 0
        port = parsed.port or (443 if secure else 80)
        return (parsed.hostname, port, secure, parsed.path)

    def connect(self, host=None, port=None):
        """
        Create the transport for ``host`` and ``port``, defaulting to the
        connection's own.
        """
        kwargs = {'host': host or self.host,
                  'port': int(port or self.port),
                  'secure': self.secure}

        if self.timeout:
            kwargs['timeout'] = self.timeout

        if self.proxy_url:
            kwargs['proxy_url'] = self.proxy_url

        self.connection = self.conn_class(**kwargs)

    def _user_agent(self):
        return 'gcezone/%s (%s)%s' % (
            gcezone.__version__,
            getattr(self.driver, 'name', 'unknown'),
            "".join(" (%s)" % x for x in self.ua))

    def user_agent_append(self, token):
        """
        Append ``token`` to the User-Agent header, so that an application
        can identify its requests.

        :type token: ``str``
        """
        self.ua.append(token)

    def request(self, action, params=None, data=None, headers=None,
                method='GET'):
        """
        Send a request and parse its response.

        :type action: ``str``
        :param action: A path. It can carry a query string already, in which
            case ``params`` are appended to it.

        :type params: ``dict``
        :param params: Query parameters. Lists repeat the parameter.

        :type data: ``dict``
        :param data: Request body, passed through :meth:`encode_data`.

        :type headers: ``dict``
        :param headers: Extra request headers.

        :type method: ``str``
        :param method: An HTTP method such as "GET" or "POST".

        :rtype: instance of ``responseCls``
        """
        params = dict(params or {})
        headers = dict(headers or {})

        action = self.morph_action_hook(action)
        self.action = action
        self.method = method

        params = self.add_default_params(params)
        headers = self.add_default_headers(headers)
        headers['User-Agent'] = self._user_agent()
        headers['Accept-Encoding'] = 'gzip,deflate'

        if data is not None:
            data = self.encode_data(data)

        params, headers = self.pre_connect_hook(params, headers)

        url = action
        if params:
            separator = '&' if '?' in action else '?'
            url = action + separator + urlencode(params, doseq=True)

        if self.connection is None:
            self.connect()

        self.connection.request(method=method, url=url, body=data,
                                headers=headers)
        return self.responseCls(response=self.connection.getresponse(),
                                connection=self)

    def morph_action_hook(self, action):
        """
        Join ``action`` to ``request_path`` with exactly one slash between
        them and a leading slash.
        """
        url = urlparse.urljoin(self.request_path.strip('/') + '/',
                               action.lstrip('/'))
        return url if url.startswith('/') else '/' + url

    def add_default_params(self, params):
        return params

    def add_default_headers(self, headers):
        return headers

    def pre_connect_hook(self, params, headers):
        """
        Last chance to change ``params`` and ``headers`` before the request
        is sent.

        :rtype: ``tuple`` (``params``, ``headers``)
        """
        return params, headers

    def encode_data(self, data):
        return data
