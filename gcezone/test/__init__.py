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

from urllib import parse as urlparse
import unittest

import requests_mock

from gcezone.http import HttpConnection


class GceZoneTestCase(unittest.TestCase):
    """
    Test case that records which URLs and mock methods a
    :class:`MockHttp` served.
    """

    def setUp(self):
        self._visited_urls = []
        self._executed_mock_methods = []

    def _add_visited_url(self, url):
        self._visited_urls.append(url)

    def _add_executed_mock_method(self, method_name):
        self._executed_mock_methods.append(method_name)

    def assertExecutedMethodCount(self, expected):
        actual = len(self._executed_mock_methods)
        self.assertEqual(actual, expected,
                         'expected %d, but %d mock methods were executed'
                         % (expected, actual))


class MockHttp(HttpConnection):
    """
    Transport answering from methods of the subclass instead of the network.

    The method is named after the request path, with slashes, dots and
    dashes replaced by underscores, plus ``_<type>`` when :attr:`type` is
    set. ``GET /zones/us-central1-a`` is served by
    ``_zones_us_central1_a``. Each method returns a tuple of:

        (int status, str body, dict headers, str reason)
    """
    type = None
    test = None  # TestCase instance which is using this mock

    def _get_request(self, method, url, body=None, headers=None):
        path = urlparse.urlparse(url).path.rstrip('/')
        meth_name = self._get_method_name(path)
        meth = getattr(self, meth_name)

        if isinstance(self.test, GceZoneTestCase):
            self.test._add_visited_url(url=url)
            self.test._add_executed_mock_method(method_name=meth_name)
        return meth(method, url, body, headers)

    def _get_method_name(self, path):
        meth_name = path.replace('/', '_').replace('.', '_') \
            .replace('-', '_')

        if self.type:
            meth_name = '%s_%s' % (meth_name, self.type)

        return meth_name or 'root'

    def request(self, method, url, body=None, headers=None, stream=False):
        headers = self._normalize_headers(headers)
        status, r_body, r_headers, reason = self._get_request(
            method, url, body, headers)

        with requests_mock.mock() as m:
            # Any query string matches the path
            m.register_uri(method, url.split('?')[0], text=r_body or '',
                           reason=reason, headers=r_headers,
                           status_code=status)
            try:
                super(MockHttp, self).request(
                    method=method, url=url, body=body, headers=headers,
                    stream=stream)
            except requests_mock.exceptions.NoMockAddress as e:
                raise AttributeError('Failed to mock out URL %s - %s' %
                                     (url, e.request.url))
