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

import json
from http import client as httplib
from urllib import parse as urlparse

from gcezone.compute.compute import API_VERSION, Compute
from gcezone.test import MockHttp, GceZoneTestCase
from gcezone.test.file_fixtures import ComputeFileFixtures

PROJECT = 'project_name'
ZONE = 'us-central1-a'
TOKEN = 'ya29.test-token'


class ComputeTestCase(GceZoneTestCase):
    """
    Base class wiring :class:`Compute` to :class:`ComputeMockHttp`.
    """

    def setUp(self):
        super(ComputeTestCase, self).setUp()
        ComputeMockHttp.test = self
        ComputeMockHttp.type = None
        ComputeMockHttp.requests = []
        ComputeMockHttp.firewall_status = httplib.OK
        Compute.connectionCls.conn_class = ComputeMockHttp
        self.compute = Compute(PROJECT, token=TOKEN)
        self.zone = self.compute.zone(ZONE)

    def last_request(self, method=None):
        """Return ``(method, url, body, headers)`` of the last request."""
        reqs = [r for r in ComputeMockHttp.requests
                if method is None or r[0] == method]
        return reqs[-1]

    def last_body(self, method='POST'):
        return json.loads(self.last_request(method)[2])

    def last_query(self, method=None):
        url = self.last_request(method)[1]
        return dict(urlparse.parse_qsl(urlparse.urlparse(url).query))


class ComputeMockHttp(MockHttp):
    fixtures = ComputeFileFixtures('gce')
    json_hdr = {'content-type': 'application/json; charset=UTF-8'}
    requests = []  # type: list
    firewall_status = httplib.OK

    def _get_method_name(self, path):
        api_path = '/compute/%s' % API_VERSION
        project_path = '/projects/%s' % PROJECT
        path = path.replace(api_path, '')
        path = path.replace(project_path, '')
        # Other projects keep their name, e.g. _debian_cloud_global_images
        path = path.replace('/projects', '')
        return super(ComputeMockHttp, self)._get_method_name(path)

    def _get_request(self, method, url, body=None, headers=None):
        ComputeMockHttp.requests.append((method, url, body, headers))
        return super(ComputeMockHttp, self)._get_request(method, url, body,
                                                         headers)

    def _ok(self, fixture):
        body = self.fixtures.load(fixture)
        return (httplib.OK, body, self.json_hdr, httplib.responses[httplib.OK])

    def _zones_us_central1_a(self, method, url, body, headers):
        return self._ok('zones_us_central1_a.json')

    def _zones_us_central1_b(self, method, url, body, headers):
        body = self.fixtures.load('zones_us_central1_b_not_found.json')
        return (httplib.NOT_FOUND, body, self.json_hdr,
                httplib.responses[httplib.NOT_FOUND])

    # Nothing exists below the unknown zone either
    _zones_us_central1_b_disks = _zones_us_central1_b
    _zones_us_central1_b_instances = _zones_us_central1_b

    def _zones_us_central1_a_disks(self, method, url, body, headers):
        if method == 'POST':
            return self._ok('zones_us_central1_a_disks_post.json')
        return self._ok('zones_us_central1_a_disks.json')

    def _zones_us_central1_a_disks_lcdisk(self, method, url, body, headers):
        return self._ok('zones_us_central1_a_disks_lcdisk_delete.json')

    def _zones_us_central1_a_instances(self, method, url, body, headers):
        if method == 'POST':
            return self._ok('zones_us_central1_a_instances_post.json')
        if 'pageToken=instances-page-2' in url:
            return self._ok('zones_us_central1_a_instances_page_2.json')
        return self._ok('zones_us_central1_a_instances.json')

    def _zones_us_central1_a_instances_web_1(self, method, url, body,
                                             headers):
        if method == 'DELETE':
            return self._ok('zones_us_central1_a_instances_web_1_delete.json')
        return self._ok('zones_us_central1_a_instances_web_1.json')

    def _zones_us_central1_a_instances_web_1_start(self, method, url, body,
                                                   headers):
        return self._ok('zones_us_central1_a_instances_web_1_start.json')

    def _zones_us_central1_a_instances_web_1_stop(self, method, url, body,
                                                  headers):
        return self._ok('zones_us_central1_a_instances_web_1_stop.json')

    def _zones_us_central1_a_instances_web_1_reset(self, method, url, body,
                                                   headers):
        return self._ok('zones_us_central1_a_instances_web_1_reset.json')

    def _zones_us_central1_a_operations(self, method, url, body, headers):
        return self._ok('zones_us_central1_a_operations.json')

    def _global_firewalls(self, method, url, body, headers):
        if self.firewall_status == httplib.CONFLICT:
            body = self.fixtures.load('global_firewalls_post_exists.json')
        elif self.firewall_status == httplib.FORBIDDEN:
            body = self.fixtures.load('global_firewalls_post_forbidden.json')
        else:
            return self._ok('global_firewalls_post.json')
        return (self.firewall_status, body, self.json_hdr,
                httplib.responses[self.firewall_status])

    def _global_firewalls_default_allow_http(self, method, url, body,
                                             headers):
        return self._ok('global_firewalls_default_allow_http_delete.json')

    def _debian_cloud_global_images(self, method, url, body, headers):
        if 'pageToken=debian-page-2' in url:
            return self._ok('debian_cloud_global_images_page_2.json')
        return self._ok('debian_cloud_global_images.json')

    def _ubuntu_os_cloud_global_images(self, method, url, body, headers):
        return self._ok('ubuntu_os_cloud_global_images.json')
