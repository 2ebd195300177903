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
Project level entry point: connection, firewalls and zones.
"""

from gcezone.common.google import GoogleBaseConnection, GoogleResponse
from gcezone.compute.config import DEFAULT_NETWORK
from gcezone.compute.resources import Firewall, Operation
from gcezone.compute.types import CreateResult
from gcezone.compute.zone import Zone

__all__ = [
    'API_VERSION',
    'ComputeResponse',
    'ComputeConnection',
    'Compute'
]

API_VERSION = 'v1'


class ComputeResponse(GoogleResponse):
    pass


class ComputeConnection(GoogleBaseConnection):
    """
    Connection class for the Compute Engine API.

    Relative actions are resolved under
    ``/compute/<version>/projects/<project>``.
    """
    host = 'www.googleapis.com'
    responseCls = ComputeResponse

    def __init__(self, token, project, api_version=API_VERSION, **kwargs):
        super(ComputeConnection, self).__init__(token, **kwargs)
        self.request_path = '/compute/%s/projects/%s' % (api_version, project)


class Compute(object):
    """
    Compute Engine access for one project.

    >>> compute = Compute('my-project', token='ya29....')
    >>> zone = compute.zone('us-central1-a')
    >>> vm, operation, response = zone.create_vm('web', {'os': 'debian',
    ...                                                  'http': True})

    :param  project: Project id. (required)
    :type   project: ``str``

    :param  token: OAuth2 access token, or a callable returning a fresh one.
    :type   token: ``str`` or ``callable``

    :keyword  api_version: Compute API version.
    :type     api_version: ``str``

    :keyword  host: API host, defaults to ``www.googleapis.com``.
    :type     host: ``str``

    :keyword  timeout: Request timeout in seconds.
    :type     timeout: ``int``

    :keyword  proxy_url: HTTP(s) proxy, overrides the proxy environment
                         variables.
    :type     proxy_url: ``str``

    :keyword  connection: Use this connection instead of creating one.
    :type     connection: :class:`ComputeConnection`
    """
    connectionCls = ComputeConnection
    name = 'Google Compute Engine'

    def __init__(self, project, token=None, api_version=API_VERSION,
                 host=None, timeout=60, proxy_url=None, connection=None):
        if not project:
            raise ValueError('Project name must be specified using '
                             '"project" keyword.')

        self.project = project
        self.api_version = api_version

        if connection is None:
            connection = self.connectionCls(token, project,
                                            api_version=api_version,
                                            host=host, timeout=timeout,
                                            proxy_url=proxy_url)
        connection.driver = self
        self.connection = connection

    def request(self, action, method='GET', params=None, data=None):
        """
        Send a request relative to the project and return the decoded JSON
        body.

        :param  action: Path below ``/projects/<project>``, or a full
                        ``https://`` URL as found in ``selfLink`` fields.
        :type   action: ``str``

        :rtype: ``dict``
        """
        if params:
            params = dict((k, v) for k, v in params.items() if v is not None)
        response = self.connection.request(action, params=params, data=data,
                                           method=method)
        return response.object

    def create_firewall(self, name, config):
        """
        Create a firewall rule.

        ``config`` keys:

        * ``protocols``: ``{'tcp': [80, '8000-8080'], 'icmp': True}``. A
          value of ``True`` allows every port of the protocol.
        * ``ranges``: source CIDR ranges (``sourceRanges``).
        * ``tags``: instance tags the rule applies to (``targetTags``).
        * ``network``: defaults to ``global/networks/default``.

        Any other key is sent unchanged.

        :rtype: :class:`CreateResult` of :class:`Firewall`
        """
        body = dict(config)
        body['name'] = name
        body.setdefault('network', DEFAULT_NETWORK)

        protocols = body.pop('protocols', None)
        if protocols is not None:
            allowed = []
            for protocol, ports in protocols.items():
                rule = {'IPProtocol': protocol}
                if ports is not True:
                    rule['ports'] = [str(port) for port in ports]
                allowed.append(rule)
            body['allowed'] = allowed

        if 'ranges' in body:
            body['sourceRanges'] = body.pop('ranges')

        if 'tags' in body:
            body['targetTags'] = body.pop('tags')

        response = self.request('/global/firewalls', method='POST', data=body)
        operation = self.operation(response['name'])
        operation.metadata = response
        return CreateResult(self.firewall(name), operation, response)

    def zone(self, name):
        return Zone(self, name)

    def firewall(self, name):
        return Firewall(self, name)

    def operation(self, name):
        return Operation(self, name, base_url='/global/operations')
