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
Zone scoped disk, instance and operation calls.
"""

import logging

from gcezone.common.types import ProviderError
from gcezone.compute.config import DiskConfig, VMConfig
from gcezone.compute.images import ImageLookup
from gcezone.compute.resources import ServiceObject, Disk, VM, Operation
from gcezone.compute.types import CreateResult, ListResult

__all__ = [
    'Zone',
    'ZoneList'
]

LOG = logging.getLogger(__name__)

HTTP_SERVER_FIREWALL = ('default-allow-http', 80, 'http-server')
HTTPS_SERVER_FIREWALL = ('default-allow-https', 443, 'https-server')


class ZoneList(object):
    """
    An iterator over every resource returned by a list call, following
    ``nextPageToken`` until the last page.

    >>> for vm in zone.iterate_vms().filter('status eq RUNNING').page(50):
    ...     vm.name

    :param  list_fn: A bound list method of :class:`Zone`, such as
                     ``zone.get_vms``.
    :param  query: Initial query parameters.
    """

    def __init__(self, list_fn, query=None):
        self.list_fn = list_fn
        self.params = dict(query or {})

    def __iter__(self):
        query = dict(self.params)
        while True:
            result = self.list_fn(query)
            for item in result.items:
                yield item
            if not result.next_query:
                break
            query = dict(self.params)
            query.update(result.next_query)

    def __repr__(self):
        return '<ZoneList list="%s" params="%s">' % (self.list_fn.__name__,
                                                     repr(self.params))

    def filter(self, expression):
        """
        Filter results server side.

        The expression has the form ``FIELD_NAME COMPARISON_STRING
        LITERAL_STRING``, where the comparison is ``eq`` or ``ne`` and the
        literal is an RE2 regular expression.

        :param  expression: Filter expression described above.
        :type   expression: ``str``

        :return: This :class:`ZoneList` instance
        :rtype:  :class:`ZoneList`
        """
        self.params['filter'] = expression
        return self

    def page(self, max_results=500):
        """
        Limit the number of results fetched by each request.

        :keyword  max_results: Maximum number of results per request.
                               Defaults to the API default of 500.
        :type     max_results: ``int``

        :return: This :class:`ZoneList` instance
        :rtype:  :class:`ZoneList`
        """
        self.params['maxResults'] = max_results
        return self


class Zone(ServiceObject):
    """
    A Compute Engine zone.

    Every call is relative to ``/zones/<name>`` of the owning project.

    :param  compute: The owning :class:`gcezone.compute.compute.Compute`.
    :param  name: Zone name, e.g. ``us-central1-a``.
    :keyword  image_lookup: Object with a ``get_latest(os_name)`` method used
                            to resolve ``os`` settings. Defaults to an
                            :class:`ImageLookup` bound to ``compute``.
    """

    def __init__(self, compute, name, image_lookup=None):
        super(Zone, self).__init__(compute, '/zones', name)
        self.compute = compute
        self.image_lookup = image_lookup or ImageLookup(compute)

    def create_disk(self, name, config=None):
        """
        Create a persistent disk.

        ``config`` may name a source ``image`` URI or an ``os`` such as
        ``ubuntu-14.04``. Other keys are sent in the request body as given,
        except with ``os``: the disk is then created from the resolved image
        alone and every other key is dropped.

        >>> disk, operation, response = zone.create_disk('data', {
        ...     'image': 'global/images/base', 'sizeGb': 20})
        >>> disk, operation, response = zone.create_disk('boot', {
        ...     'os': 'debian-8'})

        :param  name: Disk name.
        :type   name: ``str``

        :keyword  config: Disk settings.
        :type     config: ``dict``

        :return:  Disk handle, creation operation and API response.
        :rtype:   :class:`CreateResult`
        """
        disk_config = DiskConfig.from_dict(config)

        if disk_config.os:
            image = self.image_lookup.get_latest(disk_config.os)
            LOG.debug('Resolved os "%s" to image %s', disk_config.os,
                      image['selfLink'])
            return self.create_disk(name, {
                'name': name,
                'sourceImage': image['selfLink']
            })

        response = self.request('/disks', method='POST',
                                params=disk_config.to_query(),
                                data=disk_config.to_body(name))
        return CreateResult(self.disk(name), self._zone_operation(response),
                            response)

    def create_vm(self, name, config=None):
        """
        Create a virtual machine instance.

        Recognized settings are ``machineType`` (defaults to
        ``n1-standard-1``), ``tags`` (list or ``{'items': [...]}``), ``os``
        and the ``http`` / ``https`` flags. Setting a flag makes sure the
        matching ``default-allow-http(s)`` firewall rule exists, gives the
        instance an external NAT address and tags it ``http(s)-server``.

        :param  name: Instance name.
        :type   name: ``str``

        :keyword  config: Instance settings.
        :type     config: ``dict``

        :return:  VM handle, creation operation and API response.
        :rtype:   :class:`CreateResult`
        """
        vm_config = VMConfig.from_dict(config)

        if vm_config.os:
            image = self.image_lookup.get_latest(vm_config.os)
            LOG.debug('Resolved os "%s" to image %s', vm_config.os,
                      image['selfLink'])
            return self.create_vm(name, vm_config.with_boot_image(
                name, self.name, image['selfLink']))

        if vm_config.http:
            self._create_http_server_firewall()

        if vm_config.https:
            self._create_https_server_firewall()

        response = self.request('/instances', method='POST',
                                data=vm_config.to_body(name, self.name))
        return CreateResult(self.vm(name), self._zone_operation(response),
                            response)

    def get_disks(self, query=None):
        """
        List one page of disks.

        :keyword  query: Query parameters such as ``maxResults``, ``filter``
                         or the ``next_query`` of a previous page.
        :type     query: ``dict``

        :rtype: :class:`ListResult`
        """
        return self._list('/disks', self.disk, query)

    def get_operations(self, query=None):
        return self._list('/operations', self.operation, query)

    def get_vms(self, query=None):
        return self._list('/instances', self.vm, query)

    def iterate_disks(self, query=None):
        return ZoneList(self.get_disks, query)

    def iterate_operations(self, query=None):
        return ZoneList(self.get_operations, query)

    def iterate_vms(self, query=None):
        """
        Iterate over all instances of the zone, page after page.

        :rtype: :class:`ZoneList`
        """
        return ZoneList(self.get_vms, query)

    def disk(self, name):
        return Disk(self, name)

    def operation(self, name):
        return Operation(self, name)

    def vm(self, name):
        return VM(self, name)

    def _list(self, uri, to_handle, query):
        response = self.request(uri, params=query if query is not None
                                else {})

        items = []
        for item in response.get('items', []):
            handle = to_handle(item['name'])
            handle.metadata = item
            items.append(handle)

        next_query = None
        if response.get('nextPageToken'):
            next_query = {'pageToken': response['nextPageToken']}

        return ListResult(items, next_query, response)

    def _zone_operation(self, response):
        operation = self.operation(response['name'])
        operation.metadata = response
        return operation

    def _create_http_server_firewall(self):
        self._create_server_firewall(*HTTP_SERVER_FIREWALL)

    def _create_https_server_firewall(self):
        self._create_server_firewall(*HTTPS_SERVER_FIREWALL)

    def _create_server_firewall(self, name, port, tag):
        """
        Create a firewall rule allowing ``port`` to instances tagged ``tag``.

        A rule that already exists (HTTP 409) is left as it is.
        """
        config = {
            'protocols': {'tcp': [port]},
            'ranges': ['0.0.0.0/0'],
            'tags': [tag]
        }
        try:
            self.compute.create_firewall(name, config)
        except ProviderError as e:
            if e.http_code != 409:
                raise
            LOG.debug('Firewall "%s" already exists', name)
