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
Handles for remote Compute Engine resources.

A handle is a name plus a parent. It performs no I/O when created. The
``metadata`` attribute holds the last API representation seen for the
resource, either from the list call that produced the handle or from
:meth:`ServiceObject.get_metadata`.
"""

from gcezone.common.google import ResourceNotFoundError

__all__ = [
    'ServiceObject',
    'Disk',
    'VM',
    'Operation',
    'Firewall'
]


class ServiceObject(object):
    """
    Base class for a resource addressed as ``<base_url>/<name>`` below its
    parent.

    :param  parent: Object exposing ``request(uri, method, params, data)``.
                    Usually a :class:`Zone` or :class:`Compute`.
    :param  base_url: Collection path, e.g. ``/disks``.
    :param  name: Resource name.
    """

    def __init__(self, parent, base_url, name):
        self.parent = parent
        self.base_url = base_url
        self.name = name
        self.metadata = {}  # type: dict

    @property
    def uri(self):
        return '%s/%s' % (self.base_url, self.name)

    def request(self, uri='', method='GET', params=None, data=None):
        return self.parent.request(self.uri + uri, method=method,
                                   params=params, data=data)

    def get_metadata(self):
        """
        Fetch the resource and cache it in ``metadata``.

        :rtype: ``dict``
        """
        response = self.request()
        self.metadata = response
        return response

    def exists(self):
        try:
            self.get_metadata()
        except ResourceNotFoundError:
            return False
        return True

    def _to_operation(self, response):
        operation = self.parent.operation(response['name'])
        operation.metadata = response
        return operation

    def __eq__(self, other):
        return (self.__class__ is other.__class__ and
                self.parent is other.parent and
                self.name == other.name)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.__class__, id(self.parent), self.name))

    def __repr__(self):
        return '<%s name="%s">' % (self.__class__.__name__, self.name)


class Disk(ServiceObject):
    """A persistent disk in a zone."""

    def __init__(self, zone, name):
        super(Disk, self).__init__(zone, '/disks', name)
        self.zone = zone

    def delete(self):
        """
        Delete the disk.

        :return:  Operation tracking the deletion.
        :rtype:   :class:`Operation`
        """
        return self._to_operation(self.request(method='DELETE'))


class VM(ServiceObject):
    """A virtual machine instance in a zone."""

    def __init__(self, zone, name):
        super(VM, self).__init__(zone, '/instances', name)
        self.zone = zone

    def delete(self):
        return self._to_operation(self.request(method='DELETE'))

    def start(self):
        """Start a VM in TERMINATED state."""
        return self._to_operation(self.request('/start', method='POST'))

    def stop(self):
        return self._to_operation(self.request('/stop', method='POST'))

    def reset(self):
        """Hard reset, as pressing the reset button of a physical machine."""
        return self._to_operation(self.request('/reset', method='POST'))


class Operation(ServiceObject):
    """
    An asynchronous API operation.

    Zone operations have a :class:`Zone` parent and live under
    ``/zones/<zone>/operations``. Global ones have a :class:`Compute` parent
    and ``/global/operations`` as ``base_url``.
    """

    def __init__(self, parent, name, base_url='/operations'):
        super(Operation, self).__init__(parent, base_url, name)


class Firewall(ServiceObject):
    """A firewall rule of the project's networks."""

    def __init__(self, compute, name):
        super(Firewall, self).__init__(compute, '/global/firewalls', name)
        self.compute = compute

    def delete(self):
        return self._to_operation(self.request(method='DELETE'))
