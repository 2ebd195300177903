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
Configuration objects accepted by :class:`gcezone.compute.zone.Zone`.

Callers pass plain ``dict`` configurations. They are parsed once into the
classes below, which know the recognized fields and produce the JSON body
sent to the API. The caller's mapping is never modified.
"""

import copy

__all__ = [
    'DEFAULT_MACHINE_TYPE',
    'DEFAULT_NETWORK',
    'NAT_ACCESS_CONFIG',
    'TagList',
    'DiskConfig',
    'VMConfig'
]

DEFAULT_MACHINE_TYPE = 'n1-standard-1'
DEFAULT_NETWORK = 'global/networks/default'
NAT_ACCESS_CONFIG = 'ONE_TO_ONE_NAT'


class TagList(object):
    """
    Instance tags.

    The API expects ``{'items': [...]}``. Callers may also give a plain list
    of tag names. Keys other than ``items`` in the wrapped form (such as a
    ``fingerprint``) are kept.
    """

    def __init__(self, items=None, extra=None):
        self.items = list(items or [])  # type: list
        self.extra = dict(extra or {})  # type: dict

    @classmethod
    def from_value(cls, value):
        """
        :param  value: ``None``, a tag name, a sequence of tag names or a
                       mapping shaped as ``{'items': [...]}``.
        :type   value: ``str``, ``list``, ``dict`` or :class:`TagList`

        :rtype: :class:`TagList`
        """
        if value is None:
            return cls()
        if isinstance(value, TagList):
            return cls(value.items, value.extra)
        if isinstance(value, dict):
            extra = dict((k, v) for k, v in value.items() if k != 'items')
            return cls(value.get('items'), extra)
        if isinstance(value, str):
            return cls([value])
        return cls(value)

    def add(self, tag):
        if tag not in self.items:
            self.items.append(tag)

    def to_body(self):
        body = copy.deepcopy(self.extra)
        body['items'] = list(self.items)
        return body

    def __repr__(self):
        return '<TagList items=%r>' % (self.items,)


class DiskConfig(object):
    """
    Disk creation settings.

    ``image`` is a source image URI sent as the ``sourceImage`` query
    parameter. ``os`` is an operating system name that is resolved to the
    newest matching image first, and takes precedence over ``image``.
    """

    def __init__(self, image=None, os=None, extra=None):
        self.image = image
        self.os = os
        self.extra = extra or {}

    @classmethod
    def from_dict(cls, config):
        config = dict(config or {})
        image = config.pop('image', None)
        os_name = config.pop('os', None)
        return cls(image=image, os=os_name, extra=config)

    def to_query(self):
        if self.image is None:
            return {}
        return {'sourceImage': self.image}

    def to_body(self, name):
        body = {'name': name}
        body.update(copy.deepcopy(self.extra))
        return body


class VMConfig(object):
    """
    Instance creation settings.

    :ivar machine_type: Short machine type name (``f1-micro``) or a path
                        already containing ``/``.
    :ivar tags: :class:`TagList` or ``None``.
    :ivar http: Open port 80 through the ``default-allow-http`` firewall.
    :ivar https: Open port 443 through the ``default-allow-https`` firewall.
    :ivar os: Operating system name resolved to a boot disk image.
    :ivar extra: Any other field, sent to the API unchanged.
    """

    def __init__(self, machine_type=None, tags=None, http=False, https=False,
                 os=None, extra=None):
        self.machine_type = machine_type or DEFAULT_MACHINE_TYPE
        self.tags = tags
        self.http = bool(http)
        self.https = bool(https)
        self.os = os
        self.extra = extra or {}

    @classmethod
    def from_dict(cls, config):
        config = dict(config or {})
        tags = config.pop('tags', None)
        return cls(machine_type=config.pop('machineType', None),
                   tags=TagList.from_value(tags) if tags is not None else None,
                   http=config.pop('http', False),
                   https=config.pop('https', False),
                   os=config.pop('os', None),
                   extra=config)

    def machine_type_url(self, zone_name):
        if '/' in self.machine_type:
            return self.machine_type
        return 'zones/%s/machineTypes/%s' % (zone_name, self.machine_type)

    def _base_body(self, name, zone_name):
        body = {
            'name': name,
            'machineType': self.machine_type_url(zone_name),
            'networkInterfaces': [{'network': DEFAULT_NETWORK}]
        }
        body.update(copy.deepcopy(self.extra))
        if not body['networkInterfaces']:
            body['networkInterfaces'] = [{'network': DEFAULT_NETWORK}]
        if self.tags is not None:
            body['tags'] = self.tags.to_body()
        return body

    def with_boot_image(self, name, zone_name, source_image):
        """
        Return the configuration to create the instance with once ``os`` has
        been resolved to ``source_image``.

        :rtype: ``dict``
        """
        config = self._base_body(name, zone_name)
        disks = config.get('disks') or []
        config['disks'] = disks + [{
            'autoDelete': True,
            'boot': True,
            'initializeParams': {'sourceImage': source_image}
        }]
        if self.http:
            config['http'] = True
        if self.https:
            config['https'] = True
        return config

    def to_body(self, name, zone_name):
        """
        Build the ``POST /instances`` body.

        ``http`` and ``https`` add a NAT access config to the first network
        interface and the matching server tag. Neither flag is part of the
        returned body.

        :rtype: ``dict``
        """
        body = self._base_body(name, zone_name)
        if not (self.http or self.https):
            return body

        interface = body['networkInterfaces'][0]
        access_configs = interface.get('accessConfigs') or []
        interface['accessConfigs'] = access_configs
        if not any(c.get('type') == NAT_ACCESS_CONFIG
                   for c in access_configs):
            access_configs.append({'type': NAT_ACCESS_CONFIG})

        tags = TagList.from_value(body.get('tags'))
        if self.http:
            tags.add('http-server')
        if self.https:
            tags.add('https-server')
        body['tags'] = tags.to_body()
        return body
