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
Resolve operating system names to the newest public disk image.
"""

import datetime

from gcezone.common.google import ResourceNotFoundError

__all__ = [
    'IMAGE_PROJECTS',
    'ImageLookup'
]

# Public image projects and the image name prefixes they publish.
IMAGE_PROJECTS = {
    "centos-cloud": ["centos"],
    "coreos-cloud": ["coreos"],
    "cos-cloud": ["cos"],
    "debian-cloud": ["debian", "backports"],
    "gce-nvme": ["nvme-backports"],
    "google-containers": ["container-vm"],
    "opensuse-cloud": ["opensuse"],
    "rhel-cloud": ["rhel"],
    "suse-cloud": ["sles", "suse"],
    "ubuntu-os-cloud": ["ubuntu"],
    "windows-cloud": ["windows"],
}

API_URL = 'https://www.googleapis.com/compute/%s/projects/%s/global/images'


def timestamp_to_datetime(timestamp):
    """
    Return a datetime object that corresponds to the time in an RFC3339
    timestamp.

    Fractional seconds are ignored. The offset is ``Z`` or ``+HH:MM`` /
    ``-HH:MM``.

    :param  timestamp: RFC3339 timestamp string, such as
                       ``2013-06-26T10:05:19.340-07:00``
    :type   timestamp: ``str``

    :return:  Datetime object corresponding to timestamp, in UTC
    :rtype:   :class:`datetime.datetime`
    """
    ts = datetime.datetime.strptime(timestamp[:19], '%Y-%m-%dT%H:%M:%S')
    if timestamp.upper().endswith('Z'):
        return ts
    # Local time minus the offset is UTC
    sign = -1 if timestamp[-6] == '+' else 1
    tz_delta = datetime.timedelta(hours=int(timestamp[-5:-3]),
                                  minutes=int(timestamp[-2:]))
    return ts + sign * tz_delta


class ImageLookup(object):
    """
    Finds the latest image for an OS name such as ``ubuntu-14.04``,
    ``debian`` or ``my-project/custom-base``.

    :param  compute: A :class:`gcezone.compute.compute.Compute` used to list
                     images of the public image projects.
    """

    def __init__(self, compute):
        self.compute = compute

    def get_latest(self, os_name):
        """
        Return the newest non deprecated image whose name starts with the
        prefix derived from ``os_name``.

        :param  os_name: ``<prefix>`` or ``<project>/<prefix>``.
        :type   os_name: ``str``

        :return:  Image resource, including its ``selfLink``.
        :rtype:   ``dict``
        """
        project, prefix = self._parse_os_name(os_name)

        latest = None
        for image in self._list_images(project):
            if image.get('deprecated'):
                continue
            if not image.get('name', '').startswith(prefix):
                continue
            ts = timestamp_to_datetime(image['creationTimestamp'])
            if latest is None or latest[0] < ts:
                latest = [ts, image]

        if latest is None:
            raise ResourceNotFoundError('Could not find image \'%s\'' %
                                        (os_name), None, None)
        return latest[1]

    def _parse_os_name(self, os_name):
        if '/' in os_name:
            project, prefix = os_name.split('/', 1)
        else:
            prefix = os_name
            project = None
            for img_proj, short_list in IMAGE_PROJECTS.items():
                for short_name in short_list:
                    if prefix.startswith(short_name):
                        project = img_proj
            if project is None:
                raise ResourceNotFoundError('Unknown operating system \'%s\'' %
                                            (os_name), None, None)

        return project, prefix.replace('.', '')

    def _list_images(self, project):
        url = API_URL % (self.compute.api_version, project)
        params = {}
        while True:
            response = self.compute.request(url, params=params)
            for image in response.get('items', []):
                yield image
            if not response.get('nextPageToken'):
                break
            params = {'pageToken': response['nextPageToken']}
