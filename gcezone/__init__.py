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
gcezone provides zone-scoped helpers for Google Compute Engine disks,
instances and operations.

:var __version__: Current version of gcezone
"""

import atexit
import io
import os

__all__ = [
    '__version__',
    'enable_debug'
]

__version__ = '0.3.0'

DEBUG_VARIABLE = 'GCEZONE_DEBUG'


def enable_debug(fo):
    """
    Log every HTTP request and response of every connection.

    :param fo: Where to append debugging information. It is closed when the
               interpreter exits.
    :type fo: File like object, only write operations are used.
    """
    from gcezone.common.base import Connection
    from gcezone.utils.loggingconnection import LoggingConnection

    LoggingConnection.log = fo
    Connection.conn_class = LoggingConnection
    atexit.register(fo.close)


def _init_once():
    """
    Turn on debugging when ``GCEZONE_DEBUG`` names a file to log to.
    """
    path = os.getenv(DEBUG_VARIABLE)
    if not path:
        return

    # the standard streams can not be opened for appending
    mode = 'w' if path in ('/dev/stderr', '/dev/stdout') else 'a'
    enable_debug(io.open(path, mode, encoding='utf8'))


_init_once()
