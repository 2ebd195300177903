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
TLS settings shared by every connection.

``VERIFY_SSL_CERT`` turns certificate verification on or off and
``CA_CERTS_PATH`` names the PEM bundle used to verify the API endpoint::

    import gcezone.security
    gcezone.security.CA_CERTS_PATH = '/etc/ssl/certs/ca-certificates.crt'

The ``SSL_CERT_FILE`` environment variable overrides the certifi bundle.
"""

import os

import certifi

__all__ = [
    'VERIFY_SSL_CERT',
    'CA_CERTS_PATH'
]


def _ca_certs_path():
    path = os.getenv('SSL_CERT_FILE')
    if path is None:
        return certifi.where()

    if not os.path.isfile(path):
        raise ValueError('SSL_CERT_FILE %s is not a file' % (path))
    return path


VERIFY_SSL_CERT = True
CA_CERTS_PATH = _ca_certs_path()
