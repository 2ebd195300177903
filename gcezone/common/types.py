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

from typing import Optional

__all__ = [
    "GceZoneError",
    "MalformedResponseError",
    "ProviderError",
    "InvalidCredsError",
]


class GceZoneError(Exception):
    """Base class of every gcezone exception."""

    def __init__(self, value, driver=None):
        # type: (object, object) -> None
        super(GceZoneError, self).__init__(value)
        self.value = value
        self.driver = driver

    def __str__(self):
        return self.__repr__()

    def __repr__(self):
        return "<%s in %r %r>" % (self.__class__.__name__, self.driver,
                                  self.value)


class MalformedResponseError(GceZoneError):
    """The API answered with a body that could not be parsed."""

    def __init__(self, value, body=None, driver=None):
        # type: (str, Optional[str], object) -> None
        super(MalformedResponseError, self).__init__(value, driver=driver)
        self.body = body

    def __repr__(self):
        return "<%s in %r %r>: %r" % (self.__class__.__name__, self.driver,
                                      self.value, self.body)


class ProviderError(GceZoneError):
    """
    The API answered with an error status.

    :ivar http_code: HTTP status of the response, 409 for a resource that
                     already exists.
    :ivar response: The error response body, decoded when it is JSON.
    """

    def __init__(self, value, http_code, driver=None, response=None):
        # type: (object, int, object, object) -> None
        super(ProviderError, self).__init__(value, driver=driver)
        self.http_code = http_code
        self.response = response

    def __repr__(self):
        return repr(self.value)


class InvalidCredsError(ProviderError):
    """The access token was rejected."""

    def __init__(self, value='Invalid credentials with the provider',
                 driver=None, response=None):
        # type: (str, object, object) -> None
        super(InvalidCredsError, self).__init__(value, http_code=401,
                                                driver=driver,
                                                response=response)
