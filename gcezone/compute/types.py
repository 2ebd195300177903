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

from collections import namedtuple

__all__ = [
    'CreateResult',
    'ListResult',
]


# Result of a mutating call: the created resource handle, the operation
# tracking the change and the raw API response.
CreateResult = namedtuple('CreateResult', ['resource', 'operation',
                                           'response'])

# One page of a list call. ``next_query`` is ``{'pageToken': ...}`` when more
# results are available, otherwise ``None``.
ListResult = namedtuple('ListResult', ['items', 'next_query', 'response'])
