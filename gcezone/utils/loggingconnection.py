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
import os
from shlex import quote as pquote

from gcezone.http import HttpConnection, HttpLibResponseProxy
from gcezone.common.base import lowercase_keys

PRETTY_PRINT_VARIABLE = 'GCEZONE_DEBUG_PRETTY_PRINT_RESPONSE'
REQUEST_ID_HEADER = 'X-GZ-Request-ID'


class LoggingConnection(HttpConnection):
    """
    Writes every request as an equivalent curl command, followed by the raw
    response, to :attr:`log`. Bearer tokens are never written out.

    :cvar log: file-like object that logs entries are written to.
    """

    log = None

    def _write(self, text):
        self.log.write(text + "\n")
        self.log.flush()

    def _proxy_url(self):
        if self.proxy_username and self.proxy_password:
            return '%s://%s:%s@%s:%s' % (self.proxy_scheme,
                                         self.proxy_username,
                                         self.proxy_password,
                                         self.proxy_host, self.proxy_port)
        return '%s://%s:%s' % (self.proxy_scheme, self.proxy_host,
                               self.proxy_port)

    def _format_body(self, body, content_type):
        if not (os.environ.get(PRETTY_PRINT_VARIABLE) and
                content_type.startswith('application/json')):
            return body
        try:
            return json.dumps(json.loads(body), sort_keys=True, indent=4)
        except ValueError:
            # content-type claims JSON but the body is not
            return body

    def _log_response(self, r):
        marker = "%d:%d response" % (id(self), id(r))
        headers = r.getheaders()
        content_type = lowercase_keys(dict(headers)).get('content-type') or ''

        protocol = "HTTP/1.1" if r.version == 11 else "HTTP/1.0"

        lines = ["# -------- begin %s ----------" % marker,
                 "%s %s %s\r" % (protocol, r.status, r.reason)]
        lines.extend("%s: %s\r" % (name.title(), value)
                     for name, value in headers)
        lines.append("\r")
        lines.append(self._format_body(r.read(), content_type))
        lines.append("# -------- end %s ----------" % marker)
        return "\n".join(lines)

    def _log_curl(self, method, url, body, headers):
        cmd = ["curl"]

        if self.http_proxy_used:
            cmd.extend(["--proxy", pquote(self._proxy_url())])

        cmd.append("-i")

        if method.lower() == 'head':
            cmd.append("--head")
        else:
            cmd.extend(["-X", pquote(method)])

        for name, value in headers.items():
            if name.lower() == 'authorization':
                value = value.split(' ')[0] + ' <redacted>'
            cmd.extend(["-H", pquote("%s: %s" % (name, value))])

        if body:
            if isinstance(body, (bytearray, bytes)):
                body = body.decode('utf-8')
            cmd.extend(["--data-binary", pquote(body)])

        cmd.extend(["--compress", pquote(self.host + url)])
        return " ".join(cmd)

    def getresponse(self):
        response = HttpConnection.getresponse(self)
        if self.log is not None:
            self._write(self._log_response(HttpLibResponseProxy(response)))
        return response

    def request(self, method, url, body=None, headers=None, **kwargs):
        headers = dict(headers or {})
        headers[REQUEST_ID_HEADER] = str(id(self))
        if self.log is not None:
            self._write("# -------- begin %d request ----------\n%s" %
                        (id(self), self._log_curl(method, url, body,
                                                  headers)))
        return HttpConnection.request(self, method, url, body, headers,
                                      **kwargs)
