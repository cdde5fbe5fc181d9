# Copyright (c) 2010 Alexey Borzenkov.
# See LICENSE for details.

__all__ = ['Credential', 'basicAuthorization', 'Request']

import re
import base64
from collections import namedtuple
from kitsu.tunnel.headers import Headers

Credential = namedtuple('Credential', 'username password')

def basicAuthorization(username, password):
    """Returns base64 encoded 'username:password' for Basic authorization"""
    credentials = ('%s:%s' % (username, password)).encode('utf-8')
    return base64.b64encode(credentials).decode('ascii')

class Request(object):
    __slots__ = ('method', 'target', 'version', 'headers')

    def __init__(self, method="CONNECT", target="/", version=(1,1), headers=()):
        self.method = method
        self.target = target
        self.version = version
        self.headers = Headers(headers)

    def toLines(self, lines=None):
        if lines is None:
            lines = []
        target = re.sub(r"\s", "+", self.target)
        lines.append("%s %s HTTP/%d.%d\r\n" % (self.method, target, self.version[0], self.version[1]))
        self.headers.toLines(lines)
        lines.append("\r\n")
        return lines

    def toString(self):
        return ''.join(self.toLines())

    def toBytes(self):
        return self.toString().encode('utf-8')

    def __str__(self):
        return self.toString()
