# Copyright (c) 2010 Alexey Borzenkov.
# See LICENSE for details.

__all__ = [
    'Response',
    'ResponseParser',
    'ConnectResponseParser',
]

import re
from kitsu.tunnel.errors import *
from kitsu.tunnel.headers import Headers
from kitsu.tunnel.parsers import LineParser

_statusLine = re.compile(r"HTTP/1\.(0|1) (\d{3}) ([\w\s]+)")

class Response(object):
    def __init__(self, version=(1,1), code=200, phrase='OK', headers=()):
        self.version = version
        self.code = code
        self.phrase = phrase
        self.headers = Headers(headers)
        self.__parserState = 'STATUS'

    def toLines(self, lines=None):
        if lines is None:
            lines = []
        lines.append("HTTP/%d.%d %d %s\r\n" % (self.version[0], self.version[1], self.code, self.phrase))
        self.headers.toLines(lines)
        lines.append("\r\n")
        return lines

    def toString(self):
        return ''.join(self.toLines())

    def toBytes(self):
        return self.toString().encode('utf-8')

    def __str__(self):
        return self.toString()

    def __parseStatus(self, line):
        match = _statusLine.search(line)
        if match is None:
            raise ProtocolViolationError("%r" % (line,))
        self.version = (1, int(match.group(1)))
        self.code = int(match.group(2))
        self.phrase = match.group(3).strip()

    def parseLine(self, line):
        """
        Parses one response line, returns False when the response is complete

        Unlike a general purpose parser the status line must be the very
        first line, a proxy that answers with anything else does not speak
        HTTP at all. The status may be preceded by junk on the same line.
        """
        if self.__parserState == 'STATUS':
            self.__parseStatus(line)
            self.__parserState = 'HEADERS'
            return True
        elif self.__parserState == 'HEADERS':
            if not self.headers.parseLine(line):
                self.__parserState = 'DONE'
                return False
            return True
        return False

class ResponseParser(LineParser):
    """Response parser"""

    def __init__(self):
        self.response = Response()
        self.status = False

    def parseLine(self, line):
        try:
            line = line.decode('utf-8')
        except UnicodeDecodeError:
            if not self.status:
                raise ProtocolViolationError("%r" % (line,))
            raise HTTPDataError("header is not valid utf-8: %r" % (line,))
        if not self.response.parseLine(line):
            self.done = True
            return [self.response]
        if not self.status:
            self.status = True
            self.gotStatus(self.response)
        return []

    def gotStatus(self, response):
        """Called as soon as the status line has been parsed"""

class ConnectResponseParser(ResponseParser):
    """Response parser that fails as soon as the proxy refuses to connect"""

    def gotStatus(self, response):
        if response.code != 200:
            raise ProxyError(response.code, response.phrase)
