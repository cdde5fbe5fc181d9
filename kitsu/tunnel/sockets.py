# Copyright (c) 2010 Alexey Borzenkov.
# See LICENSE for details.

__all__ = [
    'SocketTunnelClient',
    'Connector',
    'create_socket',
]

import io
import socket
import logging
import ipaddress
from kitsu.tunnel.errors import *
from kitsu.tunnel.response import *
from kitsu.tunnel.base import *

log = logging.getLogger(__name__)

def create_socket(address, timeout=None):
    """Connects to (host, port), host is resolved unless it is an ip address"""
    host, port = address
    try:
        family = ipaddress.ip_address(str(host)).version == 6 and socket.AF_INET6 or socket.AF_INET
    except ValueError:
        return socket.create_connection((host, port), timeout)
    sock = socket.socket(family, socket.SOCK_STREAM, socket.IPPROTO_TCP)
    try:
        sock.settimeout(timeout)
        sock.connect((str(host), port))
    except Exception:
        sock.close()
        raise
    return sock

class SocketTunnelClient(BaseTunnel):
    """
    Blocking HTTP CONNECT tunnel client

    After connect() the socket returned by getStream() is positioned at
    the first byte sent by the destination: the proxy response is read one
    byte at a time so nothing after it is consumed.
    """

    limit = 65536

    def __init__(self, host, port, timeout=None):
        BaseTunnel.__init__(self, host, port)
        self.timeout = timeout
        self.create_socket = create_socket
        self.__sock = None

    def __readline(self, limit):
        """Read a line being careful not to read more than needed"""
        s = io.BytesIO()
        while True:
            c = self.__sock.recv(1)
            if not c:
                break
            s.write(c)
            if c == b'\n':
                break
            if s.tell() >= limit:
                break
        return s.getvalue()

    def __readResponse(self):
        limit = self.limit
        parser = ConnectResponseParser()
        while True:
            data = self.__readline(limit)
            if not data:
                raise HTTPDataError("not enough data for response")
            limit -= len(data)
            response = parser.parse(data)
            if response:
                assert parser.done
                assert not parser.clear()
                return response[0]
            if limit <= 0:
                raise HTTPLimitError("CONNECT: response too big")

    def connect(self, host=None, port=None, address=None):
        request = self.beginConnect(host, port, address)
        proxy = (self.proxyHost or self.proxyAddress, self.proxyPort)
        log.debug("Connecting to proxy %s:%s", *proxy)
        self.__sock = self.create_socket(proxy, self.timeout)
        log.debug("%s %s", request.method, request.target)
        try:
            self.__sock.sendall(request.toBytes())
            response = self.__readResponse()
        except socket.timeout:
            self.release()
            raise HTTPTimeoutError("CONNECT %s" % (request.target,))
        log.debug("%d %s", response.code, response.phrase)
        log.info("Tunnel to %s via %s:%s established", request.target, *proxy)
        self.gotStream(self.__sock, response)
        return self.__sock

    def release(self):
        sock, self.__sock = self.__sock, None
        if sock is not None:
            sock.close()

class Connector(object):
    """Connects to destinations through a proxy given as url"""

    def __init__(self, proxy, timeout=30, userAgent=None, keepAlive=True):
        self.proxyhost, self.proxyport, self.credential = parseProxy(proxy)
        self.timeout = timeout
        self.userAgent = userAgent
        self.keepAlive = keepAlive

    def connect(self, address):
        host, port = address
        client = SocketTunnelClient(self.proxyhost, self.proxyport, timeout=self.timeout)
        client.credential = self.credential
        client.userAgent = self.userAgent
        client.keepAlive = self.keepAlive
        if isinstance(host, str):
            try:
                host = ipaddress.ip_address(host)
            except ValueError:
                pass
        try:
            if isinstance(host, str):
                client.connect(host=host, port=port)
            else:
                client.connect(address=host, port=port)
        except Exception:
            client.close()
            raise
        return client
