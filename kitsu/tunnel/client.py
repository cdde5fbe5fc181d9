# Copyright (c) 2010 Alexey Borzenkov.
# See LICENSE for details.

__all__ = [
    'TunnelClient',
    'TunnelProtocol',
    'TunnelStream',
]

from twisted.logger import Logger
from twisted.python.failure import Failure
from twisted.internet.protocol import Protocol
from twisted.internet.defer import Deferred, fail, succeed
from twisted.internet.error import ConnectionDone
from twisted.internet.endpoints import HostnameEndpoint, TCP4ClientEndpoint, TCP6ClientEndpoint, connectProtocol
from kitsu.tunnel.errors import *
from kitsu.tunnel.response import *
from kitsu.tunnel.base import *

class TunnelStream(object):
    """
    Duplex byte stream of an established tunnel

    Data may be consumed either with read() or by handing the connection
    over to a regular protocol with startTunneling(), but not both.
    """

    def __init__(self, transport, data=b''):
        self.transport = transport
        self.target = None
        self.disconnected = None
        self.__buffer = data and [data] or []
        self.__reads = []

    def write(self, data):
        self.transport.write(data)

    def writeSequence(self, seq):
        self.transport.writeSequence(seq)

    def loseConnection(self):
        self.transport.loseConnection()

    def clearBuffer(self):
        data, self.__buffer = b''.join(self.__buffer), []
        return data

    def __eof(self):
        if self.disconnected.check(ConnectionDone):
            return succeed(b'')
        return fail(self.disconnected)

    def read(self):
        """Returns Deferred firing with the next chunk of data, b'' at the end of stream"""
        if self.target is not None:
            return fail(TunnelStateError("data is delivered to %r" % (self.target,)))
        if self.__buffer:
            return succeed(self.clearBuffer())
        if self.disconnected is not None:
            return self.__eof()
        d = Deferred()
        self.__reads.append(d)
        return d

    def startTunneling(self, target):
        """Connects target protocol to the tunnel, buffered data is delivered first"""
        if self.__reads:
            raise TunnelStateError("cannot start tunneling while reads are pending")
        self.target = target
        self.target.makeConnection(self.transport)
        data = self.clearBuffer()
        if data:
            self.target.dataReceived(data)
        if self.disconnected is not None:
            self.target.connectionLost(self.disconnected)

    def dataReceived(self, data):
        if self.target is not None:
            self.target.dataReceived(data)
        elif self.__reads:
            self.__reads.pop(0).callback(data)
        else:
            self.__buffer.append(data)

    def connectionLost(self, reason):
        self.disconnected = reason
        if self.target is not None:
            self.target.connectionLost(reason)
            return
        reads, self.__reads = self.__reads, []
        for d in reads:
            self.__eof().chainDeferred(d)

class TunnelProtocol(Protocol):
    """Runs CONNECT handshake, then passes everything to its stream"""

    __buffer = b''
    limit = 65536
    result = None
    parser = None
    stream = None
    disconnected = None
    requested = False

    def clearBuffer(self):
        data, self.__buffer = self.__buffer, b''
        return data

    def __succeeded(self, response):
        result = self.result
        self.result = None
        self.parser = None
        result.callback(response)

    def __failed(self, failure):
        result = self.result
        self.result = None
        self.parser = None
        result.errback(failure)

    def __cancelled(self, result):
        self.result = None
        self.parser = None

    def makeRequest(self, request):
        try:
            if self.result is not None:
                raise TunnelStateError("Cannot make new requests while another one in progress")
        except Exception:
            return fail(Failure())
        self.result = result = Deferred(self.__cancelled)
        self.parser = ConnectResponseParser()
        self.requested = True
        self.received = 0
        self.transport.write(request.toBytes())
        if self.__buffer:
            self.dataReceived(self.clearBuffer())
        if self.disconnected is not None and self.result is not None:
            self.connectionLost(self.disconnected)
        return result

    def startStream(self):
        """Creates the stream that receives all data after the response"""
        self.stream = TunnelStream(self.transport, self.clearBuffer())
        if self.disconnected is not None:
            self.stream.connectionLost(self.disconnected)
        return self.stream

    def dataReceived(self, data):
        if self.stream is not None:
            self.stream.dataReceived(data)
            return
        if self.parser is None:
            # nothing reads data after a failed or cancelled handshake
            if not self.requested:
                self.__buffer += data
            return
        self.received += len(data)
        try:
            response = self.parser.parse(data)
            if not response and self.received >= self.limit:
                raise HTTPLimitError("CONNECT: response too big")
        except Exception:
            self.__failed(Failure())
            return
        if response:
            assert len(response) == 1
            self.__buffer = self.parser.clear()
            self.__succeeded(response[0])

    def connectionLost(self, reason):
        self.disconnected = reason
        if self.stream is not None:
            self.stream.connectionLost(reason)
        elif self.result is not None:
            self.__failed(Failure(HTTPDataError("not enough data for response")))

class TunnelClient(BaseTunnel):
    """
    HTTP CONNECT tunnel client for Twisted

    Usage::

        client = TunnelClient(reactor, 'proxy.example.com', 3128)
        d = client.connect('www.example.com', 80)
        d.addCallback(lambda stream: stream.write(b'GET / HTTP/1.0\\r\\n\\r\\n'))

    The Deferred returned by connect() fires with the TunnelStream, which is
    also available from getStream() afterwards. Cancelling it (or letting
    its timeout expire) drops the connection to the proxy.
    """

    log = Logger()

    def __init__(self, reactor, host, port, timeout=30, bindAddress=None):
        BaseTunnel.__init__(self, host, port)
        self.reactor = reactor
        self.timeout = timeout
        self.bindAddress = bindAddress
        self.__target = None
        self.__result = None
        self.__connecting = None
        self.__protocol = None

    def endpoint(self):
        """Returns client endpoint of the proxy"""
        if self.proxyAddress is None:
            return HostnameEndpoint(self.reactor, self.proxyHost, self.proxyPort, timeout=self.timeout, bindAddress=self.bindAddress)
        if self.proxyAddress.version == 6:
            return TCP6ClientEndpoint(self.reactor, str(self.proxyAddress), self.proxyPort, timeout=self.timeout, bindAddress=self.bindAddress)
        return TCP4ClientEndpoint(self.reactor, str(self.proxyAddress), self.proxyPort, timeout=self.timeout, bindAddress=self.bindAddress)

    def connect(self, host=None, port=None, address=None, timeout=None):
        try:
            request = self.beginConnect(host, port, address)
            self.__target = request.target
            self.log.debug("Connecting to proxy {proxy!r}", proxy=self)
            connecting = connectProtocol(self.endpoint(), TunnelProtocol())
        except Exception:
            return fail(Failure())
        self.__result = result = Deferred(self.__cancel)
        self.__connecting = connecting
        self.__connecting.addCallback(self.__gotProtocol, request)
        self.__connecting.addCallbacks(self.__succeeded, self.__failed)
        if timeout is not None:
            result.addTimeout(timeout, self.reactor, onTimeoutCancel=self.__timedOut)
        return result

    def __gotProtocol(self, protocol, request):
        self.__protocol = protocol
        self.log.debug("{method} {target}", method=request.method, target=request.target)
        return protocol.makeRequest(request)

    def __succeeded(self, response):
        self.__connecting = None
        result, self.__result = self.__result, None
        if result is None:
            return
        self.log.debug("{code} {phrase}", code=response.code, phrase=response.phrase)
        stream = self.__protocol.startStream()
        self.gotStream(stream, response)
        self.log.info("Tunnel to {target} via {proxy!r} established", target=self.__target, proxy=self)
        result.callback(stream)

    def __failed(self, failure):
        self.__connecting = None
        result, self.__result = self.__result, None
        if result is None:
            return
        self.log.debug("CONNECT {target} failed: {error}", target=self.__target, error=failure.getErrorMessage())
        result.errback(failure)

    def __timedOut(self, result, timeout):
        raise HTTPTimeoutError("CONNECT %s did not complete in %s seconds" % (self.__target, timeout))

    def __abort(self):
        self.__result = None
        connecting, self.__connecting = self.__connecting, None
        if connecting is not None:
            connecting.cancel()
        protocol, self.__protocol = self.__protocol, None
        if protocol is not None and protocol.transport is not None:
            protocol.transport.loseConnection()

    def __cancel(self, result):
        self.log.debug("CONNECT {target} cancelled", target=self.__target)
        self.__abort()

    def release(self):
        result = self.__result
        self.__abort()
        if result is not None:
            result.errback(TunnelClosedError("closed while connecting to %s" % (self.__target,)))
