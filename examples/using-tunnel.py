#!/usr/bin/env python
# Copyright (c) 2010 Alexey Borzenkov.
# See LICENSE for details.

import sys
from twisted.internet.protocol import Protocol
from twisted.internet import reactor
from twisted.logger import globalLogBeginner, textFileLogObserver
from kitsu.tunnel import *

class MyProtocol(Protocol):
    def connectionMade(self):
        print("Tunnel connected!")
        self.transport.write(b'GET /ip HTTP/1.0\r\nHost: httpbin.org\r\n\r\n')

    def connectionLost(self, reason):
        print("Tunnel disconnected.")
        if reactor.running:
            reactor.stop()

    def dataReceived(self, data):
        print("Tunnel received: %r" % (data,))

def failed(failure):
    print("Tunnel failed: %s" % (failure.getErrorMessage(),))
    reactor.stop()

def main():
    client = TunnelClient(reactor, '127.0.0.1', 6666)
    client.userAgent = 'kitsu.tunnel example'
    d = client.connect('httpbin.org', 80, timeout=30)
    d.addCallback(lambda stream: stream.startTunneling(MyProtocol()))
    d.addErrback(failed)

globalLogBeginner.beginLoggingTo([textFileLogObserver(sys.stdout)])
reactor.callLater(0, main)
reactor.run()
