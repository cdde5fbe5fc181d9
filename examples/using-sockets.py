#!/usr/bin/env python
# Copyright (c) 2010 Alexey Borzenkov.
# See LICENSE for details.

import logging
from kitsu.tunnel import *

def main():
    logging.basicConfig(level=logging.DEBUG)
    with SocketTunnelClient('127.0.0.1', 6666, timeout=30) as client:
        sock = client.connect('httpbin.org', 80)
        sock.sendall(b'GET /ip HTTP/1.1\r\nHost: httpbin.org\r\nConnection: close\r\n\r\n')
        print(sock.recv(2048).decode('utf-8', 'replace'))

if __name__ == '__main__':
    main()
