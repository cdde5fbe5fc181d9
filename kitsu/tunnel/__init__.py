# Copyright (c) 2010 Alexey Borzenkov.
# See LICENSE for details.

"""
HTTP CONNECT tunnel clients

TunnelClient runs on Twisted, SocketTunnelClient is its blocking
counterpart built on plain sockets.
"""

from kitsu.tunnel.errors import *
from kitsu.tunnel.headers import *
from kitsu.tunnel.request import *
from kitsu.tunnel.response import *
from kitsu.tunnel.base import *
from kitsu.tunnel.sockets import *
from kitsu.tunnel.client import *
