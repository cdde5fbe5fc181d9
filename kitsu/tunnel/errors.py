# Copyright (c) 2010 Alexey Borzenkov.
# See LICENSE for details.

__all__ = [
    'TunnelError',
    'TunnelArgumentError',
    'TunnelStateError',
    'TunnelClosedError',
    'HTTPDataError',
    'ProtocolViolationError',
    'HTTPLimitError',
    'HTTPTimeoutError',
    'ProxyError',
]

class TunnelError(Exception):
    def __str__(self):
        cls = type(self)
        doc = getattr(cls, '__doc__')
        text = Exception.__str__(self)
        if doc and text:
            return "%s: %s" % (doc, text)
        return doc or text

class TunnelArgumentError(TunnelError, ValueError):
    """Invalid argument"""

class TunnelStateError(TunnelError):
    """Invalid tunnel state"""

class TunnelClosedError(TunnelStateError):
    """Tunnel is closed"""

class HTTPDataError(TunnelError):
    """Data error"""

class ProtocolViolationError(HTTPDataError):
    """Unknown protocol in proxy response"""

class HTTPLimitError(TunnelError):
    """Data limit exceeded"""

class HTTPTimeoutError(TunnelError):
    """Timeout limit exceeded"""

class ProxyError(TunnelError):
    """Proxy refused to connect"""

    def __init__(self, code, phrase=''):
        TunnelError.__init__(self, '%d %s' % (code, phrase))
        self.code = code
        self.phrase = phrase
