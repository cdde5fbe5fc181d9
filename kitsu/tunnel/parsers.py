# Copyright (c) 2010 Alexey Borzenkov.
# See LICENSE for details.

__all__ = [
    'Parser',
    'LineParser',
]

class Parser(object):
    """Abstract data parser"""
    done = False
    cache = b''

    def clear(self):
        """Clears and returns current cache"""
        data, self.cache = self.cache, b''
        return data

    def prepend(self, data):
        """Prepend data to cache"""
        if data:
            self.cache = data + self.cache

    def parse(self, data):
        """Feed chunk of data to parser. Returns parsed bits if available."""
        if data:
            self.cache += data
        if self.done:
            return ()
        output = []
        while self.cache and not self.done:
            data, self.cache = self.cache, b''
            bits = self.parseRaw(data)
            if bits is None:
                # parseRaw has not enough data
                break
            output.extend(bits)
        return output

    def parseRaw(self, data):
        """Called by parse with current data chunk"""
        raise NotImplementedError

class LineParser(Parser):
    """Line based parser, lines are passed without their CRLF"""

    def parseRaw(self, data):
        pos = data.find(b'\n')
        if pos < 0:
            self.prepend(data)
            return None
        if pos > 0 and data[pos-1:pos] == b'\r':
            line, data = data[:pos-1], data[pos+1:]
        else:
            line, data = data[:pos], data[pos+1:]
        self.prepend(data)
        return self.parseLine(line)

    def parseLine(self, line):
        """Called by parseRaw with current line"""
        raise NotImplementedError
