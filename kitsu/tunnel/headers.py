# Copyright (c) 2010 Alexey Borzenkov.
# See LICENSE for details.

__all__ = ['Headers']

nil = object()

class Headers(object):
    """
    Ordered multi-valued headers with case insensitive names

    Names keep the case they were added with, values keep the order
    they were added in, including the relative order of different names.
    """
    __slots__ = ('__items', '__partialHeader')

    def __init__(self, data=()):
        self.__items = []
        self.__partialHeader = None
        if data:
            self.update(data)

    def __make_key(self, name):
        if not isinstance(name, str):
            raise KeyError(name)
        return name.lower()

    def __remove(self, name):
        key = self.__make_key(name)
        self.__items = [item for item in self.__items if item[0].lower() != key]

    def __append(self, name, value):
        self.__make_key(name)
        if value is None:
            return
        elif isinstance(value, (str, int)):
            self.__items.append((name, str(value)))
        else:
            for value in value:
                self.__items.append((name, str(value)))

    def __getitem__(self, name):
        if name not in self:
            raise KeyError(name)
        return ', '.join(self.getlist(name))

    def __setitem__(self, name, value):
        self.__remove(name)
        self.__append(name, value)

    def __delitem__(self, name):
        if name not in self:
            raise KeyError(name)
        self.__remove(name)

    def __contains__(self, name):
        key = self.__make_key(name)
        return any(item[0].lower() == key for item in self.__items)

    def __iter__(self):
        return iter(list(self.__items))

    def __len__(self):
        return len(self.__items)

    def keys(self):
        return [name for (name, value) in self.__items]

    def values(self):
        return [value for (name, value) in self.__items]

    def items(self):
        return list(self.__items)

    def getlist(self, name, default=nil):
        key = self.__make_key(name)
        values = [value for (itemname, value) in self.__items if itemname.lower() == key]
        if values or default is nil:
            return values
        return default

    def get(self, name, default=None):
        if name in self:
            return ', '.join(self.getlist(name))
        return default

    def pop(self, name, default=nil):
        if name in self:
            value = self[name]
            self.__remove(name)
            return value
        if default is nil:
            raise KeyError(name)
        return default

    def add(self, name, value):
        self.__append(name, value)

    def clear(self):
        self.__items = []

    def update(self, data=()):
        if hasattr(data, 'items'):
            data = data.items()
        seen = set()
        for name, value in data:
            key = self.__make_key(name)
            if key not in seen:
                self.__remove(name)
                seen.add(key)
            self.__append(name, value)

    def toLines(self, lines=None):
        if lines is None:
            lines = []
        for name, value in self.__items:
            lines.append("%s: %s\r\n" % (name, value))
        return lines

    def toString(self):
        return ''.join(self.toLines())

    def __str__(self):
        return self.toString()

    def __repr__(self):
        return "Headers({%s})" % ', '.join("%r: %r" % item for item in self.__items)

    def parseFlush(self):
        if self.__partialHeader:
            header = '\r\n'.join(self.__partialHeader)
            self.__partialHeader = None
            parts = header.split(":", 1)
            name = parts[0].rstrip()
            # lines not in "name: value" format are skipped
            if len(parts) == 2 and name:
                self.add(name, parts[1].strip())

    def parseLine(self, line):
        """Parses one header line, returns False on the terminating empty line"""
        if not line or not line[0] in ' \t':
            self.parseFlush()
            if line:
                self.__partialHeader = [line]
        else:
            if self.__partialHeader:
                self.__partialHeader.append(line)
        return line and True or False
