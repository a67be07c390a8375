import ipaddress

import validators
from line_profiler import profile

# Comment text marking the block of servers this tool owns
MANAGED_REGION_COMMENT = 'ISUCON Servers'


class FormatError(ValueError):
    """Raised when a hosts line has data that is not an address plus aliases."""

    def __init__(self, message, lineno=None):
        super().__init__(message)
        self.message = message
        self.lineno = lineno

    def __str__(self):
        if self.lineno is None:
            return self.message
        return f"line {self.lineno}: {self.message}"


def parse_ip(value):
    """
    Convert an IP literal into an ``ipaddress`` object.

    Parameters
    ----------
    value : str or ipaddress.IPv4Address or ipaddress.IPv6Address
        The address to convert. Address objects are returned unchanged.

    Returns
    -------
    ip : ipaddress.IPv4Address or ipaddress.IPv6Address
        The parsed address.

    Raises
    ------
    FormatError
        If the value is not a valid IPv4 or IPv6 literal.
    """

    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return value
    if not (validators.ipv4(value, cidr=False) or validators.ipv6(value, cidr=False)):
        raise FormatError(f"Invalid IP format: {value!r}")
    try:
        return ipaddress.ip_address(value)
    except ValueError as e:
        raise FormatError(f"Invalid IP format: {value!r}") from e


class LineData:
    """An address with the ordered list of host aliases mapped to it."""

    def __init__(self, ip, hosts):
        self.ip = parse_ip(ip)
        self.hosts = list(hosts)

    @classmethod
    def from_str(cls, s):
        s = s.strip()
        parts = s.split(None, 1)
        if len(parts) < 2:
            raise FormatError(f"No (ip, host) data in {s!r}")
        return cls(parse_ip(parts[0]), parts[1].split())

    def to_string(self):
        return ' '.join([str(self.ip)] + self.hosts)

    def __eq__(self, other):
        if not isinstance(other, LineData):
            return NotImplemented
        return self.ip == other.ip and self.hosts == other.hosts

    def __repr__(self):
        return f"LineData({str(self.ip)!r}, {self.hosts!r})"


class Line:
    """
    One physical line of a hosts file.

    A line may carry address data, a trailing comment, both, or neither.
    A line with neither is a blank line.
    """

    def __init__(self, data=None, comment=None):
        self.data = data
        self.comment = comment

    @classmethod
    def from_str(cls, s):
        stripped, sep, comment = s.partition('#')
        comment = comment.lstrip() if sep else None
        data = None
        if stripped.strip():
            data = LineData.from_str(stripped)
        return cls(data, comment)

    def is_empty(self):
        return self.data is None and self.comment is None

    def to_string(self):
        out = ''
        if self.data is not None:
            out += self.data.to_string()
        if self.comment is not None:
            if self.data is not None:
                out += '  '
            out += '# ' + self.comment
        return out

    def __eq__(self, other):
        if not isinstance(other, Line):
            return NotImplemented
        return self.data == other.data and self.comment == other.comment

    def __repr__(self):
        return f"Line({self.data!r}, {self.comment!r})"


def split_lines(text):
    """
    Split text into physical lines on ``\\n`` only.

    One trailing ``\\r`` is dropped from each line and a final newline does
    not start an extra line. Other line-break characters such as form feed
    stay inside the line they appear in.
    """

    lines = text.split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]


def remove_first(items, predicate):
    """Delete the first item matching ``predicate``; return whether one was found."""
    for i, item in enumerate(items):
        if predicate(item):
            del items[i]
            return True
    return False


class EtcHosts:
    """
    The whole hosts file as an ordered list of :class:`Line`.

    Lines outside the managed region are kept in place, so a load followed
    by a save only normalises spacing inside data lines.
    """

    def __init__(self, lines=None):
        self.lines = list(lines or [])

    @classmethod
    @profile
    def from_str(cls, text):
        """
        Parse the content of a hosts file.

        Parameters
        ----------
        text : str
            The full file content.

        Returns
        -------
        hosts : EtcHosts
            The parsed table, with trailing blank lines dropped.

        Raises
        ------
        FormatError
            For the first line that cannot be parsed, with its line number.
        """

        lines = []
        for lineno, raw in enumerate(split_lines(text), 1):
            try:
                lines.append(Line.from_str(raw))
            except FormatError as e:
                raise FormatError(e.message, lineno) from e
        while lines and lines[-1].is_empty():
            lines.pop()
        return cls(lines)

    @profile
    def to_string(self):
        return ''.join(line.to_string() + '\n' for line in self.lines)

    def __str__(self):
        return self.to_string()

    def find_host(self, host):
        """Return the index of the first data line listing ``host``, or -1."""
        for i, line in enumerate(self.lines):
            if line.data is not None and host in line.data.hosts:
                return i
        return -1

    def _add_my_region(self):
        for i, line in enumerate(self.lines):
            if line.comment == MANAGED_REGION_COMMENT:
                return i
        if self.lines and not self.lines[-1].is_empty():
            self.lines.append(Line())
        self.lines.append(Line(comment=MANAGED_REGION_COMMENT))
        return len(self.lines) - 1

    def _remove_host(self, host):
        # Only the first line with the alias is touched, later duplicates stay
        i = self.find_host(host)
        if i == -1:
            return False
        hosts = self.lines[i].data.hosts
        remove_first(hosts, lambda h: h == host)
        if not hosts:
            del self.lines[i]
        return True

    @profile
    def add_data(self, ip, host):
        """
        Make ``host`` resolve to ``ip`` inside the managed region.

        Any previous mapping of ``host`` is dropped first, and the new line
        goes at the end of the contiguous block after the region comment.
        """

        ip = parse_ip(ip)
        self._remove_host(host)
        i = self._add_my_region()
        while i < len(self.lines) and not self.lines[i].is_empty():
            i += 1
        self.lines.insert(i, Line(LineData(ip, [host])))
