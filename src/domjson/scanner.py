from .constants import SCAN_ESCAPES, WHITESPACE


class Scanner:
    """Cursor over an immutable source string.

    The cursor is a character offset into ``source``; every read advances it
    forward only.
    """

    __slots__ = ("escape_on_scan", "length", "pos", "source")

    def __init__(self, source, escape_on_scan=False):
        self.source = source
        self.length = len(source)
        self.pos = 0
        self.escape_on_scan = bool(escape_on_scan)

    def eof(self):
        return self.pos >= self.length

    def next_char(self):
        """Return the character under the cursor without consuming it."""
        if self.pos >= self.length:
            return None
        return self.source[self.pos]

    def starts_with(self, prefix):
        return self.source.startswith(prefix, self.pos)

    def consume_char(self):
        # Callers check eof() first; past the end this yields a space and
        # leaves the cursor where it is.
        if self.pos >= self.length:
            return " "
        char = self.source[self.pos]
        self.pos += 1
        return char

    def advance(self, count):
        self.pos = min(self.pos + count, self.length)

    def consume_while(self, test):
        """Consume characters while ``test`` holds and return them.

        In legacy escaping mode double quotes, tabs and newlines are
        replaced by their backslash escapes in the returned string.
        """
        source = self.source
        start = self.pos
        end = start
        length = self.length
        while end < length and test(source[end]):
            end += 1
        self.pos = end
        result = source[start:end]
        if self.escape_on_scan and result:
            for raw, escaped in SCAN_ESCAPES.items():
                result = result.replace(raw, escaped)
        return result

    def consume_whitespace(self):
        self.consume_while(lambda c: c in WHITESPACE)

    def find(self, needle, skip=0):
        """Index of the next ``needle`` at or after cursor + ``skip``, or -1."""
        return self.source.find(needle, self.pos + skip)

    def consume_until(self, terminator):
        """Consume up to and including ``terminator``.

        Returns the text before the terminator, or None (cursor unchanged)
        when the terminator never occurs.
        """
        index = self.source.find(terminator, self.pos)
        if index == -1:
            return None
        result = self.source[self.pos : index]
        self.pos = index + len(terminator)
        return result

    def location(self, offset=None):
        """Return the 1-based (line, column) of ``offset`` (default: cursor)."""
        if offset is None:
            offset = self.pos
        offset = min(offset, self.length)
        line = self.source.count("\n", 0, offset) + 1
        line_start = self.source.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1

    def line_text(self, offset=None):
        """Return the source line containing ``offset``, without its newline."""
        if offset is None:
            offset = self.pos
        offset = min(offset, self.length)
        line_start = self.source.rfind("\n", 0, offset) + 1
        line_end = self.source.find("\n", offset)
        if line_end == -1:
            line_end = self.length
        return self.source[line_start:line_end]
