"""Markup parser and the DomJSON document entry point."""

import string
import sys

from .constants import (
    BLOCK_COMMENT,
    END_TAG_OPEN,
    MARKUP_COMMENT,
    MARKUP_DECLARATION_OPEN,
    ROOT_TAG,
    VOID_ELEMENTS,
)
from .errors import INVALID_INPUT, MALFORMED_MARKUP, MarkupError, ParseError
from .node import elem, text
from .scanner import Scanner
from .serialize import to_json

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "-")


def _is_name_char(c):
    return c in _NAME_CHARS


def _is_text_char(c):
    # '/' stops the run so the caller can look for a '/*' comment
    return c != "<" and c != "/"


class ParserOpts:
    __slots__ = ("discard_bom", "escape_on_scan", "max_depth", "void_elements")

    def __init__(self, void_elements=None, escape_on_scan=False, max_depth=None, discard_bom=True):
        self.void_elements = frozenset(void_elements) if void_elements is not None else VOID_ELEMENTS
        self.escape_on_scan = bool(escape_on_scan)
        self.max_depth = max_depth
        self.discard_bom = bool(discard_bom)


class _Frame:
    """An element whose start tag was read and whose end tag is pending."""

    __slots__ = ("attributes", "children", "offset", "tag_name")

    def __init__(self, tag_name, attributes, offset):
        self.tag_name = tag_name
        self.attributes = attributes
        self.children = []
        self.offset = offset


class Parser:
    """Recursive-descent parser over a single source string.

    Element bodies are parsed with an explicit stack of pending frames
    instead of Python recursion, so deep nesting only costs memory. Nodes
    are still built bottom-up: an element is created once its end tag has
    been matched.
    """

    __slots__ = ("env_debug", "opts", "scanner")

    def __init__(self, source, opts=None, debug=False):
        self.opts = opts or ParserOpts()
        self.env_debug = bool(debug)
        if self.opts.discard_bom and source.startswith("\ufeff"):
            source = source[1:]
        self.scanner = Scanner(source, escape_on_scan=self.opts.escape_on_scan)

    def debug(self, message, indent=4):
        if self.env_debug:
            print(f"{' ' * indent}{message}", file=sys.stderr)

    def fail(self, code, offset=None, message=None, kind=MALFORMED_MARKUP):
        if offset is None:
            offset = self.scanner.pos
        line, column = self.scanner.location(offset)
        error = ParseError(code, offset, line, column, message, kind)
        self.debug(f"error {error}", indent=0)
        raise MarkupError(error, self.scanner.line_text(offset))

    def parse(self):
        """Parse the whole source and wrap the result in the root element."""
        nodes = self.parse_nodes()
        return elem(ROOT_TAG, {}, nodes)

    def parse_nodes(self):
        """Parse a sequence of sibling nodes, descending into element bodies.

        A body ends at a '</' lookahead, which must then be the matching end
        tag. At the top level the sequence ends with the input.
        """
        scanner = self.scanner
        void_elements = self.opts.void_elements
        max_depth = self.opts.max_depth
        root = _Frame(None, None, 0)
        stack = [root]

        while True:
            scanner.consume_whitespace()
            frame = stack[-1]

            if scanner.eof():
                if frame is root:
                    break
                self.fail(
                    "eof-in-element",
                    frame.offset,
                    message=f"Missing </{frame.tag_name}> before end of input",
                )

            if scanner.starts_with(END_TAG_OPEN):
                if frame is root:
                    self.fail("unexpected-end-tag")
                self.parse_end_tag(frame.tag_name)
                stack.pop()
                if self.env_debug:
                    self.debug(f"close </{frame.tag_name}>", indent=2 * len(stack))
                stack[-1].children.append(elem(frame.tag_name, frame.attributes, frame.children))
                continue

            if not self.starts_element():
                frame.children.append(self.parse_text())
                continue

            offset = scanner.pos
            if max_depth is not None and len(stack) > max_depth:
                self.fail("nesting-too-deep", offset, message=f"Nesting exceeds {max_depth} levels")
            tag_name, attributes = self.parse_start_tag()
            if self.env_debug:
                self.debug(f"open <{tag_name}> {attributes}", indent=2 * len(stack))
            if tag_name in void_elements:
                frame.children.append(elem(tag_name, attributes, []))
            else:
                stack.append(_Frame(tag_name, attributes, offset))

        return root.children

    def starts_element(self):
        """Dispatch: '<' opens an element unless it is followed by '!'."""
        if self.scanner.next_char() != "<":
            return False
        return not self.scanner.starts_with(MARKUP_DECLARATION_OPEN)

    def parse_start_tag(self):
        """Parse '<' tag_name attribute* '>' and return (tag_name, attributes)."""
        scanner = self.scanner
        scanner.consume_char()
        tag_name = self.parse_tag_name()
        attributes = self.parse_attributes()
        scanner.consume_char()
        return tag_name, attributes

    def parse_end_tag(self, tag_name):
        scanner = self.scanner
        start = scanner.pos
        scanner.advance(len(END_TAG_OPEN))
        name = scanner.consume_while(_is_name_char)
        if name != tag_name:
            self.fail(
                "mismatched-end-tag",
                start,
                message=f"Expected </{tag_name}> but found </{name}>",
            )
        if scanner.eof():
            self.fail("eof-in-tag")
        if scanner.next_char() != ">":
            self.fail("missing-end-tag-close")
        scanner.consume_char()

    def parse_tag_name(self, code="missing-tag-name"):
        """Parse a tag or attribute name: ASCII letters, digits and '-'."""
        name = self.scanner.consume_while(_is_name_char)
        if not name:
            if self.scanner.eof():
                self.fail("eof-in-tag")
            self.fail(code)
        return name

    def parse_attributes(self):
        """Parse name="value" pairs up to the closing '>'.

        A repeated name overwrites the earlier value.
        """
        scanner = self.scanner
        attributes = {}
        while True:
            scanner.consume_whitespace()
            char = scanner.next_char()
            if char is None:
                self.fail("eof-in-tag")
            if char == ">":
                break
            name, value = self.parse_attr()
            attributes[name] = value
        return attributes

    def parse_attr(self):
        scanner = self.scanner
        name = self.parse_tag_name("missing-attribute-name")
        char = scanner.next_char()
        if char is None:
            self.fail("eof-in-tag")
        if char != "=":
            self.fail("missing-attribute-equals", message=f"Expected '=' after {name!r}, found {char!r}")
        scanner.consume_char()
        return name, self.parse_attr_value()

    def parse_attr_value(self):
        scanner = self.scanner
        start = scanner.pos
        open_quote = scanner.next_char()
        if open_quote is None:
            self.fail("eof-in-tag")
        if open_quote not in ('"', "'"):
            self.fail("missing-attribute-quote")
        scanner.consume_char()
        value = scanner.consume_while(lambda c: c != open_quote)
        if scanner.eof():
            self.fail("eof-in-attribute-value", start)
        scanner.consume_char()
        return value

    def parse_text(self):
        """Parse a text run up to the next '<'.

        A comment at the very start of the run is dropped first. '/* */'
        blocks inside the run are dropped as well, joining the text around
        them. A '/*' later in the run with no '*/' after it is plain text.
        """
        scanner = self.scanner
        if not self.parse_comments() and scanner.starts_with(MARKUP_DECLARATION_OPEN):
            self.fail("unexpected-markup-declaration")

        open_delim, close_delim = BLOCK_COMMENT
        parts = []
        while True:
            parts.append(scanner.consume_while(_is_text_char))
            if scanner.starts_with(open_delim) and scanner.find(close_delim, len(open_delim)) != -1:
                self.skip_comment(open_delim, close_delim)
            elif scanner.next_char() == "/":
                parts.append(scanner.consume_char())
            else:
                break
        data = "".join(parts)
        if self.env_debug:
            self.debug(f"text {data[:30]!r}")
        return text(data)

    def parse_comments(self):
        """Drop one leading '/* */' or '<!-- -->' comment; True if one was found."""
        scanner = self.scanner
        if scanner.starts_with(BLOCK_COMMENT[0]):
            self.skip_comment(*BLOCK_COMMENT)
            return True
        if scanner.starts_with(MARKUP_COMMENT[0]):
            self.skip_comment(*MARKUP_COMMENT)
            return True
        return False

    def skip_comment(self, open_delim, close_delim):
        scanner = self.scanner
        start = scanner.pos
        scanner.advance(len(open_delim))
        body = scanner.consume_until(close_delim)
        if body is None:
            self.fail("eof-in-comment", start, message=f"No {close_delim!r} closes the comment")
        if self.env_debug:
            self.debug(f"skip comment {body[:30]!r}")


def _decode(data):
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        error = ParseError(
            "invalid-encoding",
            offset=exc.start,
            message=f"Byte {data[exc.start]:#04x} at offset {exc.start} is not valid UTF-8",
            kind=INVALID_INPUT,
        )
        raise MarkupError(error) from exc


class DomJSON:
    __slots__ = ("debug", "opts", "root")

    def __init__(self, html, *, debug=False, opts=None):
        self.debug = bool(debug)
        self.opts = opts or ParserOpts()

        if isinstance(html, (bytes, bytearray, memoryview)):
            html_str = _decode(bytes(html))
        elif html is not None:
            html_str = str(html)
        else:
            html_str = ""

        self.root = Parser(html_str, self.opts, debug=self.debug).parse()

    def to_json(self, sort_attributes=False):
        """Serialize the document. Legacy-escaped trees are emitted verbatim."""
        return to_json(self.root, sort_attributes=sort_attributes, escape=not self.opts.escape_on_scan)

    def to_test_format(self):
        return self.root.to_test_format()


def parse(html, opts=None):
    """Parse ``html`` and return the synthetic ``html`` root element.

    Raises MarkupError on malformed input, including an end tag at the top
    level with no element open: the rest of the document is never silently
    dropped.

    With ``opts.escape_on_scan`` the returned tree already holds escaped
    strings; serialize it with ``root.to_json(escape=False)``, or use
    ``DomJSON(html, opts=opts).to_json()`` which does so itself.
    """
    return DomJSON(html, opts=opts).root
