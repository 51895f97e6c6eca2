"""Parse error records and the exception that carries them."""

from __future__ import annotations

MALFORMED_MARKUP = "malformed-markup"
INVALID_INPUT = "invalid-input"

ERROR_MESSAGES = {
    "missing-tag-name": "Expected a tag name made of letters, digits or '-'",
    "missing-attribute-name": "Expected an attribute name or '>'",
    "missing-attribute-equals": "Expected '=' after attribute name",
    "missing-attribute-quote": "Attribute value must be quoted with '\"' or \"'\"",
    "eof-in-attribute-value": "Unterminated quoted attribute value",
    "eof-in-tag": "End of input inside a tag",
    "eof-in-comment": "Unterminated comment block",
    "eof-in-element": "End of input before the element's end tag",
    "mismatched-end-tag": "End tag does not match the open element",
    "missing-end-tag-close": "Expected '>' to close the end tag",
    "unexpected-end-tag": "End tag with no open element",
    "unexpected-markup-declaration": "Only '<!--' comments are supported after '<!'",
    "nesting-too-deep": "Element nesting exceeds the configured maximum depth",
    "invalid-encoding": "Input bytes are not valid UTF-8",
}


class ParseError:
    """Represents a parse error with location information.

    ``offset`` is the character index in the source text where the problem
    was detected; ``line`` and ``column`` are 1-based.
    """

    __slots__ = ("code", "column", "kind", "line", "message", "offset")

    def __init__(self, code, offset=None, line=None, column=None, message=None, kind=MALFORMED_MARKUP):
        self.code = code
        self.kind = kind
        self.offset = offset
        self.line = line
        self.column = column
        self.message = message or ERROR_MESSAGES.get(code, code)

    def __repr__(self):
        if self.line is not None and self.column is not None:
            return f"ParseError({self.code!r}, line={self.line}, column={self.column})"
        return f"ParseError({self.code!r})"

    def __str__(self):
        if self.line is not None and self.column is not None:
            return f"({self.line},{self.column}): {self.code} - {self.message}"
        return f"{self.code} - {self.message}"

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.code, self.kind, self.offset, self.line, self.column) == (
            other.code,
            other.kind,
            other.offset,
            other.line,
            other.column,
        )

    def __hash__(self):
        return hash((self.code, self.kind, self.offset, self.line, self.column))


class MarkupError(SyntaxError):
    """Raised when the input cannot be parsed.

    Inherits from SyntaxError so tracebacks show the offending source line
    with a caret under the reported column.
    """

    error: ParseError

    def __init__(self, error: ParseError, source_line: str | None = None) -> None:
        self.error = error
        super().__init__(str(error))
        self.msg = f"{error.code}: {error.message}"
        self.filename = "<markup>"
        self.lineno = error.line
        self.offset = error.column
        self.text = source_line
