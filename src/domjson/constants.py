"""Markup constants

Tag sets, delimiters and escape tables shared by the scanner, parser and
serializer.

Usage:
    from domjson.constants import VOID_ELEMENTS, ROOT_TAG
"""

# Elements closed by their start tag: no body, no end tag expected.
VOID_ELEMENTS = frozenset({
    "hr",
    "img",
    "input",
    "link",
    "meta",
})

# Tag name of the synthetic element wrapping every parsed document.
ROOT_TAG = "html"

END_TAG_OPEN = "</"
MARKUP_DECLARATION_OPEN = "<!"

# Unicode White_Space characters. str.isspace() and a bare str.strip() also
# treat the U+001C..U+001F separators as whitespace; these do not.
WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)

# (open, close) delimiter pairs for elided comment blocks
BLOCK_COMMENT = ("/*", "*/")
MARKUP_COMMENT = ("<!--", "-->")

# Substitutions applied while scanning in legacy escaping mode
SCAN_ESCAPES = {
    '"': '\\"',
    "\t": "\\t",
    "\n": "\\n",
}

# JSON string escapes used by the serializer. Remaining control characters
# below U+0020 are written as \u00XX.
_JSON_SHORT_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

JSON_ESCAPE_TABLE = str.maketrans(
    {
        **{chr(code): f"\\u{code:04x}" for code in range(0x20)},
        **_JSON_SHORT_ESCAPES,
    }
)
