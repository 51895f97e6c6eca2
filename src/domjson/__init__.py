from .constants import VOID_ELEMENTS
from .errors import INVALID_INPUT, MALFORMED_MARKUP, MarkupError, ParseError
from .node import ElementData, Node, NodeType, TextData, elem, text
from .parser import DomJSON, Parser, ParserOpts, parse
from .serialize import to_json

__all__ = [
    "INVALID_INPUT",
    "MALFORMED_MARKUP",
    "VOID_ELEMENTS",
    "DomJSON",
    "ElementData",
    "MarkupError",
    "Node",
    "NodeType",
    "ParseError",
    "Parser",
    "ParserOpts",
    "TextData",
    "elem",
    "parse",
    "text",
    "to_json",
]
