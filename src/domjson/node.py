import enum

from .constants import WHITESPACE
from .serialize import to_json


class NodeType(enum.Enum):
    ELEMENT = "element"
    TEXT = "text"


class ElementData:
    """Payload of an element node: tag name plus attribute mapping."""

    __slots__ = ("attributes", "tag_name")

    kind = NodeType.ELEMENT

    def __init__(self, tag_name, attributes=None):
        self.tag_name = tag_name
        self.attributes = attributes if attributes is not None else {}

    def id(self):
        """Return the ``id`` attribute value, or None when absent."""
        return self.attributes.get("id")

    def classes(self):
        """Return the set of class names from the ``class`` attribute.

        The value is split on single spaces. Empty tokens left by repeated
        spaces are dropped.
        """
        classlist = self.attributes.get("class")
        if classlist is None:
            return set()
        return {name for name in classlist.split(" ") if name}

    def __repr__(self):
        return f"ElementData({self.tag_name!r}, {self.attributes!r})"


class TextData:
    __slots__ = ("data",)

    kind = NodeType.TEXT

    def __init__(self, data):
        self.data = data

    def __repr__(self):
        return f"TextData({self.data!r})"


class Node:
    """A tree node.
    - node_type: the payload, an ElementData or TextData instance
    - children: list of child Nodes, owned exclusively by this node

    Nodes keep no parent or sibling references; a parsed tree is built
    bottom-up and never mutated afterwards.
    """

    __slots__ = ("children", "node_type")

    def __init__(self, node_type, children=None):
        self.node_type = node_type
        self.children = children if children is not None else []

    @property
    def is_element(self):
        return self.node_type.kind is NodeType.ELEMENT

    @property
    def is_text(self):
        return self.node_type.kind is NodeType.TEXT

    @property
    def tag_name(self):
        """Tag name for elements, None for text nodes."""
        return self.node_type.tag_name if self.is_element else None

    @property
    def attributes(self):
        return self.node_type.attributes if self.is_element else {}

    @property
    def data(self):
        """Raw text for text nodes, None for elements."""
        return self.node_type.data if self.is_text else None

    def id(self):
        return self.node_type.id() if self.is_element else None

    def classes(self):
        return self.node_type.classes() if self.is_element else set()

    def to_json(self, *, sort_attributes=False, escape=True):
        """Serialize this subtree. Pass ``escape=False`` for trees parsed
        with ``escape_on_scan``, or their strings are escaped twice."""
        return to_json(self, sort_attributes=sort_attributes, escape=escape)

    def __repr__(self):
        if self.is_text:
            return f"Node(#text='{self.data[:30]}')"
        return f"Node(<{self.tag_name}>, children={len(self.children)})"

    def to_test_format(self, indent=0):
        if self.is_text:
            return f'| {" " * indent}"{self.data.strip(WHITESPACE)}"'

        result = f"| {' ' * indent}<{self.tag_name}>"
        # Attributes on their own lines, sorted for stable output
        for key, value in sorted(self.attributes.items()):
            result += f'\n| {" " * (indent + 2)}{key}="{value}"'

        if self.children:
            parts = [result]
            parts.extend(child.to_test_format(indent + 2) for child in self.children)
            return "\n".join(parts)
        return result

    def iter_descendants(self):
        """Yield every node below this one in document order."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def text(data):
    """Build a text node holding ``data`` unmodified."""
    return Node(TextData(data))


def elem(tag_name, attributes=None, children=None):
    """Build an element node. The tag name is not validated."""
    return Node(ElementData(tag_name, attributes), children)
