"""JSON serialization for domjson trees."""

from .constants import JSON_ESCAPE_TABLE, WHITESPACE


def _escape_string(value):
    if not value:
        return ""
    return value.translate(JSON_ESCAPE_TABLE)


def _verbatim(value):
    return value or ""


def _attributes_to_json(attributes, quote, sort_attributes):
    items = sorted(attributes.items()) if sort_attributes else attributes.items()
    return ",".join(f'"{quote(name)}": "{quote(value)}"' for name, value in items)


def to_json(node, *, sort_attributes=False, escape=True):
    """Render ``node`` and its subtree as a JSON-shaped string.

    Elements become ``{"node_type": "element", "tag_name": ..., "attributes":
    {...}, "children": [...]}`` and text nodes ``{"node_type": "text",
    "data": ...}`` with the text trimmed at both ends.

    With ``escape=True`` every embedded string is JSON-escaped. Pass
    ``escape=False`` for trees parsed with ``escape_on_scan``, whose strings
    were already escaped while scanning.

    ``sort_attributes`` orders attribute keys for reproducible output;
    otherwise they appear in insertion order.
    """
    quote = _escape_string if escape else _verbatim
    parts = []
    # Explicit stack so serialization depth is not bound by the recursion limit
    stack = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue

        if item.is_text:
            parts.append(f'{{"node_type": "text", "data": "{quote(item.data.strip(WHITESPACE))}"}}')
            continue

        attrs = _attributes_to_json(item.attributes, quote, sort_attributes)
        parts.append(
            f'{{"node_type": "element", "tag_name": "{quote(item.tag_name)}", '
            f'"attributes": {{{attrs}}}, "children": ['
        )
        stack.append("]}")
        children = item.children
        for index in range(len(children) - 1, -1, -1):
            stack.append(children[index])
            if index:
                stack.append(",")
    return "".join(parts)
