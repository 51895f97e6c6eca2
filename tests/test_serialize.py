import json
import unittest

from domjson import DomJSON, ParserOpts, elem, parse, text, to_json


class TestJsonGrammar(unittest.TestCase):
    def test_text_node(self):
        assert to_json(text("  hi  ")) == '{"node_type": "text", "data": "hi"}'

    def test_empty_element(self):
        assert to_json(elem("p")) == '{"node_type": "element", "tag_name": "p", "attributes": {}, "children": []}'

    def test_element_with_attributes_and_children(self):
        node = elem("p", {"id": "x", "class": "a"}, [text("one"), elem("br")])
        expected = (
            '{"node_type": "element", "tag_name": "p", "attributes": {"id": "x","class": "a"}, "children": ['
            '{"node_type": "text", "data": "one"},'
            '{"node_type": "element", "tag_name": "br", "attributes": {}, "children": []}'
            "]}"
        )
        assert to_json(node) == expected

    def test_node_method_delegates(self):
        node = elem("p", {}, [text("x")])
        assert node.to_json() == to_json(node)

    def test_parsed_document_shape(self):
        data = json.loads(DomJSON('<p id="x">hi</p>').to_json())
        assert data == {
            "node_type": "element",
            "tag_name": "html",
            "attributes": {},
            "children": [
                {
                    "node_type": "element",
                    "tag_name": "p",
                    "attributes": {"id": "x"},
                    "children": [{"node_type": "text", "data": "hi"}],
                },
            ],
        }


class TestAttributeOrder(unittest.TestCase):
    def test_insertion_order_by_default(self):
        node = elem("a", {"z": "1", "a": "2"})
        assert '"attributes": {"z": "1","a": "2"}' in to_json(node)

    def test_sorted_attributes(self):
        node = elem("a", {"z": "1", "m": "3", "a": "2"})
        assert '"attributes": {"a": "2","m": "3","z": "1"}' in to_json(node, sort_attributes=True)

    def test_document_sort_attributes(self):
        doc = DomJSON('<a z="1" a="2"></a>')
        assert '{"a": "2","z": "1"}' in doc.to_json(sort_attributes=True)


class TestEscaping(unittest.TestCase):
    def test_quotes_backslashes_and_controls_are_escaped(self):
        node = elem("p", {"title": 'say "hi"\\'}, [text('a "b"\tc\nd\re\x01f')])
        out = to_json(node)
        assert '"title": "say \\"hi\\"\\\\"' in out
        assert '"data": "a \\"b\\"\\tc\\nd\\re\\u0001f"' in out
        data = json.loads(out)
        assert data["attributes"]["title"] == 'say "hi"\\'
        assert data["children"][0]["data"] == 'a "b"\tc\nd\re\x01f'

    def test_non_ascii_is_written_as_is(self):
        assert to_json(text("ü✓")) == '{"node_type": "text", "data": "ü✓"}'

    def test_parsed_output_loads_as_json(self):
        html = (
            "<div class='a \"q\"'>\n"
            "  <p>line one\n\tline two</p>\n"
            '  <img src="x.png" alt="back\\slash">\n'
            "  <!-- dropped -->tail\n"
            "</div>"
        )
        data = json.loads(DomJSON(html).to_json())
        div = data["children"][0]
        assert div["attributes"]["class"] == 'a "q"'
        assert div["children"][0]["children"][0]["data"] == "line one\n\tline two"
        assert div["children"][1]["attributes"]["alt"] == "back\\slash"
        assert div["children"][2]["data"] == "tail"

    def test_legacy_escaping_emits_scanned_text_verbatim(self):
        doc = DomJSON('<p title=\'a "b"\'>x\ty</p>', opts=ParserOpts(escape_on_scan=True))
        out = doc.to_json()
        assert '"title": "a \\"b\\""' in out
        assert '"data": "x\\ty"' in out
        data = json.loads(out)
        assert data["children"][0]["children"][0]["data"] == "x\ty"

    def test_escape_disabled_writes_strings_verbatim(self):
        assert to_json(text('a"b'), escape=False) == '{"node_type": "text", "data": "a"b"}'

    def test_parsed_legacy_tree_serializes_with_escape_disabled(self):
        opts = ParserOpts(escape_on_scan=True)
        root = parse("<p>a\tb</p>", opts)
        assert root.to_json(escape=False) == DomJSON("<p>a\tb</p>", opts=opts).to_json()
        assert '"data": "a\\tb"' in root.to_json(escape=False)
        assert '"data": "a\\\\tb"' in root.to_json()

    def test_trim_keeps_information_separators(self):
        assert to_json(text(" \x1c x \x1f\n")) == '{"node_type": "text", "data": "\\u001c x \\u001f"}'


class TestDeepTrees(unittest.TestCase):
    def test_serializes_deep_tree(self):
        depth = 3000
        root = parse("<b>" * depth + "</b>" * depth)
        data = root.to_json()
        assert data.count('"tag_name": "b"') == depth
        assert data.endswith("]}" * (depth + 1))


if __name__ == "__main__":
    unittest.main()
