"""Tests for parse failures and error reporting."""

import unittest

from domjson import INVALID_INPUT, MALFORMED_MARKUP, DomJSON, MarkupError, ParseError, parse


class TestMalformedMarkup(unittest.TestCase):
    """Every structural violation aborts the parse with a typed error."""

    def assert_fails(self, html, code):
        with self.assertRaises(MarkupError) as ctx:
            parse(html)
        error = ctx.exception.error
        assert error.code == code, f"{html!r}: expected {code}, got {error.code}"
        assert error.kind == MALFORMED_MARKUP
        return error

    def test_mismatched_end_tag(self):
        error = self.assert_fails("<p>x</div>", "mismatched-end-tag")
        assert error.offset == 4
        assert "</p>" in error.message
        assert "</div>" in error.message

    def test_missing_end_tag(self):
        error = self.assert_fails("<div><p>text</p>", "eof-in-element")
        # Reported at the start tag of the unclosed element
        assert error.offset == 0

    def test_end_tag_without_open_element(self):
        self.assert_fails("<p></p></div>", "unexpected-end-tag")

    def test_stray_end_tag_does_not_drop_rest_of_document(self):
        error = self.assert_fails("<p></p></div><a>kept?</a>", "unexpected-end-tag")
        assert error.offset == 7

    def test_end_tag_missing_close_bracket(self):
        self.assert_fails("<p></p x>", "missing-end-tag-close")

    def test_end_tag_cut_short(self):
        self.assert_fails("<p></p", "eof-in-tag")

    def test_missing_equals(self):
        self.assert_fails("<input disabled>", "missing-attribute-equals")

    def test_space_before_equals_is_rejected(self):
        self.assert_fails('<p id ="x"></p>', "missing-attribute-equals")

    def test_unquoted_value(self):
        self.assert_fails("<p id=x></p>", "missing-attribute-quote")

    def test_unterminated_value(self):
        error = self.assert_fails('<p id="x></p>', "eof-in-attribute-value")
        assert error.offset == 6

    def test_self_closing_syntax_is_not_supported(self):
        self.assert_fails("<img/>", "missing-attribute-name")

    def test_missing_tag_name(self):
        self.assert_fails("< p></p>", "missing-tag-name")

    def test_lone_open_bracket_at_end(self):
        self.assert_fails("text <", "eof-in-tag")

    def test_eof_inside_start_tag(self):
        self.assert_fails('<p id="x"', "eof-in-tag")

    def test_eof_after_equals(self):
        self.assert_fails("<p id=", "eof-in-tag")

    def test_unterminated_block_comment(self):
        error = self.assert_fails("<p>/* never closed</p>", "eof-in-comment")
        assert error.offset == 3

    def test_unterminated_markup_comment(self):
        self.assert_fails("<!-- never closed", "eof-in-comment")

    def test_doctype_is_rejected(self):
        self.assert_fails("<!DOCTYPE html><p></p>", "unexpected-markup-declaration")

    def test_no_partial_tree_on_failure(self):
        doc = None
        with self.assertRaises(MarkupError):
            doc = DomJSON("<p>ok</p><b>broken</i>")
        assert doc is None


class TestErrorLocation(unittest.TestCase):
    def test_line_and_column(self):
        html = "<div>\n  <p>x</span>\n</div>"
        with self.assertRaises(MarkupError) as ctx:
            parse(html)
        error = ctx.exception.error
        assert error.line == 2
        assert error.column == 7

    def test_exception_carries_source_line(self):
        with self.assertRaises(MarkupError) as ctx:
            parse("<a>\n<b></c>\n</a>")
        exc = ctx.exception
        assert exc.lineno == 2
        assert exc.offset == 4
        assert exc.text == "<b></c>"
        assert "mismatched-end-tag" in exc.msg

    def test_markup_error_is_a_syntax_error(self):
        with self.assertRaises(SyntaxError):
            parse("<p>")


class TestInvalidInput(unittest.TestCase):
    def test_invalid_utf8_bytes(self):
        with self.assertRaises(MarkupError) as ctx:
            DomJSON(b"<p>\xff</p>")
        error = ctx.exception.error
        assert error.kind == INVALID_INPUT
        assert error.code == "invalid-encoding"
        assert error.offset == 3
        assert error.line is None
        assert isinstance(ctx.exception.__cause__, UnicodeDecodeError)


class TestParseError(unittest.TestCase):
    def test_parse_error_str(self):
        error = ParseError("mismatched-end-tag", offset=4, line=1, column=5, message="bad")
        assert str(error) == "(1,5): mismatched-end-tag - bad"

    def test_parse_error_str_without_location(self):
        error = ParseError("invalid-encoding", kind=INVALID_INPUT)
        assert str(error) == "invalid-encoding - Input bytes are not valid UTF-8"

    def test_parse_error_repr(self):
        error = ParseError("eof-in-tag", offset=3, line=1, column=4)
        assert "eof-in-tag" in repr(error)
        assert "line=1" in repr(error)
        assert "column=4" in repr(error)

    def test_default_message_comes_from_code(self):
        assert ParseError("eof-in-comment").message == "Unterminated comment block"
        assert ParseError("custom-code").message == "custom-code"

    def test_parse_error_equality(self):
        e1 = ParseError("eof-in-tag", offset=3, line=1, column=4)
        e2 = ParseError("eof-in-tag", offset=3, line=1, column=4, message="other wording")
        e3 = ParseError("eof-in-tag", offset=5, line=1, column=6)
        assert e1 == e2
        assert e1 != e3
        assert len({e1, e2, e3}) == 2
        assert e1 != "eof-in-tag"


if __name__ == "__main__":
    unittest.main()
