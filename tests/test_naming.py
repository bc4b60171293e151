"""Tests for name and text helpers."""

import pytest

from gql_scaffold.core.naming import (
    camel_lower,
    indent,
    oneline,
    ruby_literal,
    ruby_string,
    snake_case,
    underscore,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("QueryRoot", "query_root"),
        ("lastCheckout", "last_checkout"),
        ("pageInfo", "page_info"),
        ("title", "title"),
    ],
)
def test_snake_case(name, expected):
    assert snake_case(name) == expected


def test_underscore():
    assert underscore("Types::WidgetV2") == "types/widget_v2"
    assert underscore("Interfaces::BaseInterface") == "interfaces/base_interface"


def test_camel_lower():
    assert camel_lower("QueryRoot") == "queryRoot"
    assert camel_lower("") == ""


class TestIndent:
    """Tests for indent."""

    def test_indents_lines(self):
        assert indent(2, "a\nb") == "    a\n    b"

    def test_blank_lines_are_emptied(self):
        assert indent(1, "\na\n   \nb\n") == "\n  a\n\n  b"


def test_oneline():
    assert oneline("\nFirst line\nsecond line  \n") == "First line second line"
    assert oneline(None) == ""


class TestRubyValues:
    """Tests for Ruby literal rendering."""

    def test_ruby_string(self):
        assert ruby_string(None) == "nil"
        assert ruby_string("A shop") == "%q{A shop}"
        assert ruby_string("Use {braces} \\ here") == "%q{Use \\{braces\\} \\\\ here}"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "nil"),
            ("10", "10"),
            ("1.5", "1.5"),
            ("true", "true"),
            ("false", "false"),
            ("TITLE", "'TITLE'"),
            ('"quoted"', "'\"quoted\"'"),
            ("it's", "'it\\'s'"),
        ],
    )
    def test_ruby_literal(self, value, expected):
        assert ruby_literal(value) == expected
