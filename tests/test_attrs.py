"""Tests for attribute list rendering."""

import pytest

from pugsrc.attrs import render_attribute_blocks, render_attrs
from pugsrc.nodes import Attribute


class TestShorthand:
    def test_constant_class(self) -> None:
        assert render_attrs([Attribute("class", "'btn'")]) == ".btn"

    def test_constant_id(self) -> None:
        assert render_attrs([Attribute("id", '"main"')]) == "#main"

    def test_folded_expression(self) -> None:
        assert render_attrs([Attribute("class", "'btn-' + 'primary'")]) == ".btn-primary"

    def test_id_before_classes_before_list(self) -> None:
        attrs = [
            Attribute("href", "url"),
            Attribute("class", "'a'"),
            Attribute("id", "'x'"),
            Attribute("class", "'b'"),
        ]
        assert render_attrs(attrs) == "#x.a.b(href=url)"

    def test_second_id_stays_in_list(self) -> None:
        assert render_attrs([Attribute("id", "'a'"), Attribute("id", "'b'")]) == "#a(id='b')"

    def test_escaping_flag_is_ignored_for_shorthand(self) -> None:
        assert render_attrs([Attribute("id", "'box'", escaped=False)]) == "#box"

    @pytest.mark.parametrize(
        "value",
        ["'btn primary'", "'1a'", "'--x'", "'a.b'", "''", "1", "classes", "null"],
    )
    def test_class_values_kept_in_list(self, value: str) -> None:
        assert render_attrs([Attribute("class", value)]) == f"(class={value})"

    def test_leading_dash_class(self) -> None:
        assert render_attrs([Attribute("class", "'-foo'")]) == ".-foo"

    def test_shorthand_ignores_escaped_flag(self) -> None:
        assert render_attrs([Attribute("class", "'x'", escaped=True)]) == ".x"
        assert render_attrs([Attribute("class", "'x'", escaped=False)]) == ".x"

    @pytest.mark.parametrize("value", ["'a.b'", "'a b'", "''", "false", "user.id"])
    def test_id_values_kept_in_list(self, value: str) -> None:
        assert render_attrs([Attribute("id", value)]) == f"(id={value})"

    def test_numeric_id(self) -> None:
        assert render_attrs([Attribute("id", "42")]) == "#42"


class TestAttributeList:
    def test_empty(self) -> None:
        assert render_attrs([]) == ""

    def test_source_order(self) -> None:
        attrs = [Attribute("type", "'text'"), Attribute("name", "field"), Attribute("value", "v")]
        assert render_attrs(attrs) == "(type='text' name=field value=v)"

    def test_unescaped(self) -> None:
        assert render_attrs([Attribute("title", "raw", escaped=False)]) == "(title!=raw)"

    def test_boolean_true_is_bare(self) -> None:
        assert render_attrs([Attribute("checked", "true")]) == "(checked)"

    def test_boolean_false_keeps_value(self) -> None:
        assert render_attrs([Attribute("checked", "false")]) == "(checked=false)"

    def test_boolean_true_expression_is_bare(self) -> None:
        assert render_attrs([Attribute("disabled", "1 < 2")]) == "(disabled)"

    def test_dashed_name_is_bare(self) -> None:
        assert render_attrs([Attribute("data-x", "1")]) == "(data-x=1)"

    @pytest.mark.parametrize("name", ["(click)", "[value]", "@click", ":foo", "a=b"])
    def test_special_names_are_quoted(self, name: str) -> None:
        assert render_attrs([Attribute(name, "f()")]) == f"('{name}'=f())"

    def test_preferred_double_quote(self) -> None:
        assert render_attrs([Attribute("(click)", "f()")], preferred_quote='"') == '("(click)"=f())'

    def test_quote_in_name_uses_other_quote(self) -> None:
        assert render_attrs([Attribute("a'b", "1")]) == "(\"a'b\"=1)"

    def test_backslash_in_name_is_escaped(self) -> None:
        assert render_attrs([Attribute("@a\\b", "1")]) == "('@a\\\\b'=1)"


class TestAttributeBlocks:
    def test_empty(self) -> None:
        assert render_attribute_blocks(()) == ""

    def test_each_block(self) -> None:
        assert render_attribute_blocks(("obj", "{a: 1}")) == "&attributes(obj)&attributes({a: 1})"
