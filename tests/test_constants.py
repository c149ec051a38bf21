"""Tests for constant folding of attribute expressions."""

import math

import pytest

from pugsrc.constants import UNDEFINED, Constant, fold_constant, to_js_string, truthy


class TestLiterals:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("'btn'", "btn"),
            ('"btn"', "btn"),
            ("`btn`", "btn"),
            ("'it\\'s'", "it's"),
            ("'\\u0041\\x42'", "AB"),
            ("42", 42),
            ("1.5", 1.5),
            ("3.", 3),
            ("0x10", 16),
            ("0b101", 5),
            ("1e3", 1000),
            ("true", True),
            ("false", False),
        ],
    )
    def test_values(self, source: str, expected: object) -> None:
        assert fold_constant(source) == Constant(expected)

    def test_null_is_a_constant(self) -> None:
        assert fold_constant("null") == Constant(None)

    def test_undefined(self) -> None:
        folded = fold_constant("undefined")
        assert folded is not None
        assert folded.value is UNDEFINED

    def test_array_and_object(self) -> None:
        assert fold_constant("[1, 'a']") == Constant([1, "a"])
        assert fold_constant("{a: 1, 'b': 2}") == Constant({"a": 1, "b": 2})

    def test_array_hole(self) -> None:
        folded = fold_constant("[1,,2]")
        assert folded is not None
        assert folded.value[1] is UNDEFINED


class TestOperators:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("'a' + 'b'", "ab"),
            ("'n' + 1", "n1"),
            ("1 + 2 * 3", 7),
            ("(1 + 2) * 3", 9),
            ("2 ** 3 ** 2", 512),
            ("7 % 4", 3),
            ("-'3'", -3),
            ("!0", True),
            ("!!'x'", True),
            ("typeof 'x'", "string"),
            ("typeof null", "object"),
            ("1 < 2", True),
            ("'b' > 'a'", True),
            ("1 == '1'", True),
            ("1 === '1'", False),
            ("null == undefined", True),
            ("null === undefined", False),
            ("0 || 'x'", "x"),
            ("1 && 'y'", "y"),
            ("null ?? 'd'", "d"),
            ("0 ?? 'd'", 0),
            ("'' ? 'a' : 'b'", "b"),
            ("[1, 2] + ''", "1,2"),
        ],
    )
    def test_evaluates(self, source: str, expected: object) -> None:
        assert fold_constant(source) == Constant(expected)

    def test_division_by_zero(self) -> None:
        assert fold_constant("1 / 0") == Constant(math.inf)
        folded = fold_constant("0 / 0")
        assert folded is not None
        assert math.isnan(folded.value)


class TestNotConstant:
    @pytest.mark.parametrize(
        "source",
        [
            "",
            "user",
            "user.name",
            "f()",
            "a = 1",
            "`a${b}`",
            "'unterminated",
            "1 +",
            "[1, 2",
            "{[k]: 1}",
            "new Date()",
        ],
    )
    def test_returns_none(self, source: str) -> None:
        assert fold_constant(source) is None

    def test_non_string_source(self) -> None:
        assert fold_constant(None) is None  # type: ignore[arg-type]


class TestJsSemantics:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("x", "x"),
            (True, "true"),
            (None, "null"),
            (UNDEFINED, "undefined"),
            (3, "3"),
            (1.5, "1.5"),
            (2.0, "2"),
            (math.nan, "NaN"),
            (-math.inf, "-Infinity"),
            ([1, None, "a"], "1,,a"),
            ({"a": 1}, "[object Object]"),
        ],
    )
    def test_to_js_string(self, value: object, expected: str) -> None:
        assert to_js_string(value) == expected

    @pytest.mark.parametrize("value", ["", 0, 0.0, math.nan, None, UNDEFINED, False])
    def test_falsy(self, value: object) -> None:
        assert truthy(value) is False

    @pytest.mark.parametrize("value", ["0", " ", 1, -1, [], {}, True])
    def test_truthy(self, value: object) -> None:
        assert truthy(value) is True
