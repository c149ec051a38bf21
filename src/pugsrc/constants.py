"""Constant folding for attribute value expressions.

Attribute values in the tree are raw JavaScript source. The generator only
needs to know whether a value is a compile-time constant (to emit ``.cls``
and ``#id`` shorthand, or a bare boolean attribute), so this module
evaluates the literal subset of JavaScript and gives up on anything that
would need a runtime: identifiers, calls, member access, assignments.

Supported:
- string literals (single, double, template without ``${}``)
- numbers (decimal, hex, octal, binary), true, false, null, undefined
- array and object literals with literal keys
- unary ``! - + typeof``, binary ``+ - * / % **``, comparisons, ``== != === !==``
- ``&& || ??``, conditional ``?:``, parentheses

Folding never raises: ``fold_constant`` returns None for anything it cannot
prove constant.

Thread Safety:
All functions are pure, safe to call from any thread.

"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from pugsrc.utils.logger import get_logger

logger = get_logger(__name__)


class _Undefined:
    """JavaScript ``undefined``."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "undefined"


UNDEFINED: Any = _Undefined()


@dataclass(frozen=True, slots=True)
class Constant:
    """A folded value.

    Wrapped so that a constant ``null`` (None) is distinguishable from
    "not a constant".

    """

    value: Any


class _NotConstant(Exception):
    pass


# =============================================================================
# Tokenizer
# =============================================================================

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<num>0[xX][0-9a-fA-F]+|0[bB][01]+|0[oO][0-7]+|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<str>'(?:[^'\\\n]|\\[\s\S])*'|"(?:[^"\\\n]|\\[\s\S])*")
    |(?P<tmpl>`(?:[^`\\$]|\\[\s\S]|\$(?!\{))*`)
    |(?P<name>[A-Za-z_$][\w$]*)
    |(?P<op>===|!==|\*\*|==|!=|<=|>=|&&|\|\||\?\?|[-+*/%<>!(){}\[\],:?])
    """,
    re.VERBOSE | re.ASCII,
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")


def _unescape(body: str) -> str:
    def replace(match: re.Match[str]) -> str:
        seq = match.group(1)
        if seq.startswith("u{"):
            return chr(int(seq[2:-1], 16))
        if seq[0] in "ux" and len(seq) > 1:
            return chr(int(seq[1:], 16))
        if seq in ("\n", "\r\n", "\r", "\u2028", "\u2029"):
            return ""  # line continuation
        return _SIMPLE_ESCAPES.get(seq, seq)

    return _ESCAPE_RE.sub(replace, body)


def _tokenize(source: str) -> list[tuple[str, Any]]:
    tokens: list[tuple[str, Any]] = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            raise _NotConstant
        pos = match.end()
        kind = match.lastgroup
        text = match.group()
        if kind == "ws":
            continue
        if kind == "num":
            tokens.append(("value", _parse_number(text)))
        elif kind in ("str", "tmpl"):
            tokens.append(("value", _unescape(text[1:-1])))
        elif kind == "name":
            tokens.append(("name", text))
        else:
            tokens.append(("op", text))
    tokens.append(("end", None))
    return tokens


def _parse_number(text: str) -> int | float:
    prefix = text[:2].lower()
    if prefix in ("0x", "0b", "0o"):
        return int(text, 0)
    if re.fullmatch(r"\d+", text):
        return int(text)
    return _normalize_number(float(text))


# =============================================================================
# JavaScript value semantics
# =============================================================================


def _normalize_number(value: float) -> int | float:
    if isinstance(value, float) and value.is_integer() and abs(value) < 2**53:
        return int(value)
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_js_string(value: Any) -> str:
    """Convert a folded value to its JavaScript string form (``String(v)``)."""
    if isinstance(value, str):
        return value
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, list):
        return ",".join("" if item is None or item is UNDEFINED else to_js_string(item) for item in value)
    return "[object Object]"


def _to_number(value: Any) -> int | float:
    if _is_number(value):
        return value
    if isinstance(value, bool):
        return int(value)
    if value is None:
        return 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return _parse_number(text) if re.fullmatch(r"[0-9a-fA-FxXbBoO.eE+-]+", text) else math.nan
        except ValueError:
            return math.nan
    if isinstance(value, list):
        return _to_number(to_js_string(value))
    return math.nan


def truthy(value: Any) -> bool:
    """JavaScript truthiness of a folded value."""
    if value is None or value is UNDEFINED or value is False:
        return False
    if _is_number(value):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def _typeof(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if _is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def _strict_equals(a: Any, b: Any) -> bool:
    if _is_number(a) and _is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    if isinstance(a, (list, dict)):
        return a is b
    return a == b


def _loose_equals(a: Any, b: Any) -> bool:
    nullish = (None, UNDEFINED)
    if a in nullish or b in nullish:
        return a in nullish and b in nullish
    if type(a) is type(b) or (_is_number(a) and _is_number(b)):
        return _strict_equals(a, b)
    if isinstance(a, (list, dict)) or isinstance(b, (list, dict)):
        a = to_js_string(a) if isinstance(a, (list, dict)) else a
        b = to_js_string(b) if isinstance(b, (list, dict)) else b
        return _loose_equals(a, b)
    return _to_number(a) == _to_number(b)


def _divide(a: float, b: float) -> int | float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1, b)
    return _normalize_number(a / b)


def _remainder(a: float, b: float) -> int | float:
    if b == 0 or math.isinf(a):
        return math.nan
    if math.isinf(b):
        return a
    return _normalize_number(math.fmod(a, b))


def _add(a: Any, b: Any) -> Any:
    if isinstance(a, (list, dict)):
        a = to_js_string(a)
    if isinstance(b, (list, dict)):
        b = to_js_string(b)
    if isinstance(a, str) or isinstance(b, str):
        return to_js_string(a) + to_js_string(b)
    return _normalize_number(_to_number(a) + _to_number(b))


def _compare(op: str, a: Any, b: Any) -> bool:
    if not (isinstance(a, str) and isinstance(b, str)):
        a, b = _to_number(a), _to_number(b)
    if op == "<":
        return a < b
    if op == ">":
        return a > b
    if op == "<=":
        return a <= b
    return a >= b


def _binary(op: str, a: Any, b: Any) -> Any:
    if op == "+":
        return _add(a, b)
    if op in ("<", ">", "<=", ">="):
        return _compare(op, a, b)
    if op == "===":
        return _strict_equals(a, b)
    if op == "!==":
        return not _strict_equals(a, b)
    if op == "==":
        return _loose_equals(a, b)
    if op == "!=":
        return not _loose_equals(a, b)
    x, y = _to_number(a), _to_number(b)
    if op == "-":
        return _normalize_number(x - y)
    if op == "*":
        return _normalize_number(x * y)
    if op == "/":
        return _divide(x, y)
    if op == "%":
        return _remainder(x, y)
    return _normalize_number(math.pow(x, y))  # "**"


# =============================================================================
# Parser / evaluator
# =============================================================================

_KEYWORDS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": UNDEFINED,
    "NaN": math.nan,
    "Infinity": math.inf,
}

_BINARY_LEVELS: tuple[tuple[str, ...], ...] = (
    ("==", "!=", "===", "!=="),
    ("<", ">", "<=", ">="),
    ("+", "-"),
    ("*", "/", "%"),
)


class _Evaluator:
    """Recursive-descent evaluator over the literal subset of JavaScript."""

    __slots__ = ("_pos", "_tokens")

    def __init__(self, tokens: list[tuple[str, Any]]) -> None:
        self._tokens = tokens
        self._pos = 0

    def evaluate(self) -> Any:
        value = self._conditional()
        if self._peek()[0] != "end":
            raise _NotConstant
        return value

    # -- token helpers ---------------------------------------------------------

    def _peek(self) -> tuple[str, Any]:
        return self._tokens[self._pos]

    def _next(self) -> tuple[str, Any]:
        token = self._tokens[self._pos]
        if token[0] != "end":
            self._pos += 1
        return token

    def _accept(self, op: str) -> bool:
        if self._peek() == ("op", op):
            self._pos += 1
            return True
        return False

    def _expect(self, op: str) -> None:
        if not self._accept(op):
            raise _NotConstant

    # -- grammar ---------------------------------------------------------------

    def _conditional(self) -> Any:
        test = self._nullish()
        if not self._accept("?"):
            return test
        consequent = self._conditional()
        self._expect(":")
        alternate = self._conditional()
        return consequent if truthy(test) else alternate

    def _nullish(self) -> Any:
        left = self._logical_or()
        while self._accept("??"):
            right = self._logical_or()
            if left is None or left is UNDEFINED:
                left = right
        return left

    def _logical_or(self) -> Any:
        left = self._logical_and()
        while self._accept("||"):
            right = self._logical_and()
            left = left if truthy(left) else right
        return left

    def _logical_and(self) -> Any:
        left = self._binary(0)
        while self._accept("&&"):
            right = self._binary(0)
            left = right if truthy(left) else left
        return left

    def _binary(self, level: int) -> Any:
        if level == len(_BINARY_LEVELS):
            return self._exponent()
        left = self._binary(level + 1)
        ops = _BINARY_LEVELS[level]
        while True:
            kind, op = self._peek()
            if kind != "op" or op not in ops:
                return left
            self._pos += 1
            left = _binary(op, left, self._binary(level + 1))

    def _exponent(self) -> Any:
        base = self._unary()
        if self._accept("**"):
            return _binary("**", base, self._exponent())
        return base

    def _unary(self) -> Any:
        kind, text = self._peek()
        if kind == "op" and text in ("!", "-", "+"):
            self._pos += 1
            operand = self._unary()
            if text == "!":
                return not truthy(operand)
            number = _to_number(operand)
            return _normalize_number(-number) if text == "-" else number
        if kind == "name" and text == "typeof":
            self._pos += 1
            return _typeof(self._unary())
        return self._primary()

    def _primary(self) -> Any:
        kind, text = self._next()
        if kind == "value":
            return text
        if kind == "name" and text in _KEYWORDS:
            return _KEYWORDS[text]
        if (kind, text) == ("op", "("):
            value = self._conditional()
            self._expect(")")
            return value
        if (kind, text) == ("op", "["):
            return self._array()
        if (kind, text) == ("op", "{"):
            return self._object()
        raise _NotConstant

    def _array(self) -> list[Any]:
        items: list[Any] = []
        while not self._accept("]"):
            if self._accept(","):
                items.append(UNDEFINED)
                continue
            items.append(self._conditional())
            if not self._accept(","):
                self._expect("]")
                break
        return items

    def _object(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        while not self._accept("}"):
            kind, key = self._next()
            if kind not in ("name", "value"):
                raise _NotConstant
            self._expect(":")
            result[to_js_string(key)] = self._conditional()
            if not self._accept(","):
                self._expect("}")
                break
        return result


def fold_constant(source: str) -> Constant | None:
    """Evaluate ``source`` if it is a constant JavaScript expression.

    Args:
        source: Raw expression source, e.g. ``"'btn ' + 'primary'"``

    Returns:
        Constant wrapping the value, or None when the expression is not
        a compile-time constant (or does not parse).

    Example:
        >>> fold_constant("'a' + 'b'")
        Constant(value='ab')
        >>> fold_constant("user.name") is None
        True

    """
    if not isinstance(source, str):
        return None
    try:
        value = _Evaluator(_tokenize(source)).evaluate()
    except (_NotConstant, ArithmeticError, ValueError, RecursionError):
        logger.debug("Not a constant expression: %r", source)
        return None
    return Constant(value)
