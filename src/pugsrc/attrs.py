"""Attribute list rendering.

Turns an attribute tuple into Pug's compact surface syntax::

    #main.card.wide(href=url data-x!=raw checked)&attributes(extra)

Constant ``id`` and ``class`` values become shorthand. Everything else keeps
its relative order inside the parenthesized list.
"""

import re
from collections.abc import Iterable

from pugsrc.constants import fold_constant, to_js_string, truthy
from pugsrc.escaping import quote
from pugsrc.nodes import Attribute

_CLASS_SHORTHAND_RE = re.compile(r"-?[_a-z][_a-z0-9-]*", re.IGNORECASE | re.ASCII)
_ID_SHORTHAND_RE = re.compile(r"[\w-]+", re.ASCII)
# Names that need no quoting inside (...)
_BARE_NAME_RE = re.compile(r"\w[^()\[\]=!,`'\"\s]*", re.ASCII)


def render_attrs(attrs: Iterable[Attribute], preferred_quote: str = "'") -> str:
    """Render attributes as ``#id``, ``.class`` shorthand and ``(...)`` list.

    Args:
        attrs: Attributes in source order
        preferred_quote: Quote used when an attribute name must be quoted

    Returns:
        Shorthand id, then shorthand classes, then the parenthesized list
        (omitted when empty).

    """
    regular: list[str] = []
    classes: list[str] = []
    id_: str | None = None

    for attr in attrs:
        folded = fold_constant(attr.val)
        value = folded.value if folded is not None else None
        # Only truthy constants qualify, as the string JavaScript would see
        text = to_js_string(value) if folded is not None and truthy(value) else None

        if attr.name == "class" and text is not None and _CLASS_SHORTHAND_RE.fullmatch(text):
            classes.append("." + text)
        elif attr.name == "id" and id_ is None and text is not None and _ID_SHORTHAND_RE.fullmatch(text):
            id_ = text
        else:
            regular.append(_render_attr(attr, value is True, preferred_quote))

    out = f"#{id_}" if id_ is not None else ""
    out += "".join(classes)
    if regular:
        out += "(" + " ".join(regular) + ")"
    return out


def _render_attr(attr: Attribute, boolean_true: bool, preferred_quote: str) -> str:
    if _BARE_NAME_RE.fullmatch(attr.name):
        out = attr.name
    else:
        out = quote(attr.name.replace("\\", "\\\\"), preferred_quote)

    if not boolean_true:
        if not attr.escaped:
            out += "!"
        out += "=" + attr.val
    return out


def render_attribute_blocks(attribute_blocks: Iterable[str]) -> str:
    """Render each attribute block expression as ``&attributes(expr)``."""
    return "".join(f"&attributes({expr})" for expr in attribute_blocks)
