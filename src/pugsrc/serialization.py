"""Parser-JSON loading and dumping.

The JavaScript Pug/Jade parsers emit plain JSON trees::

    {"type": "Tag", "name": "a", "selfClosing": false, "line": 3,
     "attrs": [{"name": "href", "val": "url", "mustEscape": true}],
     "attributeBlocks": [], "block": {"type": "Block", "nodes": []}}

``from_dict`` turns such a mapping into typed nodes, ``to_dict`` produces the
same shape back (camelCase keys, ``type`` discriminator). Both dialects are
accepted: jade-parser (``escaped``, ``Each.alternative``, string attribute
blocks) and pug-parser (``mustEscape``, ``Each.alternate``, attribute block
objects, ``YieldBlock``, ``InterpolatedTag``, ``RawInclude``).

Example:
    from pugsrc.serialization import from_json
    from pugsrc import generate

    tree = from_json(open("index.pug.json").read())
    print(generate(tree))

Thread Safety:
    All functions are pure, safe to call from any thread.

"""

import json
import re
from collections.abc import Mapping
from dataclasses import MISSING, fields
from typing import Any

from pugsrc.errors import InvalidFilterChainError, MissingNodeError, UnsupportedNodeTypeError
from pugsrc.location import SourceLocation
from pugsrc.nodes import (
    Attribute,
    Block,
    BlockComment,
    Case,
    Code,
    Comment,
    Conditional,
    Doctype,
    Each,
    Extends,
    FileReference,
    Filter,
    Include,
    Mixin,
    MixinBlock,
    NamedBlock,
    Node,
    Tag,
    Text,
    When,
    While,
)

# Registry of node type names to classes for deserialization
_NODE_TYPES: dict[str, type[Node]] = {
    "Block": Block,
    "NamedBlock": NamedBlock,
    "Tag": Tag,
    "Mixin": Mixin,
    "MixinBlock": MixinBlock,
    "Text": Text,
    "Code": Code,
    "Comment": Comment,
    "BlockComment": BlockComment,
    "Case": Case,
    "When": When,
    "Conditional": Conditional,
    "While": While,
    "Each": Each,
    "Doctype": Doctype,
    "FileReference": FileReference,
    "Extends": Extends,
    "Include": Include,
    "Filter": Filter,
}

# Fields whose camelCase form is not a plain case conversion
_RENAMED_FIELDS: dict[str, str] = {"yield": "yield_"}
_JSON_NAMES: dict[str, str] = {"yield_": "yield"}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(name: str) -> str:
    return _RENAMED_FIELDS.get(name) or _CAMEL_RE.sub("_", name).lower()


def _camel(name: str) -> str:
    if name in _JSON_NAMES:
        return _JSON_NAMES[name]
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _js_source(value: Any) -> str:
    """Convert a JSON attribute value to the expression source it stands for."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return json.dumps(value)


def _attribute(data: Mapping[str, Any]) -> Attribute:
    escaped = data.get("escaped", data.get("mustEscape", True))
    return Attribute(name=data["name"], val=_js_source(data.get("val", True)), escaped=bool(escaped))


def _attribute_block(value: Any) -> str:
    if isinstance(value, Mapping):
        return value["val"]
    return value


def _location(data: Mapping[str, Any]) -> SourceLocation:
    line = data.get("line")
    if line is None:
        return SourceLocation(lineno=0, filename=data.get("filename"))
    return SourceLocation(lineno=line, column=data.get("column"), filename=data.get("filename"))


def _rewrite_dialect(type_name: str, data: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
    """Map pug-parser node shapes onto the node classes here."""
    raw = dict(data)
    match type_name:
        case "YieldBlock":
            return "Block", {**raw, "nodes": [], "yield": True}
        case "InterpolatedTag":
            return "Tag", {**raw, "name": raw.get("expr", ""), "buffer": True}
        case "RawInclude":
            filters = raw.get("filters") or []
            if len(filters) > 1:
                raise InvalidFilterChainError(node_type=type_name, location=_location(raw))
            if filters:
                raw["filter"] = filters[0].get("name")
                raw["attrs"] = filters[0].get("attrs", [])
            return "Include", raw
        case "Code":
            if "mustEscape" in raw and "escape" not in raw:
                raw["escape"] = raw["mustEscape"]
            return type_name, raw
        case "Each":
            if "alternate" in raw and "alternative" not in raw:
                raw["alternative"] = raw["alternate"]
            return type_name, raw
        case _:
            return type_name, raw


def from_dict(data: Mapping[str, Any]) -> Node:
    """Reconstruct a typed AST node from a parser-JSON mapping.

    Uses the ``type`` discriminator to determine the node class.
    Recursively deserializes child nodes.

    Args:
        data: Mapping with ``type`` and node fields.

    Returns:
        Typed AST node (frozen dataclass).

    Raises:
        MissingNodeError: If ``type`` is missing, or a required field is.
        UnsupportedNodeTypeError: If ``type`` names no known node.

    """
    return _from_dict(data)


def _from_dict(
    data: Mapping[str, Any],
    parent_type: str | None = None,
    parent_location: SourceLocation | None = None,
) -> Node:
    type_name = data.get("type")
    if type_name is None:
        raise MissingNodeError(None, "type", parent_type=parent_type, location=parent_location)

    type_name, raw = _rewrite_dialect(type_name, data)
    node_cls = _NODE_TYPES.get(type_name)
    if node_cls is None:
        raise UnsupportedNodeTypeError(
            type_name=str(type_name),
            location=_location(data),
            parent_type=parent_type,
            parent_location=parent_location,
        )

    location = _location(raw)
    values = {_snake(key): value for key, value in raw.items()}
    kwargs: dict[str, Any] = {"location": location}
    for f in fields(node_cls):
        if f.name == "location":
            continue
        if f.name not in values or values[f.name] is None:
            if f.default is MISSING and f.default_factory is MISSING:
                raise MissingNodeError(None, _camel(f.name), parent_type=type_name, location=location)
            continue
        kwargs[f.name] = _deserialize_value(f.name, values[f.name], type_name, location)

    return node_cls(**kwargs)


def _deserialize_value(field_name: str, value: Any, owner_type: str, owner_location: SourceLocation) -> Any:
    """Deserialize a single field value of an ``owner_type`` node."""
    if field_name == "attrs":
        return tuple(_attribute(item) for item in value)
    if field_name == "attribute_blocks":
        return tuple(_attribute_block(item) for item in value)
    if isinstance(value, Mapping):
        return _from_dict(value, owner_type, owner_location)
    if isinstance(value, list):
        return tuple(
            _from_dict(item, owner_type, owner_location) if isinstance(item, Mapping) else item
            for item in value
        )
    return value


def to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST node to a parser-JSON mapping.

    Includes a ``type`` discriminator, ``line`` and (when known) ``column``
    and ``filename``. Optional fields left at None are omitted.

    """
    result: dict[str, Any] = {"type": type(node).__name__, "line": node.location.lineno}
    if node.location.column is not None:
        result["column"] = node.location.column
    if node.location.filename is not None:
        result["filename"] = node.location.filename

    for f in fields(node):
        if f.name == "location":
            continue
        value = getattr(node, f.name)
        if value is None:
            continue
        result[_camel(f.name)] = _serialize_value(value)

    return result


def _serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    if isinstance(value, Node):
        return to_dict(value)
    if isinstance(value, Attribute):
        return {"name": value.name, "val": value.val, "escaped": value.escaped}
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    # Primitives: str, int, bool
    return value


def to_json(node: Node, *, indent: int | None = None) -> str:
    """Serialize an AST to a JSON string.

    Output is deterministic (sorted keys).

    Args:
        node: Root node to serialize.
        indent: JSON indentation level (None for compact).

    """
    return json.dumps(to_dict(node), sort_keys=True, indent=indent)


def from_json(data: str) -> Node:
    """Deserialize an AST from a parser-JSON string.

    Args:
        data: JSON text, as written by the parser or ``to_json``.

    Returns:
        Root node.

    Raises:
        ValueError: If the JSON is not an object (``json.JSONDecodeError``
            for malformed JSON).

    """
    raw = json.loads(data)
    if not isinstance(raw, Mapping):
        msg = f"Expected a JSON object, got {type(raw).__name__}"
        raise ValueError(msg)
    return from_dict(raw)
