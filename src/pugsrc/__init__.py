"""
pugsrc: Pug source generator for Python

Turns a parsed Pug (Jade) syntax tree back into canonical template source:
the inverse of the parser. Useful for formatters, refactoring tools and
pipelines that rewrite templates through their AST.

Quick Start:
    >>> from pugsrc import generate
    >>> tree = {
    ...     "type": "Block",
    ...     "nodes": [{
    ...         "type": "Tag", "name": "div", "line": 1,
    ...         "attrs": [{"name": "id", "val": "'box'", "escaped": False}],
    ...         "attributeBlocks": [],
    ...         "block": {"type": "Block", "nodes": [{"type": "Text", "val": "Hi", "line": 1}]},
    ...     }],
    ... }
    >>> generate(tree)
    '#box Hi'

    >>> # Typed nodes work the same way
    >>> from pugsrc import Block, Doctype, SourceLocation
    >>> loc = SourceLocation(lineno=1)
    >>> generate(Block(location=loc, nodes=(Doctype(location=loc, val="html"),)))
    'doctype html'

Options:
    >>> generate(tree, indent_unit="\\t", use_colon=True, preferred_quote='"')

"""

import dataclasses
from collections.abc import Mapping
from typing import Any

from pugsrc.attrs import render_attribute_blocks, render_attrs
from pugsrc.config import (
    GeneratorConfig,
    generator_config_context,
    get_generator_config,
    reset_generator_config,
    set_generator_config,
)
from pugsrc.constants import Constant, fold_constant
from pugsrc.errors import (
    ConfigError,
    GenerateError,
    IllegalInlineHtmlError,
    InvalidFilterChainError,
    MissingNodeError,
    PugsrcError,
    UnexpectedPipelessChildError,
    UnsupportedNodeTypeError,
)
from pugsrc.escaping import escape_interpolation, quote
from pugsrc.generator import CodeGenerator
from pugsrc.location import SourceLocation
from pugsrc.nodes import (
    AnyNode,
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
from pugsrc.normalize import normalize
from pugsrc.serialization import from_dict, from_json, to_dict, to_json
from pugsrc.visitor import transform

__version__ = "0.1.0"


def generate(
    ast: Node | Mapping[str, Any],
    *,
    config: GeneratorConfig | None = None,
    **overrides: Any,
) -> str:
    """Generate Pug source from an AST.

    Args:
        ast: Root node, or a parser-JSON mapping
        config: Base configuration (uses the active context config if None)
        **overrides: Per-call option overrides (``indent_unit``,
            ``use_colon``, ``preferred_quote``)

    Returns:
        Source text, lines joined by ``\\n``, no trailing newline

    Raises:
        GenerateError: The tree is malformed
        ConfigError: An override has an invalid value
        TypeError: An override names an unknown option

    Example:
        >>> generate(tree, use_colon=True)
        'li: a(href=url) Home'

    """
    base = config or get_generator_config()
    if overrides:
        base = dataclasses.replace(base, **overrides)
    return CodeGenerator(ast, base).generate()


__all__ = [  # noqa: RUF022 - grouped by category
    # Version
    "__version__",
    # Core API
    "generate",
    "CodeGenerator",
    "normalize",
    "transform",
    # Nodes
    "AnyNode",
    "Attribute",
    "Block",
    "BlockComment",
    "Case",
    "Code",
    "Comment",
    "Conditional",
    "Doctype",
    "Each",
    "Extends",
    "FileReference",
    "Filter",
    "Include",
    "Mixin",
    "MixinBlock",
    "NamedBlock",
    "Node",
    "Tag",
    "Text",
    "When",
    "While",
    # Location
    "SourceLocation",
    # Configuration (ContextVar-based)
    "GeneratorConfig",
    "get_generator_config",
    "set_generator_config",
    "reset_generator_config",
    "generator_config_context",
    # Serialization
    "from_dict",
    "from_json",
    "to_dict",
    "to_json",
    # Building blocks
    "Constant",
    "fold_constant",
    "escape_interpolation",
    "quote",
    "render_attrs",
    "render_attribute_blocks",
    # Errors
    "PugsrcError",
    "ConfigError",
    "GenerateError",
    "MissingNodeError",
    "UnsupportedNodeTypeError",
    "InvalidFilterChainError",
    "IllegalInlineHtmlError",
    "UnexpectedPipelessChildError",
]
