"""Typed AST nodes for Pug templates.

All AST nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: the generator never mutates the caller's tree
- Pattern matching: the generator dispatches with ``match``

The node set mirrors what the Pug/Jade parser produces. Field names are the
parser's, converted to snake_case (``selfClosing`` -> ``self_closing``,
``yield`` -> ``yield_``).

Node Hierarchy:
Node (base)
├── Block
│   └── NamedBlock
├── Tag
├── Mixin
├── MixinBlock
├── Text
├── Code
├── Comment
├── BlockComment
├── Case
├── When
├── Conditional
├── While
├── Each
├── Doctype
├── FileReference
├── Extends
├── Include
└── Filter

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias

from pugsrc.location import SourceLocation

BlockMode: TypeAlias = Literal["replace", "append", "prepend"]

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    All nodes track their source location. The line number drives
    same-line/new-line layout decisions in the generator.

    """

    location: SourceLocation

    @property
    def line(self) -> int:
        return self.location.lineno

    @property
    def filename(self) -> str | None:
        return self.location.filename


@dataclass(frozen=True, slots=True)
class Attribute:
    """A single tag, mixin or filter attribute.

    ``val`` is the raw JavaScript expression source, e.g. ``"'btn'"``.
    ``escaped`` is False for ``name!=val``.

    """

    name: str
    val: str
    escaped: bool = True


# =============================================================================
# Containers
# =============================================================================


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Ordered sequence of child nodes.

    A block with ``yield_`` set is a placeholder (``yield``) with no children.

    """

    nodes: tuple[AnyNode, ...] = ()
    yield_: bool = False


@dataclass(frozen=True, slots=True)
class NamedBlock(Block):
    """Template-inheritance block.

    Pug: block content / append content / prepend content

    """

    name: str = ""
    mode: BlockMode = "replace"


# =============================================================================
# Elements
# =============================================================================


@dataclass(frozen=True, slots=True)
class Tag(Node):
    """HTML element.

    Pug: a.btn(href=url)&attributes(extra)= label

    ``buffer`` marks an interpolated tag name (``#{expr}``), in which case
    ``name`` holds the expression.

    """

    name: str
    block: Block
    attrs: tuple[Attribute, ...] = ()
    attribute_blocks: tuple[str, ...] = ()
    self_closing: bool = False
    buffer: bool = False
    code: Code | None = None


@dataclass(frozen=True, slots=True)
class Mixin(Node):
    """Mixin declaration (``call`` False) or invocation (``call`` True).

    Pug: mixin item(label) / +item('Home')

    """

    name: str
    call: bool
    args: str | None = None
    attrs: tuple[Attribute, ...] = ()
    attribute_blocks: tuple[str, ...] = ()
    block: Block | None = None


@dataclass(frozen=True, slots=True)
class MixinBlock(Node):
    """Slot for the content passed to a mixin invocation (``block``)."""


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal text. ``is_html`` marks a verbatim ``<html>`` line."""

    val: str
    is_html: bool = False


@dataclass(frozen=True, slots=True)
class Code(Node):
    """Embedded JavaScript.

    Pug: = expr / != expr / - statement

    ``buffer`` is True when the code produces output; ``escape`` is False
    for ``!=``.

    """

    val: str
    buffer: bool = False
    escape: bool = True
    block: Block | None = None


@dataclass(frozen=True, slots=True)
class Comment(Node):
    """Single-line comment. ``buffer`` False means ``//-`` (not rendered)."""

    val: str
    buffer: bool = True


@dataclass(frozen=True, slots=True)
class BlockComment(Node):
    """Comment with an indented body."""

    val: str
    block: Block
    buffer: bool = True


# =============================================================================
# Control flow
# =============================================================================


@dataclass(frozen=True, slots=True)
class Case(Node):
    expr: str
    block: Block


@dataclass(frozen=True, slots=True)
class When(Node):
    """Case arm. ``expr == "default"`` denotes the default arm.

    A missing ``block`` is a fall-through arm.

    """

    expr: str
    block: Block | None = None


@dataclass(frozen=True, slots=True)
class Conditional(Node):
    """if/else if/else chain. ``alternate`` is a Block or another Conditional."""

    test: str
    consequent: Block
    alternate: Block | Conditional | None = None


@dataclass(frozen=True, slots=True)
class While(Node):
    test: str
    block: Block


@dataclass(frozen=True, slots=True)
class Each(Node):
    """Iteration.

    Pug: each val, key in obj

    """

    val: str
    obj: str
    block: Block
    key: str | None = None
    alternative: Block | None = None


# =============================================================================
# Document structure
# =============================================================================


@dataclass(frozen=True, slots=True)
class Doctype(Node):
    val: str | None = None


@dataclass(frozen=True, slots=True)
class FileReference(Node):
    path: str


@dataclass(frozen=True, slots=True)
class Extends(Node):
    file: FileReference


@dataclass(frozen=True, slots=True)
class Include(Node):
    """Include another file, optionally through a filter.

    Pug: include:markdown(flavor='gfm') article.md

    """

    file: FileReference
    filter: str | None = None
    attrs: tuple[Attribute, ...] = ()
    block: Block | None = None


@dataclass(frozen=True, slots=True)
class Filter(Node):
    """Filter block. A block whose only child is a Filter is a filter chain.

    Pug: :markdown-it(linkify) / :babel:uglify-js

    """

    name: str
    block: Block
    attrs: tuple[Attribute, ...] = ()


# Type alias for every dispatchable node
AnyNode: TypeAlias = (
    Block
    | NamedBlock
    | Tag
    | Mixin
    | MixinBlock
    | Text
    | Code
    | Comment
    | BlockComment
    | Case
    | When
    | Conditional
    | While
    | Each
    | Doctype
    | FileReference
    | Extends
    | Include
    | Filter
)
