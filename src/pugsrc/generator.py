"""Pug source generator.

Turns a typed AST back into Pug source. The tree is normalized first (see
``pugsrc.normalize``), then visited with ``match``-based dispatch, one
handler per node type, writing through a LineBuffer.

Two flags steer where output goes:

- ``inline`` (an argument): continue the current line, using ``#[...]`` and
  ``#{...}`` interpolation where needed
- ``nested`` (on GenerateContext): the node is already in a position that
  needs no brackets, after ``: `` block expansion or in a filter chain

Thread Safety:
All per-call state is encapsulated in GenerateContext, created fresh for each
generate() call. A CodeGenerator can be reused and shared across threads.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from pugsrc.attrs import render_attribute_blocks, render_attrs
from pugsrc.config import GeneratorConfig, get_generator_config
from pugsrc.errors import (
    IllegalInlineHtmlError,
    InvalidFilterChainError,
    MissingNodeError,
    UnexpectedPipelessChildError,
    UnsupportedNodeTypeError,
)
from pugsrc.escaping import escape_interpolation
from pugsrc.layout import block_of, needs_space, starts_on_same_line, use_colon, use_dot
from pugsrc.linebuffer import LineBuffer
from pugsrc.nodes import (
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
from pugsrc.serialization import from_dict
from pugsrc.utils.logger import get_logger

logger = get_logger(__name__)

# Tag name Pug implies when a line starts with ``#id`` or ``.class``
DEFAULT_TAG = "div"


@dataclass(slots=True)
class GenerateContext:
    """Per-call mutable state.

    Created fresh for each generate() call and passed to every handler.
    """

    buffer: LineBuffer
    nested: bool = False

    @contextmanager
    def nesting(self, nested: bool = True) -> Iterator[None]:
        """Temporarily set the ``nested`` flag."""
        previous = self.nested
        self.nested = nested
        try:
            yield
        finally:
            self.nested = previous


class CodeGenerator:
    """Generate Pug source from an AST.

    Usage:
        >>> tree = Block(location=loc, nodes=(Doctype(location=loc, val="html"),))
        >>> CodeGenerator(tree).generate()
        'doctype html'

    """

    __slots__ = ("_config", "_root")

    def __init__(self, root: Node | Mapping[str, Any], config: GeneratorConfig | None = None) -> None:
        """Initialize generator.

        Args:
            root: Tree to generate from; usually the parser's root Block.
                A parser-JSON mapping is loaded with ``from_dict`` first.
            config: Options (uses the active context config if None)
        """
        if root is None:
            raise MissingNodeError(None)
        if isinstance(root, Mapping):
            root = from_dict(root)
        elif not isinstance(root, Node):
            raise UnsupportedNodeTypeError(root)
        self._config = config or get_generator_config()
        self._root = normalize(root)

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    def generate(self) -> str:
        """Generate the source text.

        Returns:
            Lines joined by ``\\n``, without a trailing newline.
        """
        # Start at -1 so the root Block's children land at depth 0
        depth = -1 if isinstance(self._root, Block) else 0
        ctx = GenerateContext(buffer=LineBuffer(self._config.indent_unit, depth=depth))
        logger.debug("Generating source from %s", type(self._root).__name__)
        self._visit(self._root, ctx)
        logger.debug("Generated %d line(s)", len(ctx.buffer))
        return ctx.buffer.build()

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _visit(
        self,
        node: Node | None,
        ctx: GenerateContext,
        parent: Node | None = None,
        inline: bool = False,
    ) -> None:
        """Dispatch a node to its handler."""
        if node is None:
            raise MissingNodeError(parent)
        match node:
            case NamedBlock():
                self._visit_named_block(node, ctx)
            case Block():
                self._visit_block(node, ctx, parent, inline)
            case Tag():
                self._visit_tag(node, ctx, inline)
            case Mixin():
                self._visit_mixin(node, ctx, inline)
            case MixinBlock():
                ctx.buffer.new_line("block")
            case Text():
                self._visit_text(node, ctx, inline)
            case Code():
                self._visit_code(node, ctx, parent, inline)
            case Comment():
                self._visit_comment(node, ctx)
            case BlockComment():
                self._visit_block_comment(node, ctx)
            case Case():
                ctx.buffer.new_line(f"case {node.expr}")
                self._visit(node.block, ctx, node)
            case When():
                self._visit_when(node, ctx)
            case Conditional():
                self._visit_conditional(node, ctx)
            case While():
                ctx.buffer.new_line(f"while {node.test}")
                self._visit(node.block, ctx, node)
            case Each():
                self._visit_each(node, ctx)
            case Doctype():
                ctx.buffer.new_line(f"doctype {node.val}" if node.val else "doctype")
            case Extends():
                ctx.buffer.new_line("extends ")
                self._visit(node.file, ctx, node)
            case FileReference():
                ctx.buffer.append(node.path)
            case Include():
                self._visit_include(node, ctx)
            case Filter():
                self._visit_filter(node, ctx, parent, inline)
            case _:
                raise UnsupportedNodeTypeError(node, parent)

    # =========================================================================
    # Blocks
    # =========================================================================

    def _visit_block(
        self,
        block: Block,
        ctx: GenerateContext,
        parent: Node | None = None,
        inline: bool = False,
    ) -> None:
        buf = ctx.buffer
        if block.yield_:
            buf.new_line("yield")
            return

        if use_dot(block, parent):
            if isinstance(parent, (Tag, Mixin)):
                buf.append(".")
                self._visit_pipeless_block(block, ctx)
            else:
                # A bare dot line is itself a child of the parent
                buf.depth += 1
                buf.new_line(".")
                self._visit_pipeless_block(block, ctx)
                buf.depth -= 1
            return

        if use_colon(block, parent, enabled=self._config.use_colon):
            buf.append(": ")
            with ctx.nesting():
                self._visit(block.nodes[0], ctx, block, inline=True)
            return

        buf.depth += 1
        prev: Node | None = None
        for child in block.nodes:
            child_inline = inline if prev is None else prev.line == child.line
            self._visit(child, ctx, block, child_inline)
            prev = child
        buf.depth -= 1

    def _visit_named_block(self, block: NamedBlock, ctx: GenerateContext) -> None:
        if block.mode == "replace":
            ctx.buffer.new_line(f"block {block.name}")
        else:
            ctx.buffer.new_line(f"{block.mode} {block.name}")
        self._visit_block(block, ctx)

    def _visit_pipeless_block(self, block: Block, ctx: GenerateContext, *, no_escape: bool = False) -> None:
        """Emit a block as raw lines one level deeper, without ``|`` prefixes."""
        buf = ctx.buffer
        original_depth = buf.depth
        buf.depth += 1
        if buf.depth == 0:
            # Raw lines at the top level still need one indent
            buf.depth += 1
        buf.new_line()
        for node in block.nodes:
            match node:
                case Text():
                    self._pipeless_text(node.val, ctx, no_escape=no_escape)
                case Code() | Tag():
                    self._visit(node, ctx, block, inline=True)
                case _:
                    raise UnexpectedPipelessChildError(node, block)
        buf.depth = original_depth

    def _pipeless_text(self, val: str, ctx: GenerateContext, *, no_escape: bool = False) -> None:
        text = val.replace("\n", "\n" + ctx.buffer.indent())
        if not no_escape:
            text = escape_interpolation(text)
        ctx.buffer.append(text)

    def _visit_same_line_block(self, owner: Tag | Mixin, block: Block, ctx: GenerateContext) -> None:
        """Visit a tag or mixin body, continuing the head's line when it starts there."""
        if not block.nodes:
            return
        same_line = starts_on_same_line(owner, block, colon_enabled=self._config.use_colon)
        if same_line and needs_space(block):
            ctx.buffer.append(" ")
        with ctx.nesting(False):
            self._visit(block, ctx, owner, same_line)

    # =========================================================================
    # Elements
    # =========================================================================

    def _visit_tag(self, tag: Tag, ctx: GenerateContext, inline: bool) -> None:
        if tag.block is None:
            raise MissingNodeError(tag, "block")
        buf = ctx.buffer
        attrs = render_attrs(tag.attrs, self._config.preferred_quote)
        attrs += render_attribute_blocks(tag.attribute_blocks)

        head = ""
        if tag.buffer:
            head += "#{" + tag.name + "}"
        elif tag.self_closing or tag.name != DEFAULT_TAG or attrs[:1] not in ("#", "."):
            head += tag.name
        if tag.self_closing:
            head += "/"
        head += attrs

        bracketed = inline and not ctx.nested
        if inline:
            if bracketed:
                buf.append("#[")
            buf.append(head)
        else:
            buf.new_line(head)

        if tag.code is not None:
            self._visit_code(tag.code, ctx, None, inline=True)

        self._visit_same_line_block(tag, tag.block, ctx)

        if bracketed:
            buf.append("]")

    def _visit_mixin(self, mixin: Mixin, ctx: GenerateContext, inline: bool) -> None:
        buf = ctx.buffer
        args = f"({mixin.args})" if mixin.args else ""

        if not mixin.call:
            buf.new_line(f"mixin {mixin.name}{args}")
            if mixin.block is not None:
                self._visit(mixin.block, ctx, mixin)
            return

        head = (
            f"+{mixin.name}{args}"
            + render_attrs(mixin.attrs, self._config.preferred_quote)
            + render_attribute_blocks(mixin.attribute_blocks)
        )
        bracketed = inline and not ctx.nested
        if inline:
            if bracketed:
                buf.append("#[")
            buf.append(head)
        else:
            buf.new_line(head)

        if mixin.block is not None:
            self._visit_same_line_block(mixin, mixin.block, ctx)

        if bracketed:
            buf.append("]")

    def _visit_text(self, text: Text, ctx: GenerateContext, inline: bool) -> None:
        buf = ctx.buffer
        if text.is_html:
            if inline:
                raise IllegalInlineHtmlError(text)
            buf.new_line()
            self._pipeless_text(text.val, ctx)
        elif inline:
            buf.append(escape_interpolation(text.val))
        elif text.val == "\n":
            buf.new_line("| ")
        elif text.val:
            buf.new_line("| " + escape_interpolation(text.val))

    def _visit_code(self, code: Code, ctx: GenerateContext, parent: Node | None, inline: bool) -> None:
        buf = ctx.buffer
        parent_block = block_of(parent) if parent is not None else None

        if inline and parent_block is not None and len(parent_block.nodes) != 1:
            # Running text: interpolate instead of starting a code line
            if code.buffer:
                buf.append(("#" if code.escape else "!") + "{" + code.val + "}")
            else:
                buf.append("#[- " + code.val + "]")
            return

        if code.buffer:
            operator = "=" if code.escape else "!="
        else:
            operator = "-"
        if inline:
            buf.append(operator)
        else:
            buf.new_line(operator)

        if "\n" not in code.val:
            buf.append(" " + code.val)
        else:
            buf.depth += 1
            buf.new_line()
            self._pipeless_text(code.val, ctx, no_escape=True)
            buf.depth -= 1

        if code.block is not None:
            self._visit(code.block, ctx, code)

    def _visit_comment(self, comment: Comment, ctx: GenerateContext) -> None:
        prefix = "//" if comment.buffer else "//-"
        ctx.buffer.new_line(prefix + comment.val)

    def _visit_block_comment(self, comment: BlockComment, ctx: GenerateContext) -> None:
        if comment.block is None:
            raise MissingNodeError(comment, "block")
        prefix = "//" if comment.buffer else "//-"
        ctx.buffer.new_line(prefix + (comment.val or ""))
        self._visit_pipeless_block(comment.block, ctx, no_escape=True)

    # =========================================================================
    # Control flow
    # =========================================================================

    def _visit_when(self, when: When, ctx: GenerateContext) -> None:
        if when.expr == "default":
            ctx.buffer.new_line("default")
        else:
            ctx.buffer.new_line(f"when {when.expr}")
        if when.block is None:
            return
        if not when.block.nodes:
            # An empty arm needs a body line, or it falls through
            ctx.buffer.new_line("", 1)
        else:
            self._visit(when.block, ctx, when)

    def _visit_conditional(self, cond: Conditional, ctx: GenerateContext, *, chained: bool = False) -> None:
        buf = ctx.buffer
        if chained:
            buf.append(f"if {cond.test}")
        else:
            buf.new_line(f"if {cond.test}")
        self._visit(cond.consequent, ctx, cond)

        match cond.alternate:
            case None:
                pass
            case Conditional():
                buf.new_line("else ")
                self._visit_conditional(cond.alternate, ctx, chained=True)
            case _:
                buf.new_line("else")
                self._visit(cond.alternate, ctx, cond)

    def _visit_each(self, each: Each, ctx: GenerateContext) -> None:
        key = f", {each.key}" if each.key else ""
        ctx.buffer.new_line(f"each {each.val}{key} in {each.obj}")
        self._visit(each.block, ctx, each)
        if each.alternative is not None:
            ctx.buffer.new_line("else")
            self._visit(each.alternative, ctx)

    # =========================================================================
    # Files and filters
    # =========================================================================

    def _visit_include(self, include: Include, ctx: GenerateContext) -> None:
        buf = ctx.buffer
        buf.new_line("include")
        if include.filter:
            buf.append(":" + include.filter + render_attrs(include.attrs, self._config.preferred_quote))
        buf.append(" ")
        self._visit(include.file, ctx, include)
        if include.block is not None:
            self._visit(include.block, ctx)

    def _visit_filter(self, filter_: Filter, ctx: GenerateContext, parent: Node | None, inline: bool) -> None:
        if filter_.block is None:
            raise MissingNodeError(filter_, "block")
        buf = ctx.buffer
        head = ":" + filter_.name + render_attrs(filter_.attrs, self._config.preferred_quote)
        bracketed = inline and not ctx.nested
        if bracketed:
            buf.append("#[")
        if inline or ctx.nested:
            buf.append(head)
        else:
            buf.new_line(head)

        nodes = filter_.block.nodes
        if nodes:
            if isinstance(nodes[0], Filter):
                if len(nodes) > 1:
                    raise InvalidFilterChainError(filter_)
                with ctx.nesting():
                    self._visit_filter(nodes[0], ctx, filter_, inline)
            elif inline:
                if isinstance(nodes[0], Text):
                    buf.append(" ")
                with ctx.nesting(False):
                    self._visit(filter_.block, ctx, parent, inline)
            else:
                self._visit_pipeless_block(filter_.block, ctx, no_escape=True)

        if bracketed:
            buf.append("]")
