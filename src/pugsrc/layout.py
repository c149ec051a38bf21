"""Layout heuristics.

Pure decision functions that pick between equivalent surface syntaxes:

- ``use_colon``: block expansion (``li: a(href=url)``) instead of an
  indented child
- ``use_dot``: a dot block (``p.`` followed by raw lines) instead of
  piped text
- ``starts_on_same_line``: whether a tag or mixin body continues on the
  head's line

They inspect nodes only; nothing here writes output.
"""

import re

from pugsrc.nodes import (
    Block,
    BlockComment,
    Case,
    Code,
    Conditional,
    Each,
    Filter,
    Mixin,
    Node,
    Tag,
    Text,
    When,
    While,
)

# Dot form only when fewer than this share of the block's lines are
# buffered code on their own line. Empirically tuned.
DOT_CODE_RATIO = 0.35

_WORD_RE = re.compile(r"\w+(?:\s+|\Z)", re.ASCII)


def block_of(node: Node) -> Block | None:
    """Return the child block a node owns, or None for leaf nodes.

    Blocks are their own block; a Conditional's block is its consequent.
    """
    match node:
        case Block():
            return node
        case Conditional():
            return node.consequent
        case BlockComment() | Case() | Code() | Each() | Filter() | Mixin() | Tag() | When() | While():
            return node.block
        case _:
            return None


def use_colon(block: Block, parent: Node | None, *, enabled: bool) -> bool:
    """Decide whether ``block`` renders as ``: child`` after its parent's head.

    Only when enabled, the parent is a Tag, a When or a mixin call owning
    ``block``, and the block's single child is a Tag or a mixin call.
    """
    if not enabled or parent is None:
        return False
    match parent:
        case Tag() | When():
            pass
        case Mixin(call=True):
            pass
        case _:
            return False
    if parent.block is not block or len(block.nodes) != 1:
        return False
    match block.nodes[0]:
        case Tag() | Mixin(call=True):
            return True
        case _:
            return False


def _starts_line(node: Node, prev: Node | None) -> bool:
    if prev is None:
        return True
    return node.line > prev.line or (isinstance(prev, Text) and prev.val == "\n")


def use_dot(block: Block, parent: Node | None = None) -> bool:
    """Decide whether ``block`` reads as a dot block of raw text.

    The block must span more than one source line and hold only Text and
    block-less Code. It qualifies when it has at least one word of text and
    buffered code on its own line makes up less than ``DOT_CODE_RATIO`` of
    its lines.
    """
    nodes = block.nodes
    if not nodes:
        return False

    lines = nodes[-1].line - nodes[0].line + 1
    if lines < 2:
        return False

    words = 0
    codes_with_own_line = 0
    # Whether the previous node was the first on its line
    prev_start_line = False
    prev: Node | None = parent

    for node in nodes:
        match node:
            case Text():
                words += len(_WORD_RE.findall(node.val))
            case Code(block=None):
                if node.buffer and _starts_line(node, prev) and prev_start_line:
                    codes_with_own_line += 1
            case _:
                # Interpolated tags would need several dot blocks; keep it simple
                return False
        prev_start_line = _starts_line(node, prev)
        prev = node

    return words > 0 and codes_with_own_line / lines < DOT_CODE_RATIO


def starts_on_same_line(owner: Node, block: Block, *, colon_enabled: bool) -> bool:
    """Return True when ``block``'s content continues on ``owner``'s line.

    True when the first child shares the owner's source line and the block
    is rendered neither through block expansion nor as a dot block.
    """
    if not block.nodes or block.nodes[0].line != owner.line:
        return False
    return not use_colon(block, owner, enabled=colon_enabled) and not use_dot(block, owner)


def needs_space(block: Block) -> bool:
    """Return True when same-line content must be separated by a space.

    A lone Code child supplies its own ``=`` operator.
    """
    return not (len(block.nodes) == 1 and isinstance(block.nodes[0], Code))
