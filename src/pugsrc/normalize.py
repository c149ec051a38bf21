"""AST normalization: flatten anonymous Block wrappers.

Parsers sometimes wrap runs of siblings in an extra anonymous Block
(includes, mixin bodies, filter expansion). The wrapper carries no
positional meaning, so it is spliced into its parent::

    Block(nodes=(Block(nodes=(Tag a,)), Tag b))  ->  Block(nodes=(Tag a, Tag b))

``yield`` placeholders and NamedBlocks are kept as they are. The pass is
idempotent and never mutates its input.
"""

import dataclasses
from typing import TypeVar

from pugsrc.nodes import Block, Node
from pugsrc.utils.logger import get_logger
from pugsrc.visitor import transform

N = TypeVar("N", bound=Node)

logger = get_logger(__name__)


def is_wrapper(node: Node) -> bool:
    """Return True for an anonymous, non-yield Block."""
    return type(node) is Block and not node.yield_


def normalize(tree: N) -> N:
    """Return ``tree`` with nested anonymous Blocks spliced into their parents.

    Args:
        tree: Any node; usually the root Block from the parser.

    Returns:
        A tree where no Block has a plain, non-yield Block child. Unchanged
        subtrees are shared with the input.

    """
    flattened = 0

    def flatten(node: Node) -> Node:
        nonlocal flattened
        if not isinstance(node, Block) or not any(is_wrapper(child) for child in node.nodes):
            return node
        nodes: list[Node] = []
        for child in node.nodes:
            if is_wrapper(child):
                # Children are already normalized (transform is bottom-up)
                nodes.extend(child.nodes)
                flattened += 1
            else:
                nodes.append(child)
        return dataclasses.replace(node, nodes=tuple(nodes))

    result = transform(tree, flatten)
    if flattened:
        logger.debug("Flattened %d anonymous block(s)", flattened)
    return result
