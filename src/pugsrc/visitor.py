"""Immutable tree rewriting for pugsrc ASTs.

Provides ``transform``, which applies a function to every node bottom-up and
returns a new tree.

Example, renaming a mixin everywhere:

    def rename(node: Node) -> Node:
        if isinstance(node, Mixin) and node.name == "btn":
            return dataclasses.replace(node, name="button")
        return node

    new_tree = transform(tree, rename)

Thread Safety:
    transform is pure, safe to call from any thread.

"""

import dataclasses
from collections.abc import Callable
from typing import TypeVar

from pugsrc.nodes import Node

N = TypeVar("N", bound=Node)


def transform(root: N, fn: Callable[[Node], Node | None]) -> N:
    """Apply a function to every node in the AST, returning a new tree.

    The function ``fn`` is called bottom-up: children are transformed first,
    then the parent is transformed with its new children. This ensures ``fn``
    always receives nodes with already-transformed children.

    Return ``None`` from ``fn`` to remove a node from a child tuple. A node
    held in a single-node field (``Tag.block``, ``Extends.file``...) and the
    root itself cannot be removed; returning None for them raises TypeError.

    Subtrees that ``fn`` leaves untouched are reused, not copied.

    Args:
        root: The node to transform.
        fn: Function that receives a node and returns a (possibly new) node,
            or None to remove the node from the tree.

    Returns:
        The transformed root.

    """
    result = _transform_node(root, fn)
    if result is None:
        msg = "transform fn must return a node for the root (cannot remove root)"
        raise TypeError(msg)
    return result  # type: ignore[return-value]


def _transform_node(node: Node, fn: Callable[[Node], Node | None]) -> Node | None:
    """Transform a single node bottom-up: children first, then self."""
    return fn(_transform_children(node, fn))


def _transform_children(node: Node, fn: Callable[[Node], Node | None]) -> Node:
    """Produce a new node with children transformed; filter out None (removed) nodes."""
    changes: dict[str, object] = {}

    for f in dataclasses.fields(node):
        value = getattr(node, f.name)
        if isinstance(value, Node):
            new = _transform_node(value, fn)
            if new is None:
                msg = f"cannot remove {type(value).__name__} from {type(node).__name__}.{f.name}"
                raise TypeError(msg)
            if new is not value:
                changes[f.name] = new
        elif isinstance(value, tuple) and any(isinstance(item, Node) for item in value):
            new_items = tuple(
                result for item in value
                if (result := _transform_node(item, fn)) is not None
            )
            if len(new_items) != len(value) or any(a is not b for a, b in zip(new_items, value)):
                changes[f.name] = new_items

    if changes:
        return dataclasses.replace(node, **changes)
    return node
