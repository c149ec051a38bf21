"""Tests for bottom-up tree rewriting with transform."""

import dataclasses

import pytest

from pugsrc.location import SourceLocation
from pugsrc.nodes import Block, Comment, Extends, FileReference, Mixin, Node, Tag, Text
from pugsrc.visitor import transform

LOC = SourceLocation(lineno=1)


def _block(*nodes: Node) -> Block:
    return Block(location=LOC, nodes=tuple(nodes))


def _tag(name: str, *children: Node) -> Tag:
    return Tag(location=LOC, name=name, block=_block(*children))


class TestTransform:
    def test_identity_returns_same_tree(self) -> None:
        tree = _block(_tag("p", Text(location=LOC, val="x")))
        assert transform(tree, lambda node: node) is tree

    def test_rename_mixin(self) -> None:
        tree = _block(
            Mixin(location=LOC, name="btn", call=True),
            Mixin(location=LOC, name="card", call=True),
        )

        def rename(node: Node) -> Node:
            if isinstance(node, Mixin) and node.name == "btn":
                return dataclasses.replace(node, name="button")
            return node

        result = transform(tree, rename)
        assert [m.name for m in result.nodes] == ["button", "card"]  # type: ignore[union-attr]
        assert tree.nodes[0].name == "btn"  # type: ignore[union-attr]

    def test_bottom_up_order(self) -> None:
        seen: list[str] = []
        tree = _block(_tag("p", Text(location=LOC, val="x")))

        def record(node: Node) -> Node:
            seen.append(type(node).__name__)
            return node

        transform(tree, record)
        assert seen == ["Text", "Block", "Tag", "Block"]

    def test_parent_sees_transformed_children(self) -> None:
        tree = _tag("p", Text(location=LOC, val="x"))

        def upper(node: Node) -> Node:
            if isinstance(node, Text):
                return dataclasses.replace(node, val=node.val.upper())
            if isinstance(node, Tag):
                assert node.block.nodes[0].val == "X"  # type: ignore[union-attr]
            return node

        transform(tree, upper)

    def test_remove_from_tuple(self) -> None:
        tree = _block(
            Comment(location=LOC, val=" drop"),
            _tag("p"),
            Comment(location=LOC, val=" me"),
        )
        result = transform(tree, lambda node: None if isinstance(node, Comment) else node)
        assert len(result.nodes) == 1
        assert isinstance(result.nodes[0], Tag)

    def test_untouched_siblings_are_shared(self) -> None:
        first, second = _tag("a"), _tag("b")
        tree = _block(first, second)

        def rename_a(node: Node) -> Node:
            if isinstance(node, Tag) and node.name == "a":
                return dataclasses.replace(node, name="span")
            return node

        result = transform(tree, rename_a)
        assert result.nodes[0] is not first
        assert result.nodes[1] is second

    def test_remove_single_node_field_raises(self) -> None:
        tree = Extends(location=LOC, file=FileReference(location=LOC, path="layout.pug"))
        with pytest.raises(TypeError, match="Extends.file"):
            transform(tree, lambda node: None if isinstance(node, FileReference) else node)

    def test_remove_root_raises(self) -> None:
        with pytest.raises(TypeError, match="root"):
            transform(_block(), lambda node: None)
