"""Tests for anonymous Block flattening."""

from collections.abc import Iterator

from hypothesis import given, settings
from hypothesis import strategies as st

from pugsrc.location import SourceLocation
from pugsrc.nodes import Block, NamedBlock, Node, Tag, Text
from pugsrc.normalize import is_wrapper, normalize

_LOC = SourceLocation(lineno=1)


def _block(*nodes: Node) -> Block:
    return Block(location=_LOC, nodes=tuple(nodes))


def _text(val: str) -> Text:
    return Text(location=_LOC, val=val)


def _walk(node: Node) -> Iterator[Node]:
    yield node
    if isinstance(node, Block):
        for child in node.nodes:
            yield from _walk(child)


def _texts(node: Node) -> list[str]:
    return [n.val for n in _walk(node) if isinstance(n, Text)]


class TestIsWrapper:
    def test_plain_block(self) -> None:
        assert is_wrapper(_block()) is True

    def test_yield_block(self) -> None:
        assert is_wrapper(Block(location=_LOC, yield_=True)) is False

    def test_named_block(self) -> None:
        assert is_wrapper(NamedBlock(location=_LOC, name="content")) is False

    def test_other_node(self) -> None:
        assert is_wrapper(_text("x")) is False


class TestNormalize:
    def test_splices_wrapper_into_parent(self) -> None:
        a, b = _text("a"), _text("b")
        assert normalize(_block(_block(a), b)) == _block(a, b)

    def test_deep_nesting(self) -> None:
        a = _text("a")
        assert normalize(_block(_block(_block(_block(a))))) == _block(a)

    def test_keeps_yield_and_named_blocks(self) -> None:
        placeholder = Block(location=_LOC, yield_=True)
        named = NamedBlock(location=_LOC, name="content", nodes=(_block(_text("x")),))
        result = normalize(_block(placeholder, named))
        assert result.nodes[0] is placeholder
        assert result.nodes[1] == NamedBlock(location=_LOC, name="content", nodes=(_text("x"),))

    def test_flattens_inside_tag_block(self) -> None:
        a = _text("a")
        tag = Tag(location=_LOC, name="p", block=_block(_block(a)))
        assert normalize(tag) == Tag(location=_LOC, name="p", block=_block(a))

    def test_unchanged_tree_is_returned_as_is(self) -> None:
        tree = _block(Tag(location=_LOC, name="p", block=_block(_text("a"))))
        assert normalize(tree) is tree

    def test_empty_wrapper_disappears(self) -> None:
        assert normalize(_block(_block(), _text("a"))) == _block(_text("a"))


_leaves = st.builds(_text, st.text(alphabet="abc", max_size=3))


def _blocks(children: st.SearchStrategy[Node]) -> st.SearchStrategy[Node]:
    return st.one_of(
        st.lists(children, max_size=4).map(lambda nodes: _block(*nodes)),
        st.lists(children, max_size=3).map(
            lambda nodes: NamedBlock(location=_LOC, name="b", nodes=tuple(nodes))
        ),
        st.just(Block(location=_LOC, yield_=True)),
    )


_trees = st.recursive(_leaves, _blocks, max_leaves=25)


class TestNormalizeProperties:
    @given(_trees)
    @settings(max_examples=200)
    def test_idempotent(self, tree: Node) -> None:
        once = normalize(tree)
        assert normalize(once) == once

    @given(_trees)
    @settings(max_examples=200)
    def test_no_wrapper_below_a_block(self, tree: Node) -> None:
        for node in _walk(normalize(tree)):
            if isinstance(node, Block):
                assert not any(is_wrapper(child) for child in node.nodes)

    @given(_trees)
    @settings(max_examples=200)
    def test_text_order_preserved(self, tree: Node) -> None:
        assert _texts(normalize(tree)) == _texts(tree)
