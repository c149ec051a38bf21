"""Error hierarchy and message formatting tests."""

import pytest

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
from pugsrc.location import SourceLocation
from pugsrc.nodes import Block, Comment, Filter, Tag, Text

_LOC = SourceLocation(lineno=3, filename="views/index.pug")


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_cls",
        [
            MissingNodeError,
            UnsupportedNodeTypeError,
            InvalidFilterChainError,
            IllegalInlineHtmlError,
            UnexpectedPipelessChildError,
        ],
    )
    def test_generate_errors(self, error_cls: type) -> None:
        assert issubclass(error_cls, GenerateError)
        assert issubclass(error_cls, PugsrcError)

    def test_type_errors(self) -> None:
        assert issubclass(MissingNodeError, TypeError)
        assert issubclass(UnsupportedNodeTypeError, TypeError)

    def test_config_error(self) -> None:
        assert issubclass(ConfigError, ValueError)
        assert not issubclass(ConfigError, GenerateError)


class TestGenerateError:
    def test_message_only(self) -> None:
        err = GenerateError("bad tree")
        assert str(err) == "bad tree"
        assert err.lineno is None
        assert err.filename is None
        assert err.node_type is None

    def test_location_attributes(self) -> None:
        err = GenerateError("bad tree", node_type="Tag", location=_LOC)
        assert err.lineno == 3
        assert err.filename == "views/index.pug"
        assert err.location is _LOC


class TestMessages:
    def test_missing_child(self) -> None:
        tag = Tag(location=_LOC, name="p", block=Block(location=_LOC))
        err = MissingNodeError(tag, "block")
        assert str(err) == "A child of Tag (views/index.pug:3) (block) is missing, expected a Pug AST node."
        assert err.node_type == "Tag"
        assert err.lineno == 3

    def test_missing_top_level(self) -> None:
        assert str(MissingNodeError()) == "A top-level node is missing, expected a Pug AST node."

    def test_unsupported_with_parent(self) -> None:
        parent = Block(location=SourceLocation(lineno=1))
        node = Text(location=SourceLocation(lineno=2), val="x")
        err = UnsupportedNodeTypeError(node, parent)
        assert str(err) == "A child of Block (Pug:1) (Pug:2) is of type Text, which is not supported by pugsrc."
        assert err.node_type == "Text"

    def test_unsupported_from_raw_data(self) -> None:
        err = UnsupportedNodeTypeError(type_name="Bogus", location=SourceLocation(lineno=9))
        assert str(err) == "A top-level node (Pug:9) is of type Bogus, which is not supported by pugsrc."

    def test_filter_chain(self) -> None:
        node = Filter(location=_LOC, name="babel", block=Block(location=_LOC))
        assert "Filter (views/index.pug:3)" in str(InvalidFilterChainError(node))

    def test_inline_html(self) -> None:
        node = Text(location=_LOC, val="<b>", is_html=True)
        assert "cannot be rendered inline" in str(IllegalInlineHtmlError(node))

    def test_pipeless_child(self) -> None:
        node = Comment(location=_LOC, val="x")
        err = UnexpectedPipelessChildError(node, Block(location=SourceLocation(lineno=2)))
        assert "Comment (views/index.pug:3)" in str(err)
        assert "Block (Pug:2)" in str(err)


class TestSourceLocation:
    def test_str_with_filename(self) -> None:
        assert str(_LOC) == "views/index.pug:3"

    def test_str_without_filename(self) -> None:
        assert str(SourceLocation(lineno=10)) == "Pug:10"

    def test_unknown(self) -> None:
        assert SourceLocation.unknown().lineno == 0
