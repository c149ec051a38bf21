"""Exception classes for pugsrc.

Every failure while generating source is fatal to the current call. A
malformed tree is an upstream error, so nothing here is meant to be
caught and retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pugsrc.location import SourceLocation


class PugsrcError(Exception):
    """Base exception for all pugsrc errors.

    Subclass this for specific error categories.
    """

    pass


class ConfigError(PugsrcError, ValueError):
    """Invalid generator configuration."""

    pass


def _describe(node_type: str | None, location: SourceLocation | None) -> str:
    """Describe a node for error messages: ``Tag (index.pug:3)``."""
    if location is None:
        return node_type or "node"
    return f"{node_type} ({location})"


def _node_info(node: object | None) -> tuple[str | None, SourceLocation | None]:
    if node is None:
        return None, None
    return type(node).__name__, getattr(node, "location", None)


class GenerateError(PugsrcError):
    """Error while turning a tree back into source.

    Attributes:
        node_type: Type name of the node the error is about
        location: Its SourceLocation, when known
        lineno: Its line number, when known
        filename: Its template file, when known

    """

    def __init__(
        self,
        message: str,
        *,
        node_type: str | None = None,
        location: SourceLocation | None = None,
    ) -> None:
        self.node_type = node_type
        self.location = location
        self.lineno = location.lineno if location is not None else None
        self.filename = location.filename if location is not None else None
        super().__init__(message)


class MissingNodeError(GenerateError, TypeError):
    """A required child reference is absent.

    The message names the parent's type and location.
    """

    def __init__(
        self,
        parent: object | None = None,
        field: str | None = None,
        *,
        parent_type: str | None = None,
        location: SourceLocation | None = None,
    ) -> None:
        """Initialize missing node error.

        Args:
            parent: Node whose child is missing (None at the top level)
            field: Name of the missing field (optional)
            parent_type: Parent type name, when no parent node exists yet
            location: Parent location, when no parent node exists yet
        """
        if parent is not None:
            parent_type, location = _node_info(parent)
        if parent_type is None:
            subject = "A top-level node"
        else:
            subject = f"A child of {_describe(parent_type, location)}"
        if field:
            subject += f" ({field})"
        super().__init__(
            f"{subject} is missing, expected a Pug AST node.",
            node_type=parent_type,
            location=location,
        )


class UnsupportedNodeTypeError(GenerateError, TypeError):
    """A node has no dispatch handler.

    The message names the type, its location and the parent context.
    """

    def __init__(
        self,
        node: object | None = None,
        parent: object | None = None,
        *,
        type_name: str | None = None,
        location: SourceLocation | None = None,
        parent_type: str | None = None,
        parent_location: SourceLocation | None = None,
    ) -> None:
        """Initialize unsupported node error.

        Args:
            node: The undispatchable node
            parent: Its parent node (optional)
            type_name: Type name, when there is no node object (raw JSON)
            location: Location, when there is no node object (raw JSON)
            parent_type: Parent type name, when there is no parent object
            parent_location: Parent location, when there is no parent object
        """
        if node is not None:
            type_name, location = _node_info(node)
        if parent is not None:
            parent_type, parent_location = _node_info(parent)
        if parent_type is not None:
            context = f"A child of {_describe(parent_type, parent_location)}"
        else:
            context = "A top-level node"
        where = f" ({location})" if location is not None else ""
        super().__init__(
            f"{context}{where} is of type {type_name}, which is not supported by pugsrc.",
            node_type=type_name,
            location=location,
        )


class InvalidFilterChainError(GenerateError):
    """A filter chain is mixed with other children in the same block."""

    def __init__(
        self,
        node: object | None = None,
        *,
        node_type: str | None = None,
        location: SourceLocation | None = None,
    ) -> None:
        if node is not None:
            node_type, location = _node_info(node)
        super().__init__(
            f"{_describe(node_type, location)} chains into a filter but has other children.",
            node_type=node_type,
            location=location,
        )


class IllegalInlineHtmlError(GenerateError):
    """HTML text requested in an inline position."""

    def __init__(self, node: object) -> None:
        node_type, location = _node_info(node)
        super().__init__(
            f"HTML text {_describe(node_type, location)} cannot be rendered inline.",
            node_type=node_type,
            location=location,
        )


class UnexpectedPipelessChildError(GenerateError):
    """A pipeless text block holds something other than Text, Code or Tag."""

    def __init__(self, node: object, parent: object | None = None) -> None:
        node_type, location = _node_info(node)
        super().__init__(
            f"Unexpected {_describe(node_type, location)} in pipeless text block"
            f" of {_describe(*_node_info(parent)) if parent is not None else 'the document'}.",
            node_type=node_type,
            location=location,
        )
