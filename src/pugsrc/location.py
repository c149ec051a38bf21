"""Source location tracking for error messages and layout decisions.

Provides SourceLocation dataclass for tracking where a node came from in
the original template. The line number doubles as layout input: nodes that
share a line with their predecessor are emitted inline.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for error messages and debugging.

    Attributes:
        lineno: Line number (1-indexed, 0 when unknown)
        column: Column (1-indexed, optional)
        filename: Template file path (optional)

    Examples:
        >>> loc = SourceLocation(lineno=3, filename="views/index.pug")
        >>> str(loc)
        'views/index.pug:3'

    """

    lineno: int
    column: int | None = None
    filename: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "index.pug:10" or "Pug:10"
        """
        return f"{self.filename or 'Pug'}:{self.lineno}"

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Create an unknown/placeholder location.

        Use for AST nodes created synthetically or when the parser gave no line.
        """
        return cls(lineno=0)
