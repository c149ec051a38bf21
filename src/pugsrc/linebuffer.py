"""LineBuffer for line-oriented source accumulation.

Pug is indentation-sensitive, so output is built as a list of lines plus a
current indent depth. Every node handler either starts a new line at some
depth or continues the last line; nothing ever reaches back into earlier
lines. Lines are joined once at the end.

Thread Safety:
LineBuffer instances are local to each generate() call.
No shared mutable state.

"""

from __future__ import annotations


class LineBuffer:
    """Indentation-aware line accumulator.

    ``depth`` starts at -1 by default so that visiting the root Block brings
    its children to depth 0.

    Usage:
        >>> buf = LineBuffer("  ", depth=0)
        >>> buf.new_line("ul")
        >>> buf.new_line("li", 1)
        >>> buf.append(" one")
        >>> buf.build()
        'ul\\n  li one'

    """

    __slots__ = ("_lines", "_unit", "depth")

    def __init__(self, unit: str = "  ", *, depth: int = -1) -> None:
        """Initialize empty LineBuffer.

        Args:
            unit: Literal repeated once per indent level
            depth: Starting indent depth
        """
        self._lines: list[str] = []
        self._unit = unit
        self.depth = depth

    def indent(self, delta: int = 0) -> str:
        """Return the indent for ``depth + delta`` (empty when not positive)."""
        return self._unit * (self.depth + delta)

    def new_line(self, text: str = "", delta: int = 0) -> None:
        """Start a new line at ``depth + delta``.

        Args:
            text: Initial line content
            delta: Indent offset relative to the current depth
        """
        self._lines.append(self.indent(delta) + text)

    def append(self, text: str) -> None:
        """Continue the last line.

        Args:
            text: String to append (empty strings are skipped)
        """
        if not text:
            return
        if self._lines:
            self._lines[-1] += text
        else:
            self._lines.append(text)

    def build(self) -> str:
        """Join all lines with ``\\n``, without a trailing newline."""
        return "\n".join(self._lines)

    def __len__(self) -> int:
        """Return number of lines."""
        return len(self._lines)

    def __bool__(self) -> bool:
        """Return True if any line has been started."""
        return bool(self._lines)
