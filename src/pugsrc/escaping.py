"""Text escaping and attribute quoting.

Pure string functions, safe to call from any thread.
"""

import re

# An interpolation opener, plus the backslash that may already escape it
_INTERPOLATION_RE = re.compile(r"\\?#([\[{])")


def escape_interpolation(text: str) -> str:
    """Escape ``#{`` and ``#[`` so regenerated text cannot start interpolation.

    An opener that already carries a backslash keeps exactly one.

    Example:
        >>> escape_interpolation("price: #{x} and \\\\#[y]")
        'price: \\\\#{x} and \\\\#[y]'

    """
    return _INTERPOLATION_RE.sub(r"\\#\1", text)


def quote(value: str, preferred: str = "'") -> str:
    """Wrap ``value`` in quotes, escaping as little as possible.

    The other quote character is used when ``value`` contains only the
    preferred one. Otherwise the preferred quote is used and its occurrences
    are backslash-escaped.

    Example:
        >>> quote("it's")
        '"it\\'s"'
        >>> quote('say "hi"')
        '\\'say "hi"\\''

    """
    other = '"' if preferred == "'" else "'"
    if preferred in value and other not in value:
        return f"{other}{value}{other}"
    escaped = value.replace(preferred, "\\" + preferred)
    return f"{preferred}{escaped}{preferred}"
