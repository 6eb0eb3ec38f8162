"""Shell argument splitting.

Make fragments store compiler flags as a single shell-quoted string; this
module turns that string back into the argument list make would have passed.
"""

import shlex
from typing import List


class ShellParseError(Exception):
    """Raised when an argument string has unbalanced quoting."""
    pass


def split_arguments(text: str) -> List[str]:
    """Split a string following POSIX shell quoting rules.

    Args:
        text: Argument string (e.g. a COMPUTED_CXXFLAGS value)

    Returns:
        List of individual arguments

    Raises:
        ShellParseError: If a quote is left unterminated

    Example:
        >>> split_arguments('-DFOO="bar baz" -DTEST')
        ['-DFOO=bar baz', '-DTEST']
    """
    try:
        return shlex.split(text, posix=True)
    except ValueError as e:
        raise ShellParseError(f"Unable to split arguments {text!r}: {e}") from e
