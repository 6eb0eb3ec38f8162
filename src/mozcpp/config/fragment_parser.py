"""Make fragment parser.

The build backend writes its variables into generated makefile fragments
(``config/autoconf.mk`` for the whole tree, ``backend.mk`` per directory).
Only two forms of line matter here:

    KEY = VALUE      sets KEY
    KEY += VALUE     appends VALUE to KEY, separated by one space

Everything else (comments, conditionals, rules, blank lines) is ignored.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

SET_TOKEN = " = "
APPEND_TOKEN = " += "


class FragmentReadError(Exception):
    """Raised when a fragment file cannot be read."""
    pass


def _split_assignment(line: str) -> Optional[Tuple[str, str, bool]]:
    """Split a line at whichever assignment token appears first.

    Returns:
        (key, value, append) or None when the line is not an assignment
    """
    set_pos = line.find(SET_TOKEN)
    append_pos = line.find(APPEND_TOKEN)

    if append_pos > 0 and (set_pos < 0 or append_pos < set_pos):
        return line[:append_pos].strip(), line[append_pos + len(APPEND_TOKEN):].strip(), True
    if set_pos > 0:
        return line[:set_pos].strip(), line[set_pos + len(SET_TOKEN):].strip(), False
    return None


def parse_fragment_text(text: str, values: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Apply the assignments in ``text`` to ``values``.

    Args:
        text: Fragment contents
        values: Mapping to accumulate into (a new one is created if omitted)

    Returns:
        The updated mapping
    """
    if values is None:
        values = {}

    for line in text.splitlines():
        assignment = _split_assignment(line)
        if assignment is None:
            continue

        key, value, append = assignment
        previous = values.get(key)
        if append and previous:
            value = f"{previous} {value}"
        values[key] = value

    return values


def parse_fragment(path: Path, values: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Parse a fragment file.

    Args:
        path: Fragment file to read
        values: Mapping to accumulate into (a new one is created if omitted)

    Returns:
        Mapping of variable name to accumulated value

    Raises:
        FragmentReadError: If the file is missing, not a regular file or unreadable
    """
    path = Path(path)
    logging.debug(f"Parsing config from {path}")

    if not path.is_file():
        raise FragmentReadError(f"Fragment not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FragmentReadError(f"Failed to read {path}: {e}") from e

    return parse_fragment_text(text, values)
