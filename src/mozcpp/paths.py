"""Path utilities.

This module provides the small amount of path handling the engine needs on
top of pathlib:

- Rebasing a path from the source tree onto the mirrored object tree
- Converting the MSYS-style paths reported by mach into native paths
- An insertion-ordered set of paths keyed by normalized path string
"""

import os
import re
import sys
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

PathLike = Union[str, Path]

_MSYS_DRIVE = re.compile(r"^/([a-zA-Z])(/|$)")


def normalize(path: PathLike) -> str:
    """Return the string used to compare two paths for equality."""
    return os.path.normcase(os.path.normpath(str(path)))


def from_unixy(text: str) -> Path:
    """Convert a path as printed by the build front-end into a native path.

    On Windows mach runs under MSYS and reports paths like ``/c/mozilla``;
    these become ``c:/mozilla``. Elsewhere the text is used as-is.

    Args:
        text: Path text from mach or a make fragment

    Returns:
        Native Path
    """
    if sys.platform == "win32":
        match = _MSYS_DRIVE.match(text)
        if match:
            text = f"{match.group(1)}:/{text[match.end():]}"
    return Path(text)


def rebase(path: PathLike, old_root: PathLike, new_root: PathLike) -> Path:
    """Reproject a path under ``old_root`` to the same place under ``new_root``.

    Example:
        >>> rebase("/src/dom/base", "/src", "/obj")
        PosixPath('/obj/dom/base')

    Raises:
        ValueError: If path is not inside old_root
    """
    relative = Path(os.path.normpath(str(path))).relative_to(os.path.normpath(str(old_root)))
    return Path(new_root) / relative


def is_within(path: PathLike, root: PathLike) -> bool:
    """Check whether path is root itself or lies below it."""
    path_key = normalize(path)
    root_key = normalize(root)
    return path_key == root_key or path_key.startswith(root_key.rstrip(os.sep) + os.sep)


class PathSet:
    """Ordered set of paths.

    Paths are de-duplicated by their normalized string while the first
    spelling seen and the insertion order are kept; downstream consumers
    search include directories in order.
    """

    def __init__(self, paths: Optional[Iterable[PathLike]] = None):
        self._paths: Dict[str, Path] = {}
        if paths is not None:
            self.update(paths)

    def add(self, path: PathLike) -> None:
        key = normalize(path)
        if key not in self._paths:
            self._paths[key] = Path(path)

    def update(self, paths: Iterable[PathLike]) -> None:
        for path in paths:
            self.add(path)

    def copy(self) -> "PathSet":
        return PathSet(self._paths.values())

    def to_list(self) -> List[str]:
        return [str(path) for path in self._paths.values()]

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return normalize(path) in self._paths

    def __iter__(self) -> Iterator[Path]:
        return iter(list(self._paths.values()))

    def __len__(self) -> int:
        return len(self._paths)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathSet):
            return NotImplemented
        return list(self._paths) == list(other._paths)

    def __repr__(self) -> str:
        return f"PathSet({self.to_list()!r})"
