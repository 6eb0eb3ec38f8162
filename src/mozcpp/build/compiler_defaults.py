"""Compiler defaults parser.

Running a clang-compatible compiler with ``-v -E -dD`` on an empty input
prints its include search list and every predefined macro:

    #include "..." search starts here:
    #include <...> search starts here:
     /usr/lib/llvm/lib/clang/17/include
     /usr/include
     /System/Library/Frameworks (framework directory)
    End of search list.
    #define __clang__ 1
    #define __STDC__ 1

This module turns those lines into a baseline CompileConfig.
"""

from enum import Enum
from pathlib import Path
from typing import Iterable

from .compile_config import CompileConfig, build_define

INCLUDE_MARKER = "#include "
DEFINE_MARKER = "#define "
FRAMEWORK_MARKER = " (framework directory)"


class ParserState(Enum):
    """Where the parser is in the compiler output."""

    OUTSIDE_BLOCK = "outside_block"
    INSIDE_USER_BLOCK = "inside_user_block"
    INSIDE_SYSTEM_BLOCK = "inside_system_block"


class CompilerDefaultsParser:
    """Line-by-line parser for compiler search path and macro output.

    Include blocks start at an ``#include`` header line. While inside one,
    lines starting with a space are search directories; any other line ends
    the block and is then handled as an ordinary line.
    """

    def __init__(self, config: CompileConfig):
        """Initialize parser.

        Args:
            config: Configuration that receives discovered paths and defines
        """
        self.config = config
        self.state = ParserState.OUTSIDE_BLOCK

    def feed(self, line: str) -> None:
        """Process one line of compiler output."""
        if self.state is not ParserState.OUTSIDE_BLOCK:
            if line.startswith(" "):
                self._add_search_path(line.strip())
                return
            self.state = ParserState.OUTSIDE_BLOCK

        if line.startswith(INCLUDE_MARKER):
            if line[len(INCLUDE_MARKER):].startswith("<"):
                self.state = ParserState.INSIDE_SYSTEM_BLOCK
            else:
                self.state = ParserState.INSIDE_USER_BLOCK
        elif line.startswith(DEFINE_MARKER):
            self.config.add_define(build_define(line[len(DEFINE_MARKER):].strip(), " "))

    def feed_lines(self, lines: Iterable[str]) -> CompileConfig:
        for line in lines:
            self.feed(line)
        return self.config

    def _add_search_path(self, entry: str) -> None:
        if entry.endswith(FRAMEWORK_MARKER):
            self.config.framework_includes.add(Path(entry[:-len(FRAMEWORK_MARKER)]))
        elif self.state is ParserState.INSIDE_SYSTEM_BLOCK:
            self.config.sys_includes.add(Path(entry))
        else:
            self.config.includes.add(Path(entry))


def parse_compiler_defaults(lines: Iterable[str], config: CompileConfig) -> CompileConfig:
    """Parse compiler diagnostic output into ``config``.

    Args:
        lines: Output lines from the compiler
        config: Configuration to fill in

    Returns:
        The same config, for convenience
    """
    return CompilerDefaultsParser(config).feed_lines(lines)
