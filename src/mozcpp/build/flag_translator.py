"""Compiler flag translation.

This module extracts the configuration-relevant flags from a directory's
computed compiler flags and applies them to a CompileConfig.

Design:
    - ``-D``/``/D`` flags become defines; later flags override earlier ones
    - ``-I``/``/I`` flags become user include directories
    - The family's forced include flag consumes the following argument
    - Every other flag is ignored, so new build flags never break resolution
"""

from pathlib import Path
from typing import Optional, Sequence

from ..paths import from_unixy
from .compile_config import CompileConfig, build_define

CLANG_FORCED_INCLUDE = "-include"
MSVC_FORCED_INCLUDE = "-FI"


def _resolve(path: Path, base_dir: Optional[Path]) -> Path:
    if base_dir is None or path.is_absolute():
        return path
    return base_dir / path


def apply_arguments(
    args: Sequence[str],
    config: CompileConfig,
    forced_include_flag: str,
    base_dir: Optional[Path] = None,
) -> CompileConfig:
    """Apply compiler arguments to a configuration.

    Args:
        args: Arguments in command-line order
        config: Configuration to update in place
        forced_include_flag: ``-include`` for clang, ``-FI`` for clang-cl
        base_dir: Directory relative paths are resolved against (the
            directory the compiler would run in); None keeps them relative

    Returns:
        The same config, for convenience

    Example:
        >>> apply_arguments(["-DFOO", "-Iinc"], config, "-include")
        # config.defines["FOO"].value == "1", Path("inc") in config.includes
    """
    index = 0
    while index < len(args):
        arg = args[index]
        index += 1

        if len(arg) < 2 or arg[0] not in ("-", "/"):
            continue

        # A bare -D or -I carries nothing to record.
        if arg[1] == "D":
            if len(arg) > 2:
                config.add_define(build_define(arg[2:], "="))
            continue
        if arg[1] == "I":
            if len(arg) > 2:
                config.includes.add(_resolve(from_unixy(arg[2:]), base_dir))
            continue

        if arg == forced_include_flag:
            if index < len(args):
                config.forced_includes.add(_resolve(Path(args[index]), base_dir))
                index += 1
            continue

    return config
