"""
Compiler factory.

Classifies the build's CC_TYPE once and creates the matching Compiler.
Every supported family has an entry here; anything else is rejected.
"""

from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Type

from ..config.settings import Settings
from ..process import Runner, run
from .compile_config import FileType
from .compiler import Compiler, CompilerFamily
from .compiler_clang import ClangCompiler
from .compiler_msvc import MsvcCompiler

COMPILER_CLASSES: Dict[CompilerFamily, Type[Compiler]] = {
    CompilerFamily.CLANG: ClangCompiler,
    CompilerFamily.CLANG_CL: MsvcCompiler,
    CompilerFamily.MSVC: MsvcCompiler,
}


def create_compiler(
    srcdir: Path,
    command: Sequence[str],
    file_type: FileType,
    build_config: Mapping[str, str],
    settings: Optional[Settings] = None,
    runner: Runner = run,
) -> Compiler:
    """
    Create a compiler for one language of the build.

    Args:
        srcdir: Top of the source tree
        command: Compiler command (from _CC or _CXX)
        file_type: Language the compiler is used for
        build_config: Variables from config/autoconf.mk
        settings: User overrides
        runner: Process execution function

    Returns:
        Compiler with discovered defaults

    Raises:
        UnsupportedCompilerError: If CC_TYPE is missing, unknown or msvc
        CompilerDiscoveryError: If the compiler's defaults cannot be discovered
    """
    family = CompilerFamily.from_cc_type(build_config.get("CC_TYPE"))
    compiler_class = COMPILER_CLASSES[family]
    return compiler_class.fetch(srcdir, command, file_type, family, build_config, settings, runner)
