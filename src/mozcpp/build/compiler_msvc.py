"""
MSVC-compatible compiler.

Covers clang-cl, which understands MSVC style arguments but reports its
defaults in the same format as clang. Real MSVC (CC_TYPE=msvc) cannot
report its defaults this way and is rejected.
"""

from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from ..config.settings import Settings
from ..process import ProcessResult, Runner, run
from .compile_config import CompileConfig, FileType
from .compiler import NULL_INPUT, Compiler, CompilerFamily, UnsupportedCompilerError
from .flag_translator import MSVC_FORCED_INCLUDE


class MsvcCompiler(Compiler):
    """Compiler for the MSVC family (CC_TYPE=clang-cl)."""

    forced_include_flag = MSVC_FORCED_INCLUDE

    @classmethod
    def probe_arguments(cls, file_type: FileType, sdk: Optional[Path]) -> List[str]:
        args = [f"-std:{file_type.version}"]
        args.append("-TC" if file_type is FileType.C else "-TP")
        args.extend(["-v", "-E", "-Xclang", "-dM", NULL_INPUT])
        return args

    @classmethod
    def fetch(
        cls,
        srcdir: Path,
        command: Sequence[str],
        file_type: FileType,
        family: CompilerFamily,
        build_config: Mapping[str, str],
        settings: Optional[Settings] = None,
        runner: Runner = run,
    ) -> Compiler:
        if family is CompilerFamily.MSVC:
            raise UnsupportedCompilerError("The msvc compiler is currently not supported.")
        return super().fetch(srcdir, command, file_type, family, build_config, settings, runner)

    def compile(self, config: CompileConfig, source: Path) -> ProcessResult:
        raise UnsupportedCompilerError("Test compiling is not yet supported on Windows.")
