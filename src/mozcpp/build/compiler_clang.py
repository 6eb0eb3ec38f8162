"""
Clang compiler.

Discovers clang's defaults with ``-Wp,-v -E -dD`` and can run the real
compiler on a file with exactly the resolved configuration, which is the
quickest way to check that a configuration is complete.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..process import ProcessResult
from .compile_config import CompileConfig, FileType
from .compiler import NULL_INPUT, Compiler
from .flag_translator import CLANG_FORCED_INCLUDE


class ClangCompiler(Compiler):
    """Compiler for the clang family (CC_TYPE=clang)."""

    forced_include_flag = CLANG_FORCED_INCLUDE

    @classmethod
    def probe_arguments(cls, file_type: FileType, sdk: Optional[Path]) -> List[str]:
        args = [f"-std={file_type.version}"]
        args.append("-xc" if file_type is FileType.C else "-xc++")
        if sdk:
            args.extend(["-isysroot", str(sdk)])
        args.extend(["-Wp,-v", "-E", "-dD", NULL_INPUT])
        return args

    def build_compile_command(self, config: CompileConfig, source: Path) -> List[str]:
        """
        Build the command line that compiles source with config.

        Built-in search paths and macros are disabled so that only the
        configuration's own paths and defines take effect.

        Args:
            config: Configuration to compile with
            source: Source file

        Returns:
            Full command line
        """
        cmd = self.get_command(source)
        sdk = config.sdk_path or self._defaults.sdk_path
        if sdk:
            cmd.extend(["-isysroot", str(sdk)])

        cmd.extend(["-nobuiltininc", "-undef", "-c", "-Wno-everything", "-o", NULL_INPUT])

        for include in config.sys_includes:
            cmd.append(f"-isystem{include}")
        for include in config.framework_includes:
            cmd.append(f"-iframework{include}")
        for define in config.defines.values():
            cmd.append(define.to_flag())
        for include in config.includes:
            cmd.append(f"-I{include}")
        for include in config.forced_includes:
            cmd.extend([CLANG_FORCED_INCLUDE, str(include)])

        cmd.append(str(source))
        return cmd

    def compile(self, config: CompileConfig, source: Path) -> ProcessResult:
        source = Path(source)
        cmd = self.build_compile_command(config, source)
        logging.debug(f"Test compiling {source}")
        return self.runner(cmd, cwd=source.parent)
