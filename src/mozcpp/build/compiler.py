"""Abstract base class for compilers.

A Compiler owns the baseline configuration discovered from one compiler
binary for one language, and knows how to turn per-directory flags into a
full configuration for that family (clang or clang-cl).
"""

import logging
import os
import sys
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..config.settings import Settings
from ..paths import PathSet
from ..process import ProcessLaunchError, ProcessResult, Runner, run
from .compile_config import CompileConfig, FileType
from .compiler_defaults import parse_compiler_defaults
from .flag_translator import apply_arguments

# Input file for probes; the compiler preprocesses nothing.
NULL_INPUT = os.devnull


class CompilerError(Exception):
    """Base exception for compiler errors."""
    pass


class CompilerDiscoveryError(CompilerError):
    """Raised when a compiler's default configuration cannot be determined."""
    pass


class UnsupportedCompilerError(CompilerError):
    """Raised for compiler families or operations that are not supported."""
    pass


class CompilerFamily(Enum):
    """Compiler families reported by the build's CC_TYPE."""

    CLANG = "clang"
    CLANG_CL = "clang-cl"
    MSVC = "msvc"

    @classmethod
    def from_cc_type(cls, value: Optional[str]) -> "CompilerFamily":
        """Classify a CC_TYPE value.

        Raises:
            UnsupportedCompilerError: If the value is missing or unknown
        """
        if not value:
            raise UnsupportedCompilerError("Unable to determine compiler types.")
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedCompilerError(f"Unknown compiler type {value}.") from None

    @property
    def intellisense_mode(self) -> str:
        return "msvc-x64" if self is CompilerFamily.MSVC else "clang-x64"


class Compiler(ABC):
    """Interface for compiler families.

    Subclasses provide the probe arguments used to discover the compiler's
    defaults, the forced include flag and real compilation.
    """

    forced_include_flag: str = ""

    def __init__(
        self,
        srcdir: Path,
        command: Sequence[str],
        file_type: FileType,
        family: CompilerFamily,
        defaults: CompileConfig,
        settings: Optional[Settings] = None,
        runner: Runner = run,
    ):
        """
        Initialize compiler.

        Args:
            srcdir: Top of the source tree
            command: Compiler command from the build configuration
            file_type: Language this compiler is used for
            family: Compiler family
            defaults: Discovered baseline configuration (owned by this compiler)
            settings: User overrides
            runner: Process execution function
        """
        self.srcdir = Path(srcdir)
        self.command = list(command)
        self.file_type = file_type
        self.family = family
        self._defaults = defaults
        self.settings = settings
        self.runner = runner

    @classmethod
    @abstractmethod
    def probe_arguments(cls, file_type: FileType, sdk: Optional[Path]) -> List[str]:
        """Arguments that make the compiler print its search paths and macros.

        Args:
            file_type: Language to probe
            sdk: macOS SDK root, if any

        Returns:
            Arguments appended to the compiler command
        """
        pass

    @staticmethod
    def get_sdk(build_config: Mapping[str, str]) -> Optional[Path]:
        """Get the macOS SDK from the build configuration (macOS only)."""
        if sys.platform != "darwin":
            return None
        sdk = build_config.get("MACOS_SDK_DIR")
        return Path(sdk) if sdk else None

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
    ) -> "Compiler":
        """
        Discover a compiler's defaults and create the compiler.

        Args:
            srcdir: Top of the source tree
            command: Compiler command from the build configuration
            file_type: Language to discover defaults for
            family: Compiler family
            build_config: Variables from the base make fragment
            settings: User overrides
            runner: Process execution function

        Returns:
            Compiler with its baseline configuration

        Raises:
            CompilerDiscoveryError: If no defaults could be discovered
        """
        override = settings.get_compiler(srcdir, file_type.value) if settings else None
        sdk = cls.get_sdk(build_config)

        probe = list(override or command)
        probe.extend(cls.probe_arguments(file_type, sdk))

        defaults = CompileConfig(
            standard=file_type.standard,
            intellisense_mode=family.intellisense_mode,
            compiler_path=override[0] if override else None,
            sdk_path=sdk,
        )

        try:
            result = runner(probe, cwd=srcdir)
        except ProcessLaunchError as e:
            logging.error(f"Failed to get compiler defaults: {e}")
            raise CompilerDiscoveryError(f"Failed to run {probe[0]}: {e.reason}") from e

        if not result.success:
            logging.warning(f"{' '.join(probe)} exited with code {result.exit_code}")

        parse_compiler_defaults(result.output, defaults)

        # No predefined macros at all means this is not a working compiler.
        if not defaults.defines and not defaults.compiler_path:
            logging.error(f"Failed to get compiler defaults:\n{result.describe()}")
            raise CompilerDiscoveryError("Failed to discover compiler defaults.")

        logging.info(
            f"Discovered {file_type.value} compiler defaults: {len(defaults.defines)} defines, "
            f"{len(defaults.sys_includes)} system include directories"
        )
        return cls(srcdir, command, file_type, family, defaults, settings, runner)

    def get_command(self, path: Optional[Path] = None) -> List[str]:
        """Compiler command, with any user override for path applied."""
        if self.settings is not None:
            override = self.settings.get_compiler(path or self.srcdir, self.file_type.value)
            if override:
                return override
        return list(self.command)

    def get_default_configuration(self) -> CompileConfig:
        """Return a copy of the baseline configuration."""
        return self._defaults.copy()

    def get_include_paths(self) -> PathSet:
        """Baseline include directories: system, framework then user."""
        includes = PathSet(self._defaults.sys_includes)
        includes.update(self._defaults.framework_includes)
        includes.update(self._defaults.includes)
        return includes

    def add_arguments_to_config(
        self, args: Sequence[str], config: CompileConfig, base_dir: Optional[Path] = None
    ) -> CompileConfig:
        """Apply compiler arguments to config using this family's flags."""
        return apply_arguments(args, config, self.forced_include_flag, base_dir)

    def resolve_configuration(self, args: Sequence[str], base_dir: Optional[Path] = None) -> CompileConfig:
        """
        Build the configuration for a file compiled with ``args``.

        Args:
            args: Per-directory compiler arguments
            base_dir: Directory relative paths in args are resolved against

        Returns:
            New configuration; the baseline is never modified
        """
        return self.add_arguments_to_config(args, self.get_default_configuration(), base_dir)

    @abstractmethod
    def compile(self, config: CompileConfig, source: Path) -> ProcessResult:
        """
        Run the real compiler on a source file.

        Args:
            config: Configuration to compile with
            source: Source file

        Returns:
            ProcessResult; a non-zero exit code is a normal outcome

        Raises:
            ProcessLaunchError: If the compiler cannot be started
            UnsupportedCompilerError: If the family cannot compile
        """
        pass

    def to_state(self) -> Dict[str, Any]:
        """Describe this compiler for diagnostics."""
        override = self.settings.get_compiler(self.srcdir, self.file_type.value) if self.settings else None
        return {
            "family": self.family.value,
            "type": self.file_type.value,
            "command": self.command,
            "override": override,
            "includes": self._defaults.includes.to_list(),
            "sysIncludes": self._defaults.sys_includes.to_list(),
            "osxFrameworkIncludes": self._defaults.framework_includes.to_list(),
            "defines": len(self._defaults.defines),
        }

