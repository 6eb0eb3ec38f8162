"""
Build configuration resolution for mozcpp.

This package provides:
- The compile configuration model
- Compiler defaults discovery and flag translation (clang, clang-cl)
- Mach environment discovery
- Per-file resolution for recursive make builds
"""

from .compile_config import CompileConfig, Define, FileType, build_define
from .compiler import (
    Compiler,
    CompilerDiscoveryError,
    CompilerError,
    CompilerFamily,
    UnsupportedCompilerError,
)
from .compiler_clang import ClangCompiler
from .compiler_defaults import CompilerDefaultsParser, ParserState, parse_compiler_defaults
from .compiler_factory import create_compiler
from .compiler_msvc import MsvcCompiler
from .flag_translator import apply_arguments
from .mach import EnvironmentSchemaError, Mach, MachEnvironment, MachError, MozConfig
from .orchestrator import Build, BuildStage, RecursiveMakeBuild, get_file_type
from .registry import BuildRegistry

__all__ = [
    "CompileConfig",
    "Define",
    "FileType",
    "build_define",
    "Compiler",
    "CompilerError",
    "CompilerDiscoveryError",
    "UnsupportedCompilerError",
    "CompilerFamily",
    "ClangCompiler",
    "MsvcCompiler",
    "CompilerDefaultsParser",
    "ParserState",
    "parse_compiler_defaults",
    "create_compiler",
    "apply_arguments",
    "Mach",
    "MachEnvironment",
    "MachError",
    "EnvironmentSchemaError",
    "MozConfig",
    "Build",
    "BuildStage",
    "RecursiveMakeBuild",
    "get_file_type",
    "BuildRegistry",
]
