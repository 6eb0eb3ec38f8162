"""Compile configuration model.

A CompileConfig is what the engine hands to an editor integration for one
source file: include paths in three classes, forced includes, macro
definitions, the language standard and the IntelliSense mode.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from ..paths import PathSet

C_STANDARD = "c99"
CPP_STANDARD = "c++14"

# Flag values used when invoking the compiler; C is built as GNU C.
C_VERSION = "gnu99"
CPP_VERSION = CPP_STANDARD


class FileType(Enum):
    """Source language of a file."""

    C = "c"
    CPP = "cpp"

    @property
    def standard(self) -> str:
        return C_STANDARD if self is FileType.C else CPP_STANDARD

    @property
    def version(self) -> str:
        return C_VERSION if self is FileType.C else CPP_VERSION


@dataclass(frozen=True)
class Define:
    """A preprocessor macro definition."""

    key: str
    value: str

    def to_flag(self) -> str:
        return f"-D{self.key}={self.value}"

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


def build_define(text: str, separator: str) -> Define:
    """Split ``text`` at the first ``separator`` into a Define.

    Example:
        >>> build_define("FOO=bar", "=")
        Define(key='FOO', value='bar')
        >>> build_define("FOO", "=")
        Define(key='FOO', value='1')
    """
    key, found, value = text.partition(separator)
    if not found:
        return Define(key=text, value="1")
    return Define(key=key, value=value)


@dataclass
class CompileConfig:
    """Resolved compiler configuration.

    Attributes:
        includes: User include directories (-I)
        sys_includes: System include directories (-isystem)
        framework_includes: macOS framework directories (-iframework)
        forced_includes: Headers injected into every translation unit
        defines: Macro definitions keyed by name
        standard: Language standard tag (e.g. c99, c++14)
        intellisense_mode: Compiler kind tag (clang-x64, msvc-x64)
        compiler_path: Compiler binary override, if the user configured one
        sdk_path: macOS SDK root used with -isysroot
    """

    standard: str
    intellisense_mode: str
    includes: PathSet = field(default_factory=PathSet)
    sys_includes: PathSet = field(default_factory=PathSet)
    framework_includes: PathSet = field(default_factory=PathSet)
    forced_includes: PathSet = field(default_factory=PathSet)
    defines: Dict[str, Define] = field(default_factory=dict)
    compiler_path: Optional[str] = None
    sdk_path: Optional[Path] = None

    def copy(self) -> "CompileConfig":
        """Return an independent copy; changing it never affects this config."""
        return CompileConfig(
            standard=self.standard,
            intellisense_mode=self.intellisense_mode,
            includes=self.includes.copy(),
            sys_includes=self.sys_includes.copy(),
            framework_includes=self.framework_includes.copy(),
            forced_includes=self.forced_includes.copy(),
            defines=dict(self.defines),
            compiler_path=self.compiler_path,
            sdk_path=self.sdk_path,
        )

    def add_define(self, define: Define) -> None:
        self.defines[define.key] = define

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the shape consumed by editor integrations."""
        include_path = PathSet(self.includes)
        include_path.update(self.sys_includes)

        result: Dict[str, Any] = {
            "includePath": include_path.to_list(),
            "macFrameworkPath": self.framework_includes.to_list(),
            "forcedInclude": self.forced_includes.to_list(),
            "defines": [str(define) for define in self.defines.values()],
            "standard": self.standard,
            "intelliSenseMode": self.intellisense_mode,
        }
        if self.compiler_path:
            result["compilerPath"] = self.compiler_path
        if self.sdk_path:
            result["sdkPath"] = str(self.sdk_path)
        return result
