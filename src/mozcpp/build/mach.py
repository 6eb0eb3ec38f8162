"""
Mach front-end access.

The engine asks mach for its environment exactly once per source tree:

    ./mach environment --format json

The JSON reply is validated into typed dataclasses; anything that does not
match the expected shape is an error.
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..config.settings import Settings
from ..process import ProcessLaunchError, ProcessResult, Runner, run

ENVIRONMENT_ARGS = ["environment", "--format", "json"]


class MachError(Exception):
    """Raised when mach cannot be run or its output cannot be used."""
    pass


class EnvironmentSchemaError(MachError):
    """Raised when mach's environment does not have the expected shape."""
    pass


def _require_string(data: Dict[str, Any], key: str, context: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise EnvironmentSchemaError(f"{context}.{key}: expected string, got {type(value).__name__}")
    return value


def _require_string_list(data: Dict[str, Any], key: str, context: str) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise EnvironmentSchemaError(f"{context}.{key}: expected string[]")
    return list(value)


def _require_object(data: Any, context: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise EnvironmentSchemaError(f"{context}: expected object, got {type(data).__name__}")
    return data


@dataclass
class MozConfig:
    """The mozconfig section of mach's environment.

    Attributes:
        configure_args: Arguments passed to configure
        make_extra: Extra make variables
        make_flags: Extra make flags
        path: Path of the mozconfig file
    """

    configure_args: List[str]
    make_extra: List[str]
    make_flags: List[str]
    path: str

    @classmethod
    def from_dict(cls, data: Any) -> "MozConfig":
        """Create MozConfig from decoded JSON.

        Raises:
            EnvironmentSchemaError: If data does not match the schema
        """
        data = _require_object(data, "mozconfig")
        return cls(
            configure_args=_require_string_list(data, "configure_args", "mozconfig"),
            make_extra=_require_string_list(data, "make_extra", "mozconfig"),
            make_flags=_require_string_list(data, "make_flags", "mozconfig"),
            path=_require_string(data, "path", "mozconfig"),
        )


@dataclass
class MachEnvironment:
    """Result of ``mach environment``.

    Attributes:
        mozconfig: The active mozconfig
        topobjdir: Top of the object directory
        topsrcdir: Top of the source directory
    """

    mozconfig: MozConfig
    topobjdir: str
    topsrcdir: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> "MachEnvironment":
        """Create MachEnvironment from decoded JSON.

        Raises:
            EnvironmentSchemaError: If data does not match the schema
        """
        data = _require_object(data, "environment")
        return cls(
            mozconfig=MozConfig.from_dict(data.get("mozconfig")),
            topobjdir=_require_string(data, "topobjdir", "environment"),
            topsrcdir=_require_string(data, "topsrcdir", "environment"),
        )


class Mach:
    """Runs mach for one source tree, honouring user overrides."""

    def __init__(
        self,
        srcdir: Path,
        command: Sequence[str],
        settings: Optional[Settings] = None,
        runner: Runner = run,
    ):
        """
        Initialize mach wrapper.

        Args:
            srcdir: Top of the source tree (mach's working directory)
            command: Default mach command (normally [<srcdir>/mach])
            settings: User overrides for the command and environment
            runner: Process execution function
        """
        self.srcdir = Path(srcdir)
        self.command = [str(arg) for arg in command]
        self.settings = settings
        self.runner = runner

    def get_command(self) -> List[str]:
        if self.settings is not None:
            override = self.settings.get_mach(self.srcdir)
            if override:
                return override
        return list(self.command)

    def get_environment_variables(self) -> Dict[str, str]:
        return self.settings.get_mach_environment() if self.settings is not None else {}

    def execute(self, args: Sequence[str]) -> ProcessResult:
        """Run mach with args in the source directory."""
        command = self.get_command()
        command.extend(args)
        return self.runner(command, cwd=self.srcdir, env=self.get_environment_variables())

    def get_environment(self) -> MachEnvironment:
        """
        Query mach for the build environment.

        Returns:
            Validated MachEnvironment

        Raises:
            MachError: If mach cannot be run or its output is not a valid environment
        """
        try:
            result = self.execute(ENVIRONMENT_ARGS)
        except ProcessLaunchError as e:
            logging.error(f"Unable to run mach: {e}")
            raise MachError("Unable to parse mach environment.") from e

        if not result.success:
            logging.error(f"mach environment failed:\n{result.describe()}")
            raise MachError("Unable to parse mach environment.")

        data = "".join(result.stdout)
        try:
            return MachEnvironment.from_dict(json.loads(data))
        except (json.JSONDecodeError, EnvironmentSchemaError) as e:
            logging.error(f"Failed to parse mach environment ({e}): {data}")
            raise MachError("Unable to parse mach environment.") from e

    def to_state(self) -> Dict[str, Any]:
        """Describe this mach for diagnostics."""
        return {
            "command": self.command,
            "override": self.settings.get_mach(self.srcdir) if self.settings is not None else None,
            "environment": self.get_environment_variables(),
        }
