"""User override settings.

Users can replace the mach command, the compiler command per language and
the environment mach runs with. Settings live in an INI file, by default
``.mozcpp.ini`` at the top of the source tree.

Example .mozcpp.ini:
    [mozcpp]
    mach = /home/me/bin/mach-wrapper
    compiler.c = ccache clang
    compiler.cpp = ccache clang++

    [mozcpp:widget/cocoa]
    compiler.cpp = /opt/clang/bin/clang++

    [mach-environment]
    MOZCONFIG = /home/me/mozconfigs/debug

Usage:
    settings = Settings.load(Path("/src/mozilla-central"))
    command = settings.get_compiler(source_path, "cpp")
"""

import configparser
from pathlib import Path
from typing import Dict, List, Optional

from ..paths import is_within, normalize
from ..shell import ShellParseError, split_arguments

SETTINGS_FILENAME = ".mozcpp.ini"
BASE_SECTION = "mozcpp"
PATH_SECTION_PREFIX = "mozcpp:"
ENVIRONMENT_SECTION = "mach-environment"
COMMAND_KEYS = ("mach", "compiler.c", "compiler.cpp")


class SettingsError(Exception):
    """Exception raised for settings file errors."""

    pass


class Settings:
    """Override settings for one source tree.

    Values in a ``[mozcpp:<dir>]`` section apply to files below ``<dir>``
    (relative to the source tree) and take precedence over ``[mozcpp]``.
    The section for the longest matching directory wins.
    """

    def __init__(self, root: Path, config: Optional[configparser.ConfigParser] = None):
        """
        Initialize settings.

        Args:
            root: Top of the source tree; per-path sections are relative to it
            config: Parsed settings (empty settings if omitted)
        """
        self.root = Path(root)
        self.config = config if config is not None else self._new_parser()

    @staticmethod
    def _new_parser() -> configparser.ConfigParser:
        parser = configparser.ConfigParser(interpolation=None)
        # Environment variable names are case-sensitive.
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        return parser

    @classmethod
    def load(cls, root: Path, settings_path: Optional[Path] = None) -> "Settings":
        """
        Load settings for a source tree.

        Args:
            root: Top of the source tree
            settings_path: Settings file (defaults to <root>/.mozcpp.ini)

        Returns:
            Settings; empty when the file does not exist

        Raises:
            SettingsError: If the file exists but cannot be parsed, or a command
                override has unbalanced quoting
        """
        root = Path(root)
        path = Path(settings_path) if settings_path else root / SETTINGS_FILENAME
        parser = cls._new_parser()

        if path.is_file():
            try:
                parser.read(path, encoding="utf-8")
            except configparser.Error as e:
                raise SettingsError(f"Failed to parse {path}: {e}") from e

        settings = cls(root, parser)
        settings.validate()
        return settings

    def validate(self) -> None:
        """
        Check that every command override can be split into arguments.

        Raises:
            SettingsError: If a command value has unbalanced quoting
        """
        for section in self.config.sections():
            if section != BASE_SECTION and not section.startswith(PATH_SECTION_PREFIX):
                continue
            for key in COMMAND_KEYS:
                self._split_command(section, key)

    def _split_command(self, section: str, key: str) -> Optional[List[str]]:
        value = self.config.get(section, key, fallback="").strip()
        if not value:
            return None
        try:
            return split_arguments(value)
        except ShellParseError as e:
            raise SettingsError(f"Invalid {key} in [{section}]: {e}") from e

    def _sections_for(self, path: Optional[Path]) -> List[str]:
        """Sections that apply to path, most specific first."""
        scoped = []
        if path is not None:
            for section in self.config.sections():
                if not section.startswith(PATH_SECTION_PREFIX):
                    continue
                directory = self.root / section[len(PATH_SECTION_PREFIX):].strip()
                if is_within(path, directory):
                    scoped.append((len(normalize(directory)), section))
        scoped.sort(reverse=True)

        sections = [section for _, section in scoped]
        if self.config.has_section(BASE_SECTION):
            sections.append(BASE_SECTION)
        return sections

    def _get_command(self, key: str, path: Optional[Path]) -> Optional[List[str]]:
        for section in self._sections_for(path):
            command = self._split_command(section, key)
            if command:
                return command
        return None

    def get_mach(self, path: Optional[Path] = None) -> Optional[List[str]]:
        """
        Get the mach command override.

        Returns:
            Command as a list of arguments, or None to use <root>/mach
        """
        return self._get_command("mach", path)

    def get_compiler(self, path: Optional[Path], language: str) -> Optional[List[str]]:
        """
        Get the compiler command override for a language.

        Args:
            path: File or directory the compiler will be used for
            language: "c" or "cpp"

        Returns:
            Command as a list of arguments, or None to use the build's compiler
        """
        return self._get_command(f"compiler.{language}", path)

    def get_mach_environment(self) -> Dict[str, str]:
        """
        Get extra environment variables for running mach.

        Returns:
            Dictionary of variable name to value (empty if none configured)
        """
        if not self.config.has_section(ENVIRONMENT_SECTION):
            return {}
        return dict(self.config.items(ENVIRONMENT_SECTION))
