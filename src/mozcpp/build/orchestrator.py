"""
Build orchestration for mozcpp.

This module ties the pieces together for one source tree:
- Finding mach and asking it for the environment
- Parsing config/autoconf.mk for the compilers
- Discovering the C and C++ compilers' defaults
- Resolving per-file configuration from each directory's backend.mk
- Test compiling a file with its resolved configuration
"""

import logging
import os
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..config.fragment_parser import FragmentReadError, parse_fragment
from ..config.settings import Settings, SettingsError
from ..paths import PathSet, from_unixy, normalize, rebase
from ..process import Runner, run
from ..shell import split_arguments
from .compile_config import CompileConfig, FileType
from .compiler import Compiler, CompilerError
from .compiler_factory import create_compiler
from .mach import Mach, MachEnvironment, MachError

MACH_FILENAME = "mach"
BASE_FRAGMENT = Path("config") / "autoconf.mk"
BACKEND_FRAGMENT = "backend.mk"

FLAGS_VARIABLES = {
    FileType.C: "COMPUTED_CFLAGS",
    FileType.CPP: "COMPUTED_CXXFLAGS",
}

C_EXTENSIONS = {".c"}
CPP_EXTENSIONS = {".cpp", ".cc", ".cxx", ".c++", ".mm", ".h", ".hh", ".hpp", ".hxx"}

# Object directory locations holding exported and generated headers.
OBJDIR_INCLUDE_DIRS = [
    Path("dist") / "include",
    Path("dist") / "include" / "nss",
    Path("dist") / "include" / "nspr",
    Path("ipc") / "ipdl" / "_ipdlheaders",
]


class BuildStage(Enum):
    """How far Build construction got for a source tree."""

    UNATTEMPTED = "unattempted"
    NO_MACH = "no_mach"
    ENVIRONMENT_FAILED = "environment_failed"
    COMPILERS_FAILED = "compilers_failed"
    READY = "ready"


def get_file_type(source: Path) -> Optional[FileType]:
    """
    Determine which compiler configuration applies to a file.

    A header next to a C file of the same name is treated as C, so it gets
    the flags of its implementation.

    Args:
        source: Source or header file

    Returns:
        FileType, or None for files no compiler handles
    """
    extension = source.suffix
    if extension == ".h" and source.with_suffix(".c").is_file():
        return FileType.C
    if extension in C_EXTENSIONS:
        return FileType.C
    if extension in CPP_EXTENSIONS:
        return FileType.CPP
    return None


class Build(ABC):
    """A source tree built with mach."""

    def __init__(self, mach: Mach, srcdir: Path):
        self.mach = mach
        self.srcdir = Path(srcdir)

    @classmethod
    def probe(
        cls,
        root: Path,
        settings: Optional[Settings] = None,
        runner: Runner = run,
        show_progress: bool = True,
    ) -> Tuple[BuildStage, Optional["Build"]]:
        """
        Try to set up a Build for a source tree.

        Args:
            root: Directory the user opened
            settings: User overrides (loaded from the tree if omitted)
            runner: Process execution function
            show_progress: Whether test compiles print their output

        Returns:
            Tuple of the stage reached and the Build (None unless READY)
        """
        srcdir = Path(os.path.abspath(root))

        mach_path = srcdir / MACH_FILENAME
        if not mach_path.is_file():
            logging.debug(f"No mach found in {srcdir}")
            return BuildStage.NO_MACH, None

        if settings is None:
            try:
                settings = Settings.load(srcdir)
            except SettingsError as e:
                logging.error(f"Unable to use {srcdir}: {e}")
                return BuildStage.ENVIRONMENT_FAILED, None

        mach = Mach(srcdir, [str(mach_path)], settings, runner)

        try:
            environment = mach.get_environment()
        except (MachError, SettingsError) as e:
            logging.error(f"Unable to use {srcdir}: {e}")
            return BuildStage.ENVIRONMENT_FAILED, None

        if normalize(from_unixy(environment.topsrcdir).resolve()) != normalize(srcdir.resolve()):
            logging.error(
                f"Mach environment contained unexpected topsrcdir {environment.topsrcdir} (expected {srcdir})."
            )
            return BuildStage.ENVIRONMENT_FAILED, None

        build = RecursiveMakeBuild.build(mach, srcdir, environment, settings, runner, show_progress)
        if build is None:
            return BuildStage.COMPILERS_FAILED, None
        return BuildStage.READY, build

    @classmethod
    def create(
        cls,
        root: Path,
        settings: Optional[Settings] = None,
        runner: Runner = run,
        show_progress: bool = True,
    ) -> Optional["Build"]:
        """
        Create a Build for a source tree.

        Returns:
            The Build, or None if the tree is not a usable mach build
        """
        return cls.probe(root, settings, runner, show_progress)[1]

    def to_state(self) -> Dict[str, Any]:
        """Describe this build for diagnostics."""
        return {"mach": self.mach.to_state()}

    @abstractmethod
    def get_object_dir(self) -> Path:
        pass

    @abstractmethod
    def get_include_paths(self) -> PathSet:
        """All include directories of the build, for whole-project indexing."""
        pass

    @abstractmethod
    def resolve_source_configuration(self, source: Path) -> Optional[CompileConfig]:
        pass

    @abstractmethod
    def test_compile(self, source: Path) -> None:
        pass


class RecursiveMakeBuild(Build):
    """
    Build using the recursive make backend.

    Each source directory has a generated backend.mk at the same place in
    the object directory, holding the flags for files in that directory.

    Example usage:
        build = Build.create(Path("/src/mozilla-central"))
        if build is not None:
            config = build.resolve_source_configuration(Path("dom/base/Element.cpp"))
    """

    def __init__(
        self,
        mach: Mach,
        srcdir: Path,
        environment: MachEnvironment,
        c_compiler: Compiler,
        cpp_compiler: Compiler,
        show_progress: bool = True,
    ):
        super().__init__(mach, srcdir)
        self.environment = environment
        self.c_compiler = c_compiler
        self.cpp_compiler = cpp_compiler
        self.show_progress = show_progress

    @classmethod
    def build(
        cls,
        mach: Mach,
        srcdir: Path,
        environment: MachEnvironment,
        settings: Optional[Settings] = None,
        runner: Runner = run,
        show_progress: bool = True,
    ) -> Optional["RecursiveMakeBuild"]:
        """
        Read the build configuration and discover both compilers.

        Returns:
            RecursiveMakeBuild, or None if the compilers cannot be used
        """
        base_fragment = from_unixy(environment.topobjdir) / BASE_FRAGMENT
        try:
            config = parse_fragment(base_fragment)
        except FragmentReadError as e:
            logging.error(f"Unable to read build configuration: {e}")
            return None

        c_path = config.get("_CC")
        if not c_path:
            logging.error("No C compiler found.")
            return None

        cpp_path = config.get("_CXX")
        if not cpp_path:
            logging.error("No C++ compiler found.")
            return None

        try:
            c_compiler = create_compiler(
                srcdir, [str(from_unixy(c_path))], FileType.C, config, settings, runner
            )
            cpp_compiler = create_compiler(
                srcdir, [str(from_unixy(cpp_path))], FileType.CPP, config, settings, runner
            )
        except (CompilerError, SettingsError) as e:
            logging.error(f"Failed to find compilers: {e}")
            return None

        return cls(mach, srcdir, environment, c_compiler, cpp_compiler, show_progress)

    def get_object_dir(self) -> Path:
        return from_unixy(self.environment.topobjdir)

    def get_compiler(self, file_type: FileType) -> Compiler:
        return self.c_compiler if file_type is FileType.C else self.cpp_compiler

    def get_include_paths(self) -> PathSet:
        result = PathSet([self.srcdir])

        objdir = self.get_object_dir()
        for directory in OBJDIR_INCLUDE_DIRS:
            result.add(objdir / directory)

        result.update(self.c_compiler.get_include_paths())
        result.update(self.cpp_compiler.get_include_paths())
        return result

    def get_backend_fragment(self, source: Path) -> Optional[Path]:
        """Locate the backend.mk that holds the flags for source."""
        try:
            directory = rebase(source.parent, self.srcdir, self.get_object_dir())
        except ValueError:
            logging.debug(f"{source} is outside of {self.srcdir}")
            return None
        return directory / BACKEND_FRAGMENT

    def _get_directory_arguments(self, source: Path) -> Optional[Tuple[FileType, List[str], Path]]:
        """
        Find the compiler arguments the build uses for source.

        Returns:
            (file type, arguments, object directory) or None if there are none

        Raises:
            ShellParseError: If the flags variable has broken quoting
        """
        file_type = get_file_type(source)
        if file_type is None:
            logging.debug(f"No compiler handles {source}")
            return None

        backend = self.get_backend_fragment(source)
        if backend is None:
            return None

        try:
            dir_config = parse_fragment(backend)
        except FragmentReadError as e:
            logging.debug(f"No configuration for {source}: {e}")
            return None

        args = dir_config.get(FLAGS_VARIABLES[file_type])
        if not args:
            return None

        return file_type, split_arguments(args), backend.parent

    def resolve_source_configuration(self, source: Path) -> Optional[CompileConfig]:
        """
        Resolve the compiler configuration for a source file.

        Args:
            source: Source or header file inside the source tree

        Returns:
            CompileConfig, or None when the build has no flags for the file

        Raises:
            ShellParseError: If the directory's flags have broken quoting
        """
        source = Path(os.path.abspath(source))
        found = self._get_directory_arguments(source)
        if found is None:
            return None

        file_type, args, objdir = found
        return self.get_compiler(file_type).resolve_configuration(args, objdir)

    def test_compile(self, source: Path) -> None:
        """
        Compile a source file with its resolved configuration and report the result.

        Failures are logged, never raised.

        Args:
            source: Source file to compile
        """
        source = Path(os.path.abspath(source))
        try:
            found = self._get_directory_arguments(source)
            if found is None:
                logging.info(f"No compiler flags found for {source}")
                return

            file_type, args, objdir = found
            compiler = self.get_compiler(file_type)
            config = compiler.resolve_configuration(args, objdir)
            result = compiler.compile(config, source)
        except KeyboardInterrupt:
            raise
        except Exception as e:
            logging.error(f"Test compile of {source} failed: {e}")
            return

        if result.success:
            output = f"Compiling {source} succeeded:"
            logging.info(f"Compiling {source} succeeded")
        else:
            output = f"Compiling {source} failed with exit code {result.exit_code}:"
            logging.warning(f"Compiling {source} failed with exit code {result.exit_code}")
        output += "\n" + "\n".join(result.output)

        logging.debug(result.describe())
        if self.show_progress:
            print(output)

    def to_state(self) -> Dict[str, Any]:
        state = super().to_state()
        state.update({
            "srcdir": str(self.srcdir),
            "objdir": str(self.get_object_dir()),
            "cCompiler": self.c_compiler.to_state(),
            "cppCompiler": self.cpp_compiler.to_state(),
        })
        return state
