"""
Shared fixtures for the mozcpp test suite.

Provides a fake process runner standing in for mach and clang, and a fake
source tree with an object directory laid out like a real mach build.
"""

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from mozcpp.process import ProcessLaunchError, ProcessResult

CLANG_C_OUTPUT = [
    "clang -cc1 version 17.0.6 based upon LLVM 17.0.6 default target x86_64-pc-linux-gnu",
    "#include \"...\" search starts here:",
    "#include <...> search starts here:",
    " /usr/lib/clang/17/include",
    " /usr/local/include",
    " /usr/include",
    "End of search list.",
    "#define __llvm__ 1",
    "#define __clang__ 1",
    "#define __STDC__ 1",
    "#define __STDC_VERSION__ 199901L",
    "#define __GNUC__ 4",
]

CLANG_CPP_OUTPUT = [
    "#include \"...\" search starts here:",
    "#include <...> search starts here:",
    " /usr/include/c++/13",
    " /usr/lib/clang/17/include",
    " /usr/include",
    "End of search list.",
    "#define __llvm__ 1",
    "#define __clang__ 1",
    "#define __cplusplus 201402L",
]


class FakeRunner:
    """Callable standing in for mozcpp.process.run.

    Responses are chosen by looking at the command: mach environment,
    compiler probes (``-dD``/``-dM``) and everything else (real compiles).
    """

    def __init__(self, environment: Optional[Dict] = None):
        self.environment = environment
        self.mach_stdout: Optional[List[str]] = None
        self.mach_exit_code = 0
        self.c_output = list(CLANG_C_OUTPUT)
        self.cpp_output = list(CLANG_CPP_OUTPUT)
        self.compile_result: Optional[ProcessResult] = None
        self.launch_error: Optional[Callable[[List[str]], bool]] = None
        self.calls: List[Dict] = []

    def __call__(self, command, cwd=None, env=None) -> ProcessResult:
        command = [str(arg) for arg in command]
        self.calls.append({"command": command, "cwd": cwd, "env": env})

        if self.launch_error is not None and self.launch_error(command):
            raise ProcessLaunchError(command, "No such file or directory")

        if command[-3:] == ["environment", "--format", "json"]:
            stdout = self.mach_stdout
            if stdout is None:
                stdout = [json.dumps(self.environment)]
            return ProcessResult(command, self.mach_exit_code, stdout, stdout)

        if "-dD" in command or "-dM" in command:
            is_c = "-xc" in command or "-TC" in command
            output = self.c_output if is_c else self.cpp_output
            # Macros go to stdout, search paths to stderr.
            stdout = [line for line in output if line.startswith("#define")]
            return ProcessResult(command, 0, stdout, list(output))

        if self.compile_result is not None:
            return self.compile_result
        return ProcessResult(command, 0, [], [])

    def commands_containing(self, arg: str) -> List[List[str]]:
        return [call["command"] for call in self.calls if arg in call["command"]]


def make_environment(srcdir: Path, objdir: Path) -> Dict:
    return {
        "mozconfig": {
            "configure_args": ["--enable-debug"],
            "make_extra": [],
            "make_flags": ["-j8"],
            "path": str(srcdir / "mozconfig"),
        },
        "topobjdir": str(objdir),
        "topsrcdir": str(srcdir),
    }


class SourceTree:
    """A fake mach source tree with its object directory."""

    def __init__(self, root: Path):
        self.srcdir = root / "src"
        self.objdir = root / "obj"
        self.srcdir.mkdir(parents=True)
        (self.objdir / "config").mkdir(parents=True)
        (self.srcdir / "mach").write_text("#!/usr/bin/env python3\n")
        self.write_autoconf(
            "_CC = /usr/bin/clang\n"
            "_CXX = /usr/bin/clang++\n"
            "CC_TYPE = clang\n"
        )

    def write_autoconf(self, content: str) -> None:
        (self.objdir / "config" / "autoconf.mk").write_text(content)

    def add_source(self, relative: str, content: str = "") -> Path:
        path = self.srcdir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def write_backend(self, relative_dir: str, content: str) -> Path:
        directory = self.objdir / relative_dir
        directory.mkdir(parents=True, exist_ok=True)
        backend = directory / "backend.mk"
        backend.write_text(content)
        return backend


@pytest.fixture
def source_tree(tmp_path):
    """Create a fake source tree with object directory."""
    return SourceTree(tmp_path)


@pytest.fixture
def fake_runner(source_tree):
    """Create a fake runner answering for the fake source tree."""
    return FakeRunner(make_environment(source_tree.srcdir, source_tree.objdir))
