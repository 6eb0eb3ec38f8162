"""Process execution.

This module runs external tools (mach, compilers) and captures their output.

Design:
    - A non-zero exit status is a normal result, not an exception
    - Failing to start the binary at all raises ProcessLaunchError
    - Interrupting a run kills the whole child process tree
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence, Union

import psutil

from .interrupt_utils import handle_keyboard_interrupt_properly

CommandArg = Union[str, Path]


class ProcessLaunchError(Exception):
    """Raised when a command cannot be started (missing binary, bad cwd)."""

    def __init__(self, command: Sequence[CommandArg], reason: str):
        self.command = [str(arg) for arg in command]
        self.reason = reason
        super().__init__(f"Failed to launch {' '.join(self.command)}: {reason}")


@dataclass
class ProcessResult:
    """Result of running an external command.

    Attributes:
        command: The command that was run
        exit_code: Process exit status
        stdout: Lines written to standard output
        output: Standard output lines followed by standard error lines
    """

    command: List[str]
    exit_code: int
    stdout: List[str] = field(default_factory=list)
    output: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    def describe(self) -> str:
        """Format the run for a console or log."""
        lines = [f"$ {' '.join(self.command)}", f"exit code: {self.exit_code}"]
        lines.extend(self.output)
        return "\n".join(lines)


Runner = Callable[..., ProcessResult]


def _kill_process_tree(pid: int) -> None:
    """Kill a process and every descendant it spawned."""
    try:
        root = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return

    processes = root.children(recursive=True)
    processes.append(root)
    for proc in processes:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            pass
    psutil.wait_procs(processes, timeout=5)


def run(
    command: Sequence[CommandArg],
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ProcessResult:
    """Run a command to completion and capture its output.

    Args:
        command: Program followed by its arguments
        cwd: Working directory (defaults to the current directory)
        env: Variables layered over the current environment

    Returns:
        ProcessResult, whatever the exit status

    Raises:
        ProcessLaunchError: If the process could not be started
    """
    args = [str(arg) for arg in command]
    full_env = None
    if env:
        full_env = dict(os.environ)
        full_env.update(env)

    logging.debug(f"Running {' '.join(args)} (cwd={cwd or os.getcwd()})")

    try:
        proc = subprocess.Popen(
            args,
            cwd=str(cwd) if cwd is not None else None,
            env=full_env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise ProcessLaunchError(args, str(e)) from e

    try:
        stdout, stderr = proc.communicate()
    except KeyboardInterrupt as ke:
        _kill_process_tree(proc.pid)
        handle_keyboard_interrupt_properly(ke)

    stdout_lines = stdout.splitlines()
    return ProcessResult(
        command=args,
        exit_code=proc.returncode,
        stdout=stdout_lines,
        output=stdout_lines + stderr.splitlines(),
    )
