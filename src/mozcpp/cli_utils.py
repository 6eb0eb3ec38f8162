"""CLI utility functions for mozcpp.

This module provides common utilities used across CLI commands including:
- Source tree detection (looking for mach)
- Logging setup
- Error formatting
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import NoReturn, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure the root logger for the CLI.

    Args:
        verbose: Log debug messages to the console instead of warnings only
        log_file: Also log (at debug level) to this rotating file
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_file),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)


class SourceTreeDetector:
    """Finds the top of a mach source tree."""

    @staticmethod
    def detect_root(start: Path, root: Optional[Path] = None) -> Path:
        """Detect or validate the source tree root.

        Args:
            start: Directory (or file) to search upwards from
            root: Optional explicit root

        Returns:
            Root directory to use

        Raises:
            FileNotFoundError: If no directory containing mach is found
        """
        if root is not None:
            return root

        start = start.absolute()
        candidates = [start] if start.is_dir() else []
        candidates.extend(start.parents)
        for candidate in candidates:
            if (candidate / "mach").is_file():
                return candidate

        raise FileNotFoundError(f"No mach found in {start} or any parent directory")


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message to stderr.

        Args:
            title: Error title (e.g., "File not found")
            message: Error message details
        """
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}", file=sys.stderr)
        if message:
            print(message, file=sys.stderr)

    @staticmethod
    def print_warning(message: str) -> None:
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}", file=sys.stderr)

    @staticmethod
    def handle_file_not_found(error: FileNotFoundError) -> NoReturn:
        ErrorFormatter.print_error("Error: File not found", str(error))
        print("Run mozcpp inside a source tree containing mach, or pass --root.", file=sys.stderr)
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> NoReturn:
        ErrorFormatter.print_warning("Interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> NoReturn:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)

        sys.exit(1)
