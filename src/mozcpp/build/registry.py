"""
Build registry.

Creating a Build runs mach and probes two compilers, which takes seconds.
The registry creates at most one Build per source tree and shares it
between callers; concurrent requests for the same tree wait for the one
construction in flight instead of starting their own.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

from ..config.settings import Settings
from ..paths import normalize
from ..process import Runner, run
from .orchestrator import Build, BuildStage


class BuildRegistry:
    """Thread-safe cache of Builds keyed by source tree."""

    def __init__(self, runner: Runner = run, show_progress: bool = True):
        """
        Initialize the registry.

        Args:
            runner: Process execution function handed to every Build
            show_progress: Whether test compiles print their output
        """
        self.runner = runner
        self.show_progress = show_progress
        self._locks_lock = threading.Lock()  # Master lock for the dictionaries
        self._root_locks: Dict[str, threading.Lock] = {}
        self._builds: Dict[str, Tuple[BuildStage, Optional[Build]]] = {}

    def _get_root_lock(self, key: str) -> threading.Lock:
        with self._locks_lock:
            if key not in self._root_locks:
                self._root_locks[key] = threading.Lock()
            return self._root_locks[key]

    def get(self, root: Path, settings: Optional[Settings] = None) -> Optional[Build]:
        """
        Get the Build for a source tree, creating it on first use.

        A tree that is not a usable build is remembered as such too.

        Args:
            root: Top of the source tree
            settings: User overrides used if the Build has to be created

        Returns:
            Build, or None if the tree is not a usable mach build
        """
        key = normalize(os.path.abspath(root))
        with self._get_root_lock(key):
            cached = self._builds.get(key)
            if cached is None:
                logging.info(f"Creating build for {root}")
                cached = Build.probe(Path(root), settings, self.runner, self.show_progress)
                self._builds[key] = cached
                logging.info(f"Build for {root}: {cached[0].value}")
            return cached[1]

    def get_stage(self, root: Path) -> BuildStage:
        """How far construction got for root (UNATTEMPTED if never requested)."""
        key = normalize(os.path.abspath(root))
        with self._locks_lock:
            cached = self._builds.get(key)
        return cached[0] if cached is not None else BuildStage.UNATTEMPTED

    def forget(self, root: Path) -> None:
        """Drop the cached Build for root so the next get() recreates it."""
        key = normalize(os.path.abspath(root))
        with self._get_root_lock(key):
            self._builds.pop(key, None)
