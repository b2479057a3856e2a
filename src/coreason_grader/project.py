# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

import asyncio
import os
import shutil
import tempfile
import threading
import time
from pathlib import Path

import aiofiles  # type: ignore[import-untyped]
import anyio

from coreason_grader.utils.logger import logger

# Every ephemeral project directory starts with this tag; the reaper
# only ever touches entries that carry it.
PROJECT_PREFIX = "frc-"

CARGO_TOML = """[package]
name = "user"
version = "0.1.0"
edition = "2021"
"""


class OrphanReaper:
    """Removes project directories left behind by crashed or killed processes.

    The sweep runs at most once per reaper, lazily, the first time a project
    is created. Failures are logged and never reach API callers.
    """

    def __init__(
        self,
        temp_root: Path | None = None,
        max_age: float = 3600.0,
        prefix: str = PROJECT_PREFIX,
    ):
        """Initializes the OrphanReaper.

        Args:
            temp_root: Directory to sweep. Defaults to the system temp root.
            max_age: Entries older than this many seconds are deleted.
            prefix: Name prefix identifying ephemeral projects.
        """
        self.temp_root = temp_root or Path(tempfile.gettempdir())
        self.max_age = max_age
        self.prefix = prefix
        self._once_lock = threading.Lock()
        self._started = False
        self._sweep_task: asyncio.Task[int] | None = None

    def _claim(self) -> bool:
        with self._once_lock:
            if self._started:
                return False
            self._started = True
            return True

    def start_if_needed(self) -> None:
        """Schedule the one-off background sweep unless it already ran."""
        if self._claim():
            self._sweep_task = asyncio.create_task(self.sweep())

    async def wait(self) -> None:
        """Wait for a scheduled sweep to finish."""
        if self._sweep_task is not None:
            await self._sweep_task

    async def sweep(self) -> int:
        """Delete stale project directories.

        Returns:
            int: The number of directories removed.
        """
        try:
            removed = await anyio.to_thread.run_sync(self._sweep_sync)
        except Exception as e:
            logger.error(f"Orphan sweep crashed: {e}")
            return 0
        if removed:
            logger.info(f"Orphan sweep removed {removed} stale project(s) from {self.temp_root}")
        return removed

    def _sweep_sync(self) -> int:
        try:
            entries = list(os.scandir(self.temp_root))
        except OSError as e:
            logger.warning(f"Cannot list {self.temp_root} for orphan sweep: {e}")
            return 0

        now = time.time()
        removed = 0
        for entry in entries:
            if not entry.name.startswith(self.prefix):
                continue
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
                if now - entry.stat(follow_symlinks=False).st_mtime <= self.max_age:
                    continue
                shutil.rmtree(entry.path)
                removed += 1
            except OSError as e:
                logger.warning(f"Skipping orphan {entry.path}: {e}")
        return removed


class ProjectProvisioner:
    """Creates and destroys the throwaway Cargo project of a single request."""

    def __init__(self, temp_root: Path | None = None, reaper: OrphanReaper | None = None):
        self.temp_root = temp_root or Path(tempfile.gettempdir())
        self.reaper = reaper if reaper is not None else OrphanReaper(temp_root=self.temp_root)

    async def create(self, source_code: str) -> Path:
        """Lay out a fresh project holding the submitted code.

        The code is written verbatim to ``src/main.rs``; it is a file, never a
        command.

        Args:
            source_code: The learner's Rust source.

        Returns:
            Path: Absolute path of the new project directory.

        Raises:
            OSError: If the directory or its files cannot be written.
        """
        self.reaper.start_if_needed()

        project = Path(
            await anyio.to_thread.run_sync(
                lambda: tempfile.mkdtemp(prefix=PROJECT_PREFIX, dir=self.temp_root)
            )
        )
        try:
            async with aiofiles.open(project / "Cargo.toml", "w", encoding="utf-8") as f:
                await f.write(CARGO_TOML)
            await anyio.to_thread.run_sync((project / "src").mkdir)
            async with aiofiles.open(project / "src" / "main.rs", "w", encoding="utf-8", newline="") as f:
                await f.write(source_code)
        except BaseException:
            await self.cleanup(project)
            raise

        logger.debug(f"Provisioned project {project}")
        return project

    async def cleanup(self, project: Path) -> None:
        """Recursively delete a project. Never raises."""
        try:
            await anyio.to_thread.run_sync(shutil.rmtree, project)
        except FileNotFoundError:
            pass
        except Exception as e:
            logger.warning(f"Failed to cleanup project {project}: {e}")
