# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from coreason_grader.models import BuildResult, RunResult


class BuildRuntime(ABC):
    """
    Abstract build-and-run toolchain operating on a provisioned project.
    Follows the Strategy Pattern.
    """

    @abstractmethod
    async def build(self, project: Path) -> BuildResult:
        """Compile the project.

        A single attempt is authoritative. Compiler errors and timeouts are
        reported in the result, not raised.

        Args:
            project: Path of the provisioned project.

        Returns:
            BuildResult: Success flag, diagnostics and exit status.

        Raises:
            OSError: If the toolchain cannot be started.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def run_with_args(self, project: Path, args: Sequence[str]) -> RunResult:
        """Run the built program once with the given arguments.

        Safe to call repeatedly against the same built project.

        Args:
            project: Path of the provisioned project.
            args: Arguments passed to the program.

        Returns:
            RunResult: Captured output and exit status.

        Raises:
            OSError: If the toolchain cannot be started.
        """
        pass  # pragma: no cover
