# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

from collections.abc import Sequence
from pathlib import Path

from coreason_grader.models import BuildResult, RunResult, collapse
from coreason_grader.runtime import BuildRuntime
from coreason_grader.runtimes.process import run_process
from coreason_grader.utils.logger import logger


class CargoRuntime(BuildRuntime):
    """
    Builds and runs projects with the local Cargo toolchain.
    """

    def __init__(
        self,
        cargo: str = "cargo",
        build_timeout_ms: int = 15_000,
        run_timeout_ms: int = 10_000,
    ):
        self.cargo = cargo
        self.build_timeout_ms = build_timeout_ms
        self.run_timeout_ms = run_timeout_ms

    async def build(self, project: Path) -> BuildResult:
        """
        Compile the project with ``cargo build``.
        """
        logger.info(f"Building {project.name}")
        outcome = collapse(
            await run_process([self.cargo, "build", "--quiet"], project, self.build_timeout_ms)
        )
        if outcome.exit_code != 0:
            logger.info(f"Build of {project.name} failed with exit code {outcome.exit_code}")
        return BuildResult(
            success=outcome.exit_code == 0,
            # rustc reports on stderr, but some failures only reach stdout
            stderr=outcome.stderr or outcome.stdout,
            exit_code=outcome.exit_code,
        )

    async def run_with_args(self, project: Path, args: Sequence[str]) -> RunResult:
        """
        Run the program with ``cargo run -- <args>``.
        """
        logger.info(f"Running {project.name} with {len(args)} argument(s)")
        command = [self.cargo, "run", "--quiet", "--", *args]
        outcome = collapse(await run_process(command, project, self.run_timeout_ms))
        return RunResult(
            success=outcome.exit_code == 0,
            stdout=outcome.stdout,
            stderr=outcome.stderr,
            exit_code=outcome.exit_code,
        )
