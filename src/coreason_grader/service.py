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

from coreason_grader.config import GraderConfig
from coreason_grader.grading import GradingEngine
from coreason_grader.models import RunResponse, TestDefinition, TestRunResult
from coreason_grader.project import OrphanReaper, ProjectProvisioner
from coreason_grader.runtime import BuildRuntime
from coreason_grader.runtimes.cargo import CargoRuntime
from coreason_grader.utils.logger import logger

NO_CODE = "No code provided"


class GraderService:
    """Execution and grading service (The Core).

    Stateless between calls: every call owns one ephemeral project that is
    removed before the call returns.
    """

    def __init__(
        self,
        config: GraderConfig | None = None,
        runtime: BuildRuntime | None = None,
        provisioner: ProjectProvisioner | None = None,
    ):
        """Initializes the GraderService.

        Args:
            config: Configuration for the service.
            runtime: Optional toolchain override. Defaults to Cargo.
            provisioner: Optional project provisioner override.
        """
        self.config = config or GraderConfig()
        self.runtime = runtime or CargoRuntime(
            cargo=self.config.cargo_binary,
            build_timeout_ms=self.config.build_timeout_ms,
            run_timeout_ms=self.config.run_timeout_ms,
        )
        self.provisioner = provisioner or ProjectProvisioner(
            reaper=OrphanReaper(max_age=self.config.orphan_max_age)
        )
        self.engine = GradingEngine(self.provisioner, self.runtime)

    async def run(self, source_code: str, args: Sequence[str] = ()) -> RunResponse:
        """Build the submission and run it once with ``args``.

        Args:
            source_code: The submitted program.
            args: Arguments passed to the program.

        Returns:
            RunResponse: Program output, the compiler error, or the
            infrastructure error, depending on how far execution got.
        """
        if not source_code.strip():
            return RunResponse(success=False, compilation_error=NO_CODE)

        project: Path | None = None
        try:
            project = await self.provisioner.create(source_code)
            build = await self.runtime.build(project)
            if not build.success:
                return RunResponse(
                    success=False,
                    compilation_error=build.stderr,
                    exit_code=1 if build.exit_code is None else build.exit_code,
                )
            run = await self.runtime.run_with_args(project, list(args))
            return RunResponse(
                success=run.exit_code == 0,
                stdout=run.stdout,
                stderr=run.stderr,
                exit_code=1 if run.exit_code is None else run.exit_code,
            )
        except Exception as e:
            logger.exception("Execution failed")
            return RunResponse(success=False, execution_error=str(e) or "Execution failed")
        finally:
            if project is not None:
                await self.provisioner.cleanup(project)

    async def grade(self, source_code: str, tests: Sequence[TestDefinition]) -> TestRunResult:
        """Grade the submission against ``tests``.

        Args:
            source_code: The submitted program.
            tests: Test definitions, evaluated in order.

        Returns:
            TestRunResult: Per-test verdicts and the aggregate.
        """
        if not source_code.strip():
            return TestRunResult(success=False, results=[], compilation_error=NO_CODE)

        try:
            return await self.engine.grade(source_code, tests)
        except Exception as e:
            logger.exception("Grading failed")
            return GradingEngine.infrastructure_failure(tests, str(e) or "Grading failed")
