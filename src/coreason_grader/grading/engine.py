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

from coreason_grader.grading.checks import parse_check
from coreason_grader.grading.matching import args_from_command, output_matches
from coreason_grader.models import BuildResult, TestDefinition, TestResult, TestRunResult
from coreason_grader.project import ProjectProvisioner
from coreason_grader.runtime import BuildRuntime
from coreason_grader.utils.logger import logger

CODE_QUALITY_FAILED = "Code quality check failed"


class GradingEngine:
    """Turns one submission and its test definitions into per-test verdicts.

    The submission is built exactly once. Functional tests then run against
    that build sequentially, in the order they were supplied.
    """

    def __init__(self, provisioner: ProjectProvisioner, runtime: BuildRuntime):
        """Initializes the GradingEngine.

        Args:
            provisioner: Creates and removes the ephemeral project.
            runtime: Toolchain used to build and run the project.
        """
        self.provisioner = provisioner
        self.runtime = runtime

    async def grade(self, source_code: str, tests: Sequence[TestDefinition]) -> TestRunResult:
        """Grade a submission.

        A failed build does not stop grading: compilation and code quality
        tests are still evaluated, functional tests fail with the compiler
        output. An exception while provisioning or building fails every test
        with the same message.

        Args:
            source_code: The submitted program.
            tests: Test definitions, evaluated in order.

        Returns:
            TestRunResult: One result per definition plus the aggregate.
        """
        project: Path | None = None
        try:
            try:
                project = await self.provisioner.create(source_code)
                build = await self.runtime.build(project)
            except Exception as e:
                logger.exception("Provisioning or build crashed")
                return self.infrastructure_failure(tests, str(e) or "Build failed")

            compilation_error = None if build.success else build.stderr
            results = []
            for test in tests:
                results.append(await self._evaluate(test, source_code, project, build))

            passed = sum(r.passed for r in results)
            logger.info(f"Graded submission: {passed}/{len(results)} test(s) passed")
            return TestRunResult(
                success=all(r.passed for r in results),
                results=results,
                compilation_error=compilation_error,
            )
        finally:
            if project is not None:
                await self.provisioner.cleanup(project)

    async def _evaluate(
        self, test: TestDefinition, source_code: str, project: Path, build: BuildResult
    ) -> TestResult:
        if test.type == "compilation":
            return TestResult(
                name=test.name,
                passed=build.success,
                error=None if build.success else build.stderr,
            )

        if test.type == "code_quality":
            passed = parse_check(test.check).evaluate(source_code)
            return TestResult(
                name=test.name,
                passed=passed,
                error=None if passed else CODE_QUALITY_FAILED,
            )

        if test.type == "functional":
            if not build.success:
                return TestResult(
                    name=test.name,
                    passed=False,
                    error=build.stderr or "Code did not compile",
                )
            return await self._run_functional(test, project)

        return TestResult(name=test.name, passed=False, error=f"Unknown test type: {test.type}")

    async def _run_functional(self, test: TestDefinition, project: Path) -> TestResult:
        args = args_from_command(test.command)
        try:
            run = await self.runtime.run_with_args(project, args)
        except Exception as e:
            logger.error(f"Run for test {test.name!r} failed: {e}")
            return TestResult(name=test.name, passed=False, error=str(e) or "Run failed")

        exit_ok = run.exit_code == test.expected_exit_code
        output_ok = output_matches(run.stdout, test.expected_output)
        passed = exit_ok and output_ok

        error = None
        if not passed:
            problems = []
            if not exit_ok:
                got = "?" if run.exit_code is None else run.exit_code
                problems.append(f"Expected exit code {test.expected_exit_code}, got {got}")
            if not output_ok:
                problems.append("Output did not match expected")
            error = ". ".join(problems) or run.stderr.strip() or None

        return TestResult(
            name=test.name,
            passed=passed,
            output=run.stdout.strip() or None,
            error=error,
        )

    @staticmethod
    def infrastructure_failure(tests: Sequence[TestDefinition], message: str) -> TestRunResult:
        return TestRunResult(
            success=False,
            results=[TestResult(name=t.name, passed=False, error=message) for t in tests],
            execution_error=message,
        )
