# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

"""Outcomes of running the toolchain against an ephemeral project."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

# Conventional exit status of coreutils `timeout`.
TIMEOUT_EXIT_CODE = 124


@dataclass(frozen=True)
class Completed:
    """The process exited on its own and both streams were drained."""

    stdout: str
    stderr: str
    exit_code: int


@dataclass(frozen=True)
class TimedOut:
    """The process outlived its budget and was killed."""

    timeout_ms: int

    @property
    def message(self) -> str:
        return f"Timeout after {self.timeout_ms}ms"


ProcessOutcome = Completed | TimedOut


class BuildResult(BaseModel):
    """Result of compiling a project.

    Attributes:
        success: True iff the build exited with status 0.
        stderr: Compiler diagnostics (stdout when stderr was empty).
        exit_code: Exit status, or 124 when the build timed out.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    stderr: str
    exit_code: int | None = Field(default=None, alias="exitCode")


class RunResult(BaseModel):
    """Result of running a compiled project once.

    Attributes:
        success: True iff the program exited with status 0.
        stdout: Standard output of the program.
        stderr: Standard error of the program and toolchain.
        exit_code: Exit status, or 124 when the run timed out.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    stdout: str
    stderr: str
    exit_code: int | None = Field(default=None, alias="exitCode")


def collapse(outcome: ProcessOutcome) -> Completed:
    """Fold a timeout into the sentinel exit status with the message on stderr."""
    if isinstance(outcome, TimedOut):
        return Completed(stdout="", stderr=outcome.message, exit_code=TIMEOUT_EXIT_CODE)
    return outcome
