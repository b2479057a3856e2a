# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class TestDefinition(BaseModel):
    """A declarative check supplied by the caller for one grading request.

    Attributes:
        name: Identifier of the test, unique within the request.
        type: One of ``compilation``, ``code_quality`` or ``functional``.
            Kept as a plain string so unknown types can be reported.
        description: Human readable summary.
        command: Invocation the run arguments are extracted from,
            e.g. ``cargo run -- 32 F``.
        expected_output: Text the program output must match.
        expected_exit_code: Exit status the program must return.
        check: Code quality predicate, e.g. ``contains 'mut count'``.
        hidden: Whether the curriculum hides the test from the learner.
    """

    __test__ = False  # not a pytest class

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str
    description: str = ""
    command: str | None = None
    expected_output: str | None = Field(default=None, alias="expectedOutput")
    expected_exit_code: int = Field(default=0, alias="expectedExitCode")
    check: str | None = None
    hidden: bool = False

    @field_validator("description", "expected_exit_code", "hidden", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # JSON null means the field was left out.
        if value is None and info.field_name is not None:
            return cls.model_fields[info.field_name].default
        return value


class TestResult(BaseModel):
    """Verdict for a single test definition."""

    __test__ = False

    name: str
    passed: bool
    error: str | None = None
    output: str | None = None


class TestRunResult(BaseModel):
    """Aggregate verdict returned by the grading endpoint."""

    __test__ = False

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    results: list[TestResult] = Field(default_factory=list)
    compilation_error: str | None = Field(default=None, alias="compilationError")
    execution_error: str | None = Field(default=None, alias="executionError")
