# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

"""Request and response bodies of the HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from coreason_grader.models.grading import TestDefinition


def _list_or_empty(value: Any) -> Any:
    # Anything that is not a JSON array is ignored rather than rejected.
    return value if isinstance(value, list) else []


class RunRequest(BaseModel):
    code: str = ""
    args: list[str] = Field(default_factory=list)

    @field_validator("code", mode="before")
    @classmethod
    def _code_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("args", mode="before")
    @classmethod
    def _args_list(cls, value: Any) -> Any:
        return _list_or_empty(value)


class TestRequest(BaseModel):
    __test__ = False

    code: str = ""
    tests: list[TestDefinition] = Field(default_factory=list)

    @field_validator("code", mode="before")
    @classmethod
    def _code_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tests", mode="before")
    @classmethod
    def _tests_list(cls, value: Any) -> Any:
        return _list_or_empty(value)


class RunResponse(BaseModel):
    """Response of ``POST /api/run``.

    Only the fields relevant to how the request concluded are set; the rest
    are dropped when serialising.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    stdout: str | None = None
    stderr: str | None = None
    exit_code: int | None = Field(default=None, alias="exitCode")
    compilation_error: str | None = Field(default=None, alias="compilationError")
    execution_error: str | None = Field(default=None, alias="executionError")
