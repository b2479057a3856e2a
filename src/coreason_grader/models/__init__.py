# src/coreason_grader/models/__init__.py

"""
Data models for the execution and grading service.
"""

from .api import RunRequest, RunResponse, TestRequest
from .execution import (
    TIMEOUT_EXIT_CODE,
    BuildResult,
    Completed,
    ProcessOutcome,
    RunResult,
    TimedOut,
    collapse,
)
from .grading import TestDefinition, TestResult, TestRunResult

__all__ = [
    "TIMEOUT_EXIT_CODE",
    "BuildResult",
    "Completed",
    "ProcessOutcome",
    "RunRequest",
    "RunResponse",
    "RunResult",
    "TestDefinition",
    "TestRequest",
    "TestResult",
    "TestRunResult",
    "TimedOut",
    "collapse",
]
