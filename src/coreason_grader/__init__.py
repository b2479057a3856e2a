# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

"""
coreason-grader
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import GraderConfig
from .grading import GradingEngine
from .models import BuildResult, RunResult, TestDefinition, TestResult, TestRunResult
from .project import OrphanReaper, ProjectProvisioner
from .runtime import BuildRuntime
from .runtimes.cargo import CargoRuntime
from .service import GraderService

__all__ = [
    "BuildResult",
    "BuildRuntime",
    "CargoRuntime",
    "GraderConfig",
    "GraderService",
    "GradingEngine",
    "OrphanReaper",
    "ProjectProvisioner",
    "RunResult",
    "TestDefinition",
    "TestResult",
    "TestRunResult",
]
