from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from coreason_grader.models import BuildResult, RunResult
from coreason_grader.project import OrphanReaper, ProjectProvisioner

COMPILER_ERROR = "error: expected `;`, found `}`\n --> src/main.rs:2:14"


@pytest.fixture
def provisioner(tmp_path: Path) -> ProjectProvisioner:
    """A provisioner rooted in a private temp dir, so nothing leaks into /tmp."""
    return ProjectProvisioner(temp_root=tmp_path, reaper=OrphanReaper(temp_root=tmp_path))


@pytest.fixture
def mock_runtime() -> Any:
    runtime = MagicMock()
    runtime.build = AsyncMock(return_value=BuildResult(success=True, stderr="", exit_code=0))
    runtime.run_with_args = AsyncMock(
        return_value=RunResult(success=True, stdout="Count: 1\n", stderr="", exit_code=0)
    )
    return runtime


@pytest.fixture
def failing_build_runtime(mock_runtime: Any) -> Any:
    mock_runtime.build.return_value = BuildResult(success=False, stderr=COMPILER_ERROR, exit_code=101)
    return mock_runtime

