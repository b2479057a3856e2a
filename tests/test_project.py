import asyncio
import os
import time
from pathlib import Path
from unittest.mock import patch

import anyio
import pytest

from coreason_grader.project import CARGO_TOML, PROJECT_PREFIX, OrphanReaper, ProjectProvisioner


def _projects(root: Path) -> list[Path]:
    return [p for p in root.iterdir() if p.name.startswith(PROJECT_PREFIX)]


def _age(path: Path, seconds: float) -> None:
    past = time.time() - seconds
    os.utime(path, (past, past))


@pytest.mark.asyncio
async def test_create_lays_out_cargo_project(provisioner: ProjectProvisioner, tmp_path: Path) -> None:
    code = 'fn main() {\n    println!("Count: 1");\n}\n'
    project = await provisioner.create(code)

    assert project.is_absolute()
    assert project.parent == tmp_path
    assert project.name.startswith(PROJECT_PREFIX)
    assert (project / "Cargo.toml").read_text() == CARGO_TOML
    assert 'edition = "2021"' in CARGO_TOML
    assert (project / "src" / "main.rs").read_text() == code

    await provisioner.cleanup(project)
    assert not project.exists()


@pytest.mark.asyncio
async def test_create_writes_code_verbatim(provisioner: ProjectProvisioner) -> None:
    code = "$(rm -rf /) `whoami` ; && é漢\n\r\n"
    project = await provisioner.create(code)

    assert (project / "src" / "main.rs").read_bytes() == code.encode("utf-8")
    await provisioner.cleanup(project)


@pytest.mark.asyncio
async def test_create_cleanup_many_leaves_nothing(provisioner: ProjectProvisioner, tmp_path: Path) -> None:
    projects = [await provisioner.create(f"// {i}") for i in range(10)]

    assert len(set(projects)) == 10
    assert len(_projects(tmp_path)) == 10

    for project in projects:
        await provisioner.cleanup(project)

    assert _projects(tmp_path) == []


@pytest.mark.asyncio
async def test_concurrent_creates_are_distinct(provisioner: ProjectProvisioner, tmp_path: Path) -> None:
    projects = await asyncio.gather(*(provisioner.create("fn main() {}") for _ in range(8)))

    assert len(set(projects)) == 8
    await asyncio.gather(*(provisioner.cleanup(p) for p in projects))
    assert _projects(tmp_path) == []


@pytest.mark.asyncio
async def test_cleanup_is_idempotent(provisioner: ProjectProvisioner) -> None:
    project = await provisioner.create("fn main() {}")
    await provisioner.cleanup(project)
    await provisioner.cleanup(project)  # already gone, must not raise
    assert not project.exists()


@pytest.mark.asyncio
async def test_cleanup_swallows_errors(provisioner: ProjectProvisioner, tmp_path: Path) -> None:
    with patch("coreason_grader.project.shutil.rmtree", side_effect=PermissionError("denied")):
        await provisioner.cleanup(tmp_path / "frc-whatever")


@pytest.mark.asyncio
async def test_create_offloads_directory_creation(provisioner: ProjectProvisioner) -> None:
    with patch("coreason_grader.project.anyio.to_thread.run_sync", wraps=anyio.to_thread.run_sync) as run_sync:
        project = await provisioner.create("fn main() {}")

    offloaded = [c.args[0] for c in run_sync.call_args_list]
    assert any(getattr(fn, "__name__", "") == "mkdir" and fn.__self__ == project / "src" for fn in offloaded)
    await provisioner.cleanup(project)


@pytest.mark.asyncio
async def test_create_failure_removes_partial_project(provisioner: ProjectProvisioner, tmp_path: Path) -> None:
    with patch("coreason_grader.project.aiofiles.open", side_effect=OSError("disk full")):
        with pytest.raises(OSError, match="disk full"):
            await provisioner.create("fn main() {}")

    assert _projects(tmp_path) == []


@pytest.mark.asyncio
async def test_sweep_removes_only_stale_prefixed_dirs(tmp_path: Path) -> None:
    stale = tmp_path / "frc-stale"
    fresh = tmp_path / "frc-fresh"
    unrelated = tmp_path / "other-stale"
    stale_file = tmp_path / "frc-file"
    for d in (stale, fresh, unrelated):
        d.mkdir()
    (stale / "Cargo.toml").write_text(CARGO_TOML)
    stale_file.write_text("not a directory")
    for p in (stale, unrelated, stale_file):
        _age(p, 2 * 3600)

    removed = await OrphanReaper(temp_root=tmp_path, max_age=3600).sweep()

    assert removed == 1
    assert not stale.exists()
    assert fresh.exists()
    assert unrelated.exists()
    assert stale_file.exists()


@pytest.mark.asyncio
async def test_sweep_continues_after_entry_failure(tmp_path: Path) -> None:
    for name in ("frc-a", "frc-b"):
        (tmp_path / name).mkdir()
        _age(tmp_path / name, 7200)

    real_rmtree = __import__("shutil").rmtree
    calls: list[str] = []

    def flaky_rmtree(path: str) -> None:
        calls.append(path)
        if len(calls) == 1:
            raise PermissionError("busy")
        real_rmtree(path)

    with patch("coreason_grader.project.shutil.rmtree", side_effect=flaky_rmtree):
        removed = await OrphanReaper(temp_root=tmp_path, max_age=3600).sweep()

    assert len(calls) == 2
    assert removed == 1
    assert len(_projects(tmp_path)) == 1


@pytest.mark.asyncio
async def test_sweep_missing_root_is_harmless(tmp_path: Path) -> None:
    reaper = OrphanReaper(temp_root=tmp_path / "does-not-exist")
    assert await reaper.sweep() == 0


@pytest.mark.asyncio
async def test_sweep_crash_is_logged_not_raised(tmp_path: Path) -> None:
    reaper = OrphanReaper(temp_root=tmp_path)
    with patch.object(reaper, "_sweep_sync", side_effect=RuntimeError("boom")):
        assert await reaper.sweep() == 0


@pytest.mark.asyncio
async def test_sweep_runs_once_on_first_create(tmp_path: Path) -> None:
    reaper = OrphanReaper(temp_root=tmp_path)
    provisioner = ProjectProvisioner(temp_root=tmp_path, reaper=reaper)

    with patch.object(reaper, "sweep", wraps=reaper.sweep) as sweep:
        assert not sweep.called  # nothing at construction time
        first = await provisioner.create("fn main() {}")
        second = await provisioner.create("fn main() {}")
        await reaper.wait()
        await asyncio.gather(*(provisioner.create("fn main() {}") for _ in range(5)))

    assert sweep.call_count == 1
    await provisioner.cleanup(first)
    await provisioner.cleanup(second)


@pytest.mark.asyncio
async def test_first_create_reaps_orphans(tmp_path: Path) -> None:
    orphan = tmp_path / "frc-orphan"
    orphan.mkdir()
    _age(orphan, 7200)

    reaper = OrphanReaper(temp_root=tmp_path, max_age=3600)
    provisioner = ProjectProvisioner(temp_root=tmp_path, reaper=reaper)
    project = await provisioner.create("fn main() {}")
    await reaper.wait()

    assert not orphan.exists()
    assert project.exists()  # fresh project is never reaped
    await provisioner.cleanup(project)
