from pathlib import Path

from pytest import fixture, mark

from docshare import *


@fixture
def monitor(hub: LoopbackHub, host_dir: Path) -> RoleMonitor:
    return RoleMonitor(hub.join(host_dir))


@fixture
def paths(
    host_build: SuffixBuildPipeline, monitor: RoleMonitor, staging_dir: Path
) -> PathTranslator:
    return PathTranslator(host_build, monitor, staging_dir=staging_dir)


def test_out_dir(paths: PathTranslator, out_dir: Path, staging_dir: Path):
    assert paths.out_dir_for(Role.HOST, out_dir / "main.pdf") == out_dir
    assert paths.out_dir_for(Role.NONE, out_dir / "main.pdf") == out_dir
    assert paths.out_dir_for(Role.GUEST, out_dir / "main.pdf") == staging_dir
    assert paths.staging_dir == staging_dir


def test_default_staging_dir(
    host_build: SuffixBuildPipeline, monitor: RoleMonitor
):
    paths = PathTranslator(host_build, monitor)
    assert paths.staging_dir == DEFAULT_STAGING_DIR


@mark.asyncio
async def test_round_trip(
    paths: PathTranslator, monitor: RoleMonitor, out_dir: Path
):
    """
    Translate host paths to relative paths and back.
    """
    await monitor.start()
    await monitor._update_role(Role.HOST)

    for full_path in [
        out_dir / "main.pdf",
        out_dir / "sub" / "dir" / "main.pdf",
        out_dir / "with space.pdf",
    ]:
        relative_path = paths.to_relative(full_path)
        assert not Path(relative_path).is_absolute()
        assert paths.to_local(relative_path) == full_path


@mark.asyncio
async def test_guest_local(
    paths: PathTranslator, monitor: RoleMonitor, staging_dir: Path
):
    """
    Translate relative paths as guest; staging directory is not created.
    """
    await monitor.start()
    await monitor._update_role(Role.GUEST)

    assert paths.to_local("main.pdf") == staging_dir / "main.pdf"
    assert paths.to_local("a/b.pdf") == staging_dir / "a" / "b.pdf"
    assert not staging_dir.exists()


def test_outside_out_dir(paths: PathTranslator, out_dir: Path):
    """
    Paths outside the output directory get a standard relative path.
    """
    relative_path = paths.to_relative(out_dir.parent / "main.pdf")
    assert Path(relative_path) == Path("..") / "main.pdf"


def test_default_out_dir(monitor: RoleMonitor, host_dir: Path):
    """
    Without an output directory, artifacts are built alongside the source.
    """
    build = SuffixBuildPipeline(artifact_suffix=".html")
    paths = PathTranslator(build, monitor)

    source = host_dir / "doc" / "index.md"
    artifact = build.resolve_artifact_path(source)

    assert artifact == host_dir / "doc" / "index.html"
    assert paths.to_relative(artifact) == "index.html"
