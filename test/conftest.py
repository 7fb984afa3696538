import logging
from pathlib import Path

from pytest import fixture

from docshare import *
from docshare.tools.config import SyncConfig

logging.basicConfig(level=logging.WARNING)


@fixture(autouse=True)
def newline(request):
    """
    Print a newline and underline test name.
    """
    print("\n" + "-" * len(request.node.nodeid))


@fixture
def hub() -> LoopbackHub:
    return LoopbackHub()


@fixture
def host_dir(tmp_path: Path) -> Path:
    """
    Workspace of the host, containing sources.
    """
    path = tmp_path / "host"
    path.mkdir()
    return path


@fixture
def out_dir(host_dir: Path) -> Path:
    """
    Output directory of the host's build.
    """
    path = host_dir / "out"
    path.mkdir()
    return path


@fixture
def staging_dir(tmp_path: Path) -> Path:
    """
    Guest staging directory; not created so its creation is exercised.
    """
    return tmp_path / "guest" / "staging"


@fixture
def config(staging_dir: Path) -> SyncConfig:
    return SyncConfig(staging_dir=staging_dir)


@fixture
def host_peer(hub: LoopbackHub, host_dir: Path) -> LoopbackPeer:
    return hub.join(host_dir)


@fixture
def guest_peer(hub: LoopbackHub, tmp_path: Path) -> LoopbackPeer:
    return hub.join(tmp_path / "guest-workspace")


@fixture
def host_build(out_dir: Path) -> SuffixBuildPipeline:
    return SuffixBuildPipeline(out_dir)


@fixture
def host(
    host_peer: LoopbackPeer, host_build: SuffixBuildPipeline, config: SyncConfig
) -> SyncCoordinator:
    return SyncCoordinator(host_peer, host_build, config=config)


@fixture
def guest(guest_peer: LoopbackPeer, config: SyncConfig) -> SyncCoordinator:
    return SyncCoordinator(guest_peer, SuffixBuildPipeline(), config=config)
