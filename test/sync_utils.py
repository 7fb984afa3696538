"""
Utilities for testing sync between a host and guest in one session.
"""

from pathlib import Path

from docshare import *

__all__ = [
    "PDF_MAGIC",
    "start_session",
    "write_artifact",
]

PDF_MAGIC = bytes([0x25, 0x50, 0x44, 0x46])


async def start_session(
    host: SyncCoordinator,
    host_peer: LoopbackPeer,
    guest: SyncCoordinator,
    guest_peer: LoopbackPeer,
):
    """
    Start both coordinators and put their peers in a session; the host must
    share its service before the guest joins.
    """
    await host.start()
    await guest.start()

    await host_peer.set_role(Role.HOST)
    await guest_peer.set_role(Role.GUEST)

    assert host.channel.role is Role.HOST
    assert guest.channel.role is Role.GUEST


def write_artifact(out_dir: Path, name: str, content: bytes) -> Path:
    path = out_dir / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path
