"""
Translation of artifact paths between the host's output directory and a
guest's staging directory.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .build import BuildPipeline
from .role import Role, RoleMonitor

__all__ = [
    "DEFAULT_STAGING_DIR",
    "PathTranslator",
]

DEFAULT_STAGING_DIR = Path(tempfile.gettempdir()) / "DocShare"
"""
Directory in which guests materialize synced artifacts by default.
"""


class PathTranslator:
    """
    Maps artifact paths between their canonical form, relative to the host's
    output directory, and the full path local to this peer.
    """

    _build: BuildPipeline
    _monitor: RoleMonitor
    _staging_dir: Path

    def __init__(
        self,
        build: BuildPipeline,
        monitor: RoleMonitor,
        *,
        staging_dir: Path | None = None,
    ):
        self._build = build
        self._monitor = monitor
        self._staging_dir = staging_dir or DEFAULT_STAGING_DIR

    @property
    def staging_dir(self) -> Path:
        return self._staging_dir

    def out_dir_for(self, role: Role, host_full_path: Path | str) -> Path:
        """
        Get the directory artifacts are relative to for the given role.
        """
        if role is Role.GUEST:
            return self._staging_dir
        return self._build.output_directory(host_full_path)

    def to_relative(self, full_path: Path) -> str:
        """
        Get canonical path of the given artifact; only meaningful on the host.
        """
        out_dir = self.out_dir_for(self._monitor.role, full_path)
        return os.path.relpath(full_path, out_dir)

    def to_local(self, relative_path: str) -> Path:
        """
        Get the full local path of an artifact from its canonical path; only
        meaningful on a guest.
        """
        out_dir = self.out_dir_for(self._monitor.role, relative_path)
        return out_dir / relative_path
