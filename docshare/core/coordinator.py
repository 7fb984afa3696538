"""
Orchestration of artifact sync between host and guests.
"""

from __future__ import annotations

import asyncio
import logging
from logging import Logger
from pathlib import Path
from typing import TYPE_CHECKING

from .build import BuildPipeline
from .channel import ArtifactChannel
from .exceptions import ArtifactReadError, DirectoryCreateError
from .paths import PathTranslator
from .payload import ArtifactPayload
from .role import Role, RoleMonitor
from .transport import Transport

if TYPE_CHECKING:
    from ..tools.config import SyncConfig

__all__ = ["SyncCoordinator"]


class SyncCoordinator:
    """
    Keeps a guest's copy of the artifact in sync with the host's build.

    On the host, artifacts are built on demand for guest requests and pushed
    to guests when the build pipeline reports a change. On a guest, artifacts
    received either way are written to the staging directory.

    Example:

    ```
    coordinator = SyncCoordinator(transport, SuffixBuildPipeline())
    await coordinator.start()

    # as guest
    pdf_path = await coordinator.request_artifact("/paper.tex")
    ```
    """

    _build: BuildPipeline
    _monitor: RoleMonitor
    _paths: PathTranslator
    _channel: ArtifactChannel
    _logger: Logger

    def __init__(
        self,
        transport: Transport,
        build: BuildPipeline,
        *,
        config: SyncConfig | None = None,
        logger: Logger | None = None,
    ):
        """
        :param transport: Collaboration session transport
        :param build: Pipeline which builds artifacts from source files
        :param config: Names and directories to use, or `None` for defaults
        :param logger: Logger to use, or `None` to use default logger
        """
        from ..tools.config import SyncConfig

        config = config or SyncConfig()

        self._build = build
        self._logger = logger or logging.getLogger("docshare")

        self._monitor = RoleMonitor(transport, logger=self._logger)
        self._paths = PathTranslator(
            build, self._monitor, staging_dir=config.staging_dir
        )
        self._channel = ArtifactChannel(
            self._monitor,
            self,
            service_name=config.service_name,
            request_name=config.request_name,
            notification_name=config.notification_name,
            logger=self._logger,
        )
        self._monitor.on_role_changed = self._channel.bind

    @property
    def role(self) -> Role:
        return self._monitor.role

    @property
    def is_host(self) -> bool:
        return self._monitor.is_host

    @property
    def is_guest(self) -> bool:
        return self._monitor.is_guest

    @property
    def channel(self) -> ArtifactChannel:
        return self._channel

    @property
    def paths(self) -> PathTranslator:
        return self._paths

    async def start(self):
        """
        Begin monitoring the session and the build pipeline.
        """
        self._build.on_artifact_changed(self.artifact_changed)
        await self._monitor.start()

    async def artifact_changed(self, artifact_path: Path):
        """
        Push changed artifact to guests. Failures are logged and dropped; the
        next change will push again.
        """
        try:
            await self._channel.publish(artifact_path)
        except ArtifactReadError as e:
            self._logger.warning(f"Dropping artifact update: {e}")
        except Exception:
            # send failed in the transport
            self._logger.exception(
                f"Dropping artifact update: failed to publish '{artifact_path}'"
            )

    async def request_artifact(self, source_path: str) -> Path | None:
        """
        Fetch artifact built from the host's source file and persist it,
        returning its local path. Returns `None` without fetching if not a
        guest in a session.

        :param source_path: Shared URI of the source file
        """
        return await self._channel.request_artifact(source_path)

    async def serve_artifact(self, source_path: Path) -> ArtifactPayload:
        """
        Get payload of artifact built from the given source, watching it for
        subsequent changes.
        """
        artifact_path = self._build.resolve_artifact_path(source_path)
        self._build.watch_artifact(artifact_path)
        return await self.build_payload(artifact_path)

    async def build_payload(self, artifact_path: Path) -> ArtifactPayload:
        try:
            content = await asyncio.to_thread(artifact_path.read_bytes)
        except OSError as e:
            raise ArtifactReadError(artifact_path) from e

        return ArtifactPayload(
            relative_path=self._paths.to_relative(artifact_path),
            content=content,
        )

    async def persist(self, payload: ArtifactPayload) -> Path:
        """
        Write artifact to its local path, overwriting any previous content.
        """
        path = self._paths.to_local(payload.relative_path)

        try:
            await asyncio.to_thread(
                path.parent.mkdir, parents=True, exist_ok=True
            )
        except OSError as e:
            raise DirectoryCreateError(path.parent) from e

        await asyncio.to_thread(path.write_bytes, payload.content)

        self._logger.debug(f"Wrote '{path}' ({len(payload.content)} bytes)")
        return path
