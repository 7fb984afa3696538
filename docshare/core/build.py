"""
Interface to the pipeline which builds artifacts from source files.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from logging import Logger
from pathlib import Path
from typing import Awaitable, Callable

__all__ = [
    "BuildPipeline",
    "SuffixBuildPipeline",
    "ArtifactChangedHandler",
]

type ArtifactChangedHandler = Callable[[Path], Awaitable[None]]


class BuildPipeline(ABC):
    """
    Builds artifacts from source files and signals when they change. The
    build itself is treated as a black box.
    """

    @abstractmethod
    def resolve_artifact_path(self, source_path: Path) -> Path:
        """
        Get the path of the artifact built from the given source.
        """
        ...

    @abstractmethod
    def watch_artifact(self, artifact_path: Path):
        """
        Watch artifact for future changes; watching an artifact more than once
        has no additional effect.
        """
        ...

    @abstractmethod
    def output_directory(self, path: Path | str) -> Path:
        """
        Get the configured output directory for the given path.
        """
        ...

    @abstractmethod
    def on_artifact_changed(self, handler: ArtifactChangedHandler):
        """
        Register handler to invoke when a watched artifact changes.
        """
        ...


class SuffixBuildPipeline(BuildPipeline):
    """
    Pipeline whose artifacts are named after their source with a different
    suffix, e.g. `paper.tex` -> `out/paper.pdf`.
    """

    artifact_suffix: str
    """
    Suffix of artifacts, including the leading `.`.
    """

    watched: set[Path]
    """
    Artifacts currently being watched.
    """

    _output_dir: Path | None
    _handlers: list[ArtifactChangedHandler]
    _logger: Logger

    def __init__(
        self,
        output_dir: Path | None = None,
        *,
        artifact_suffix: str = ".pdf",
        logger: Logger | None = None,
    ):
        """
        :param output_dir: Directory containing artifacts, or `None` to place them alongside their source
        :param artifact_suffix: Suffix of built artifacts
        :param logger: Logger to use, or `None` to use default logger
        """
        self._output_dir = output_dir
        self.artifact_suffix = artifact_suffix
        self.watched = set()
        self._handlers = []
        self._logger = logger or logging.getLogger("docshare")

    def resolve_artifact_path(self, source_path: Path) -> Path:
        return (
            self.output_directory(source_path)
            / f"{source_path.stem}{self.artifact_suffix}"
        )

    def watch_artifact(self, artifact_path: Path):
        if artifact_path not in self.watched:
            self._logger.debug(f"Watching artifact '{artifact_path}'")
            self.watched.add(artifact_path)

    def output_directory(self, path: Path | str) -> Path:
        if self._output_dir is not None:
            return self._output_dir
        return Path(path).parent

    def on_artifact_changed(self, handler: ArtifactChangedHandler):
        self._handlers.append(handler)

    async def artifact_changed(self, artifact_path: Path):
        """
        Signal that an artifact was rebuilt; ignored if it's not watched.
        """
        if artifact_path not in self.watched:
            return

        for handler in self._handlers:
            await handler(artifact_path)
