from __future__ import annotations

from pathlib import Path

__all__ = [
    "ArtifactReadError",
    "DirectoryCreateError",
    "RemoteRequestError",
]


class ArtifactReadError(Exception):
    """
    Raised when an artifact could not be read in order to build a payload,
    e.g. because it has not been built yet.
    """

    path: Path

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Failed to read artifact '{path}'")


class DirectoryCreateError(Exception):
    """
    Raised when the directory to contain a persisted artifact could not be
    created for a reason other than it already existing.
    """

    path: Path

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Failed to create directory '{path}'")


class RemoteRequestError(Exception):
    """
    Raised on the requesting peer when the remote handler of a request failed.
    """

    request_name: str

    def __init__(self, request_name: str, reason: str):
        self.request_name = request_name
        super().__init__(f"Request '{request_name}' failed: {reason}")
