"""
Abstract interface to the collaboration session transport.

The transport handles membership, session lifecycle and message delivery;
this package only consumes it as an opaque request/notify channel. See
{obj}`LoopbackHub` for an in-process implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable

if TYPE_CHECKING:
    from .role import Role

__all__ = [
    "Transport",
    "CollaborationApi",
    "SharedService",
    "SharedServiceProxy",
    "RequestHandler",
    "NotifyHandler",
    "SessionChangeHandler",
]

type RequestHandler = Callable[[list[Any]], Awaitable[Any]]
"""
Handler invoked with the request arguments, returning the response.
"""

type NotifyHandler = Callable[[Any], Awaitable[None]]
"""
Handler invoked with the notification arguments.
"""

type SessionChangeHandler = Callable[[Role], Awaitable[None]]
"""
Handler invoked with this peer's role in the changed session.
"""


class Transport(ABC):
    """
    Entry point to the collaboration feature.
    """

    @abstractmethod
    async def get_api(self) -> CollaborationApi | None:
        """
        Get the collaboration API, or `None` if the feature is unavailable.
        """
        ...


class CollaborationApi(ABC):
    """
    Session API of a single peer.
    """

    @property
    @abstractmethod
    def role(self) -> Role:
        """
        Role of this peer in the current session.
        """
        ...

    @abstractmethod
    def on_session_changed(self, handler: SessionChangeHandler):
        """
        Register handler to invoke whenever the session changes.
        """
        ...

    @abstractmethod
    async def share_service(self, name: str) -> SharedService | None:
        """
        Share a named service as host, or `None` if it can't be shared.
        """
        ...

    @abstractmethod
    async def get_shared_service(self, name: str) -> SharedServiceProxy | None:
        """
        Get a proxy to the host's named service, or `None` if not available.
        """
        ...

    @abstractmethod
    def convert_shared_uri_to_local(self, uri: str) -> Path:
        """
        Convert a peer-neutral shared URI to a path local to this peer.
        """
        ...


class SharedService(ABC):
    """
    Host side of a shared service.
    """

    @abstractmethod
    def on_request(self, name: str, handler: RequestHandler):
        ...

    @abstractmethod
    def notify(self, name: str, args: dict[str, Any]):
        """
        Send a fire-and-forget notification to all connected guests.
        """
        ...


class SharedServiceProxy(ABC):
    """
    Guest side of a shared service.
    """

    @abstractmethod
    def on_notify(self, name: str, handler: NotifyHandler):
        ...

    @abstractmethod
    async def request(self, name: str, args: list[Any]) -> Any:
        """
        Send request to host and await its response.
        """
        ...
