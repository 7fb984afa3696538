"""
In-process collaboration transport connecting peers within one event loop.

Messages are passed through a JSON round trip so that peers only ever
exchange text, as they would over a real transport.
"""

from __future__ import annotations

import asyncio
import json
import logging
from logging import Logger
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import unquote, urlsplit

from .exceptions import RemoteRequestError
from .role import Role
from .transport import (
    CollaborationApi,
    NotifyHandler,
    RequestHandler,
    SessionChangeHandler,
    SharedService,
    SharedServiceProxy,
    Transport,
)

__all__ = [
    "LoopbackHub",
    "LoopbackPeer",
]


def _over_wire(data: Any) -> Any:
    return json.loads(json.dumps(data))


class LoopbackHub:
    """
    A single collaboration session shared by any number of peers.
    """

    services: dict[str, _LoopbackService]
    """
    Mapping of service names to services currently shared by the host.
    """

    _pending: set[asyncio.Task]
    _logger: Logger

    def __init__(self, *, logger: Logger | None = None):
        self.services = dict()
        self._pending = set()
        self._logger = logger or logging.getLogger("docshare")

    def join(
        self,
        workspace_root: Path,
        *,
        role: Role = Role.NONE,
        available: bool = True,
    ) -> LoopbackPeer:
        """
        Create a peer of this session.

        :param workspace_root: Root of the peer's workspace, to which shared URIs are relative
        :param role: Initial role of the peer
        :param available: Whether the peer has collaboration available
        """
        return LoopbackPeer(
            self, workspace_root, role=role, available=available
        )

    async def drain(self):
        """
        Wait for all notifications sent so far to be handled.
        """
        while self._pending:
            await asyncio.gather(*self._pending)

    def _deliver(self, handler: NotifyHandler, args: Any):
        task = asyncio.create_task(self._dispatch(handler, args))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _dispatch(self, handler: NotifyHandler, args: Any):
        # no one to report the failure to; notifications are fire-and-forget
        try:
            await handler(_over_wire(args))
        except Exception:
            self._logger.exception("Notification handler failed")


class LoopbackPeer(Transport, CollaborationApi):
    """
    A peer's view of a {obj}`LoopbackHub` session.
    """

    available: bool
    """
    Whether the collaboration API is reported as available.
    """

    _hub: LoopbackHub
    _workspace_root: Path
    _role: Role
    _handlers: list[SessionChangeHandler]
    _proxies: list[_LoopbackProxy]

    def __init__(
        self,
        hub: LoopbackHub,
        workspace_root: Path,
        *,
        role: Role = Role.NONE,
        available: bool = True,
    ):
        self._hub = hub
        self._workspace_root = workspace_root
        self._role = role
        self.available = available
        self._handlers = []
        self._proxies = []

    async def get_api(self) -> CollaborationApi | None:
        return self if self.available else None

    @property
    def role(self) -> Role:
        return self._role

    async def set_role(self, role: Role):
        """
        Change this peer's role and notify session change handlers. When a
        host stops hosting, the session ends for guests of its services.
        """
        stranded_guests: list[LoopbackPeer] = []

        if self._role is Role.HOST and role is not Role.HOST:
            # stop sharing services owned by this peer
            for name, service in list(self._hub.services.items()):
                if service.owner is self:
                    del self._hub.services[name]
                    for proxy in list(service.proxies):
                        if proxy.peer not in stranded_guests:
                            stranded_guests.append(proxy.peer)
                        proxy.detach()

        if self._role is Role.GUEST and role is not Role.GUEST:
            for proxy in self._proxies:
                proxy.detach()
            self._proxies.clear()

        self._role = role

        for handler in self._handlers:
            await handler(role)

        for guest in stranded_guests:
            if guest.role is Role.GUEST:
                await guest.set_role(Role.NONE)

    def on_session_changed(self, handler: SessionChangeHandler):
        self._handlers.append(handler)

    async def share_service(self, name: str) -> SharedService | None:
        if self._role is not Role.HOST:
            return None

        service = _LoopbackService(self._hub, self)
        self._hub.services[name] = service
        return service

    async def get_shared_service(self, name: str) -> SharedServiceProxy | None:
        if self._role is not Role.GUEST:
            return None

        service = self._hub.services.get(name)
        if service is None:
            return None

        proxy = _LoopbackProxy(service, self)
        service.proxies.append(proxy)
        self._proxies.append(proxy)
        return proxy

    def convert_shared_uri_to_local(self, uri: str) -> Path:
        path = PurePosixPath(unquote(urlsplit(uri).path))
        parts = path.parts[1:] if path.is_absolute() else path.parts
        return self._workspace_root.joinpath(*parts)


class _LoopbackService(SharedService):
    owner: LoopbackPeer
    proxies: list[_LoopbackProxy]

    _hub: LoopbackHub
    _request_handlers: dict[str, RequestHandler]

    def __init__(self, hub: LoopbackHub, owner: LoopbackPeer):
        self._hub = hub
        self.owner = owner
        self.proxies = []
        self._request_handlers = dict()

    def on_request(self, name: str, handler: RequestHandler):
        self._request_handlers[name] = handler

    def notify(self, name: str, args: dict[str, Any]):
        for proxy in self.proxies:
            handler = proxy.notify_handlers.get(name)
            if handler is not None:
                self._hub._deliver(handler, args)

    async def handle_request(self, name: str, args: list[Any]) -> Any:
        handler = self._request_handlers.get(name)
        if handler is None:
            raise RemoteRequestError(name, "no handler registered")

        try:
            result = await handler(_over_wire(args))
        except Exception as e:
            raise RemoteRequestError(name, str(e)) from e

        return _over_wire(result)


class _LoopbackProxy(SharedServiceProxy):
    peer: LoopbackPeer
    notify_handlers: dict[str, NotifyHandler]

    _service: _LoopbackService | None

    def __init__(self, service: _LoopbackService, peer: LoopbackPeer):
        self._service = service
        self.peer = peer
        self.notify_handlers = dict()

    def on_notify(self, name: str, handler: NotifyHandler):
        self.notify_handlers[name] = handler

    async def request(self, name: str, args: list[Any]) -> Any:
        if self._service is None:
            raise RemoteRequestError(name, "disconnected from host")
        return await self._service.handle_request(name, args)

    def detach(self):
        if self._service is not None:
            self._service.proxies.remove(self)
            self._service = None
