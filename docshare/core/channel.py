"""
Request/notify exchange of artifacts over the shared service.

The channel is always in exactly one mode, selected by the current role:

- {obj}`HostMode`: answers artifact requests and pushes update notifications
- {obj}`GuestMode`: issues artifact requests and subscribes to notifications
- {obj}`InactiveMode`: no session or no service bound; every operation is a
no-op
"""

from __future__ import annotations

import logging
from abc import ABC
from logging import Logger
from pathlib import Path
from typing import Any, Protocol

from .payload import ArtifactPayload
from .role import Role, RoleMonitor
from .transport import CollaborationApi, SharedService, SharedServiceProxy

__all__ = [
    "SERVICE_NAME",
    "REQUEST_NAME",
    "NOTIFICATION_NAME",
    "ArtifactHandler",
    "ArtifactChannel",
    "ChannelMode",
    "InactiveMode",
    "HostMode",
    "GuestMode",
]

SERVICE_NAME = "docShare"
"""
Name of service shared by the host.
"""

REQUEST_NAME = "getArtifact"
"""
Request sent by guests to get an artifact from its source path.
"""

NOTIFICATION_NAME = "artifactUpdated"
"""
Notification sent by the host when an artifact changes.
"""


class ArtifactHandler(Protocol):
    """
    Produces and consumes artifacts on behalf of the channel.
    """

    async def serve_artifact(self, source_path: Path) -> ArtifactPayload:
        ...

    async def build_payload(self, artifact_path: Path) -> ArtifactPayload:
        ...

    async def persist(self, payload: ArtifactPayload) -> Path:
        ...


class ChannelMode(ABC):
    """
    Behavior of the channel for a particular role. Operations not applicable
    to the role are no-ops.
    """

    role: Role = Role.NONE

    _channel: ArtifactChannel

    def __init__(self, channel: ArtifactChannel):
        self._channel = channel

    @property
    def is_current(self) -> bool:
        """
        Whether this mode is still bound; results obtained by a mode which
        was since replaced are dropped.
        """
        return self._channel.mode is self

    def attach(self):
        """
        Register handlers with the transport, invoked once this mode is bound.
        """

    async def publish(self, artifact_path: Path) -> bool:
        return False

    async def request_artifact(self, source_path: str) -> Path | None:
        return None

    def _drop(self, what: str):
        self._channel._logger.debug(
            f"Dropping {what}: {self.role.name} binding is no longer active"
        )


class InactiveMode(ChannelMode):
    """
    No service or proxy bound.
    """


class HostMode(ChannelMode):
    """
    Serves artifacts to guests via a shared service.
    """

    role = Role.HOST

    _api: CollaborationApi
    _service: SharedService

    def __init__(
        self,
        channel: ArtifactChannel,
        api: CollaborationApi,
        service: SharedService,
    ):
        super().__init__(channel)
        self._api = api
        self._service = service

    def attach(self):
        self._service.on_request(self._channel.request_name, self._on_request)

    async def publish(self, artifact_path: Path) -> bool:
        if not self.is_current:
            self._drop(f"update of '{artifact_path}'")
            return False

        payload = await self._channel.handler.build_payload(artifact_path)

        # binding may have changed while reading
        if not self.is_current:
            self._drop(f"update of '{artifact_path}'")
            return False

        self._channel._logger.debug(
            f"Publishing '{payload.relative_path}' ({len(payload.content)} bytes)"
        )
        self._service.notify(
            self._channel.notification_name, payload.to_wire()
        )
        return True

    async def _on_request(self, args: list[Any]) -> dict[str, str]:
        uri = args[0]
        assert isinstance(uri, str), f"Unexpected request args: {args}"

        source_path = self._api.convert_shared_uri_to_local(uri)
        self._channel._logger.debug(
            f"Guest requested artifact for '{source_path}'"
        )

        payload = await self._channel.handler.serve_artifact(source_path)
        return payload.to_wire()


class GuestMode(ChannelMode):
    """
    Receives artifacts from the host via a proxy to its shared service.
    """

    role = Role.GUEST

    _proxy: SharedServiceProxy

    def __init__(self, channel: ArtifactChannel, proxy: SharedServiceProxy):
        super().__init__(channel)
        self._proxy = proxy

    def attach(self):
        self._proxy.on_notify(
            self._channel.notification_name, self._on_notify
        )

    async def request_artifact(self, source_path: str) -> Path | None:
        if not self.is_current:
            self._drop(f"request for '{source_path}'")
            return None

        result = await self._proxy.request(
            self._channel.request_name, [source_path]
        )

        if not self.is_current:
            self._drop(f"response for '{source_path}'")
            return None

        return await self._channel.handler.persist(
            ArtifactPayload.from_wire(result)
        )

    async def _on_notify(self, args: Any):
        if not self.is_current:
            self._drop("artifact notification")
            return

        await self._channel.handler.persist(ArtifactPayload.from_wire(args))


class ArtifactChannel:
    """
    Artifact exchange bound to the named service of the current session.
    Rebound by {obj}`ArtifactChannel.bind` upon every role change.
    """

    handler: ArtifactHandler
    service_name: str
    request_name: str
    notification_name: str

    _monitor: RoleMonitor
    _mode: ChannelMode
    _generation: int = 0
    _logger: Logger

    def __init__(
        self,
        monitor: RoleMonitor,
        handler: ArtifactHandler,
        *,
        service_name: str = SERVICE_NAME,
        request_name: str = REQUEST_NAME,
        notification_name: str = NOTIFICATION_NAME,
        logger: Logger | None = None,
    ):
        self._monitor = monitor
        self.handler = handler
        self.service_name = service_name
        self.request_name = request_name
        self.notification_name = notification_name
        self._logger = logger or logging.getLogger("docshare")
        self._mode = InactiveMode(self)

    @property
    def mode(self) -> ChannelMode:
        return self._mode

    @property
    def role(self) -> Role:
        """
        Role of the currently bound mode; {obj}`Role.NONE` if nothing is bound.
        """
        return self._mode.role

    async def bind(self, role: Role):
        """
        Bind to the service for the given role, replacing any previous binding.
        If the transport fails, the channel is left inactive.
        """
        self._generation += 1
        generation = self._generation

        # previous binding goes stale as soon as the role changes
        self._mode = InactiveMode(self)

        mode: ChannelMode
        try:
            mode = await self._create_mode(role)
        except Exception:
            self._logger.exception(
                f"Failed to bind service '{self.service_name}' as {role.name}"
            )
            mode = InactiveMode(self)

        # a later bind started while this one was waiting on the transport
        if generation != self._generation:
            self._logger.debug(f"Discarding superseded {role.name} binding")
            return

        self._mode = mode
        mode.attach()

    async def publish(self, artifact_path: Path) -> bool:
        """
        Send artifact to all guests, returning whether it was sent. No-op
        unless bound as host.
        """
        return await self._mode.publish(artifact_path)

    async def request_artifact(self, source_path: str) -> Path | None:
        """
        Request artifact from host and persist it, returning its local path.
        No-op unless bound as guest.
        """
        return await self._mode.request_artifact(source_path)

    async def _create_mode(self, role: Role) -> ChannelMode:
        api = self._monitor.api

        if api is None or role is Role.NONE:
            return InactiveMode(self)

        if role is Role.HOST:
            service = await api.share_service(self.service_name)
            if service is None:
                self._logger.warning(
                    f"Could not share service '{self.service_name}'"
                )
                return InactiveMode(self)
            return HostMode(self, api, service)

        proxy = await api.get_shared_service(self.service_name)
        if proxy is None:
            self._logger.warning(
                f"Shared service '{self.service_name}' not available from host"
            )
            return InactiveMode(self)
        return GuestMode(self, proxy)
