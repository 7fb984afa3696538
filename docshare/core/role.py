"""
Determination of this peer's role in the collaboration session.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from logging import Logger
from typing import Awaitable, Callable

from .transport import CollaborationApi, Transport

__all__ = [
    "Role",
    "RoleMonitor",
]


class Role(Enum):
    """
    Role of a peer in the collaboration session.
    """

    NONE = auto()
    """Not in a session, or collaboration unavailable"""

    HOST = auto()
    """Owns the source file and build pipeline"""

    GUEST = auto()
    """Only consumes the artifact"""


class RoleMonitor:
    """
    Observes the session and tracks the current role, invoking a callback
    whenever it changes.
    """

    on_role_changed: Callable[[Role], Awaitable[None]] | None
    """
    Invoked with the new role when the effective role changes.
    """

    _transport: Transport
    _api: CollaborationApi | None = None
    _role: Role = Role.NONE
    _started: bool = False
    _logger: Logger

    def __init__(
        self,
        transport: Transport,
        *,
        on_role_changed: Callable[[Role], Awaitable[None]] | None = None,
        logger: Logger | None = None,
    ):
        self._transport = transport
        self.on_role_changed = on_role_changed
        self._logger = logger or logging.getLogger("docshare")

    @property
    def role(self) -> Role:
        return self._role

    @property
    def api(self) -> CollaborationApi | None:
        """
        Collaboration API, or `None` if not connected or unavailable.
        """
        return self._api

    @property
    def is_host(self) -> bool:
        return self._role is Role.HOST

    @property
    def is_guest(self) -> bool:
        return self._role is Role.GUEST

    async def start(self):
        """
        Connect to the transport and begin monitoring session changes. If
        collaboration is unavailable, the role permanently remains
        {obj}`Role.NONE`.
        """
        if self._started:
            return
        self._started = True

        api = await self._transport.get_api()
        if api is None:
            self._logger.info(
                "Collaboration API unavailable, artifact sync disabled"
            )
            return

        self._api = api

        # subscribe first so changes during the initial binding are not missed
        api.on_session_changed(self._update_role)
        await self._update_role(api.role)

    async def _update_role(self, role: Role):
        if role is self._role:
            return

        self._logger.info(
            f"Session role changed: {self._role.name} -> {role.name}"
        )
        self._role = role

        if self.on_role_changed is not None:
            await self.on_role_changed(role)
