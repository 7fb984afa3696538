"""
This module implements the artifact sync protocol between a host and its
guests.
"""

from pyrollup import rollup

from . import (
    build,
    channel,
    coordinator,
    exceptions,
    loopback,
    paths,
    payload,
    role,
    transport,
)
from .build import *  # noqa
from .channel import *  # noqa
from .coordinator import *  # noqa
from .exceptions import *  # noqa
from .loopback import *  # noqa
from .paths import *  # noqa
from .payload import *  # noqa
from .role import *  # noqa
from .transport import *  # noqa

__all__ = rollup(
    coordinator,
    channel,
    role,
    paths,
    payload,
    build,
    transport,
    loopback,
    exceptions,
)

__canonical_children__ = [
    "coordinator",
    "channel",
    "role",
    "paths",
    "payload",
    "build",
    "transport",
    "loopback",
    "exceptions",
]
