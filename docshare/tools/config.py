"""
Interface to configuration as persisted in .yaml file and environment.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Self

import dotenv
from pydantic import field_serializer, field_validator

from ..core.channel import NOTIFICATION_NAME, REQUEST_NAME, SERVICE_NAME
from ..core.paths import DEFAULT_STAGING_DIR
from .yaml_model import BaseYamlModel

__all__ = [
    "CONFIG_FILE_ENV",
    "STAGING_DIR_ENV",
    "SyncConfig",
]

CONFIG_FILE_ENV = "DOCSHARE_CONFIG_FILE"
"""
Environment variable with path to .yaml config file.
"""

STAGING_DIR_ENV = "DOCSHARE_STAGING_DIR"
"""
Environment variable overriding the guest staging directory.
"""


class SyncConfig(BaseYamlModel):
    """
    Encapsulates configuration of artifact sync. All peers in a session must
    use the same names.
    """

    service_name: str = SERVICE_NAME
    """
    Name of service shared by the host.
    """

    request_name: str = REQUEST_NAME
    """
    Name of request for an artifact.
    """

    notification_name: str = NOTIFICATION_NAME
    """
    Name of notification of an updated artifact.
    """

    staging_dir: Path = DEFAULT_STAGING_DIR
    """
    Guest directory in which to write synced artifacts; created as needed.
    """

    @field_validator("service_name", "request_name", "notification_name")
    def validate_name(cls, value: str) -> str:
        if not value:
            raise ValueError("name must not be empty")
        return value

    @field_serializer("staging_dir")
    def serialize_staging_dir(self, value: Path) -> str:
        return str(value)

    @classmethod
    def from_env(cls, dotenv_path: Path | None = None) -> Self:
        """
        Get config from the file given by `DOCSHARE_CONFIG_FILE`, if any,
        with `DOCSHARE_STAGING_DIR` taking precedence. Variables are also
        loaded from a .env file.
        """
        dotenv.load_dotenv(dotenv_path)

        config_file = os.environ.get(CONFIG_FILE_ENV)
        config = cls.load_yaml(Path(config_file)) if config_file else cls()

        overrides: dict[str, Any] = {}
        if staging_dir := os.environ.get(STAGING_DIR_ENV):
            overrides["staging_dir"] = Path(staging_dir)

        return config.model_copy(update=overrides) if overrides else config
