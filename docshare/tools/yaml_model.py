"""
Pydantic models persisted as .yaml files.
"""

from pathlib import Path
from typing import Self

import yaml
from pydantic import BaseModel

__all__ = [
    "BaseYamlModel",
]


class BaseYamlModel(BaseModel):
    """
    Base pydantic model which can be loaded from and dumped to a .yaml file.
    """

    @classmethod
    def load_yaml(cls, file: Path) -> Self:
        if not file.is_file():
            raise FileNotFoundError(f"file does not exist: '{file}'")

        with file.open() as fh:
            model = yaml.safe_load(fh) or {}

        if not isinstance(model, dict):
            raise ValueError(f"Invalid yaml contents: {model}")

        return cls(**model)

    def dump_yaml(self, file: Path):
        model = self.model_dump(mode="json", exclude_defaults=True)
        file.write_text(
            yaml.safe_dump(model, default_flow_style=False, sort_keys=False)
        )
