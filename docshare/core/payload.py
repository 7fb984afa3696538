"""
Unit of data exchanged between peers.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

__all__ = [
    "CONTENT_ENCODING",
    "ArtifactPayload",
]

CONTENT_ENCODING = "latin-1"
"""
Encoding used to carry raw bytes in a text field; maps each byte to the code
point of the same value, so any byte sequence survives unchanged.
"""


class ArtifactPayload(BaseModel):
    """
    Artifact as transferred from host to guest.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    relative_path: str = Field(alias="relativePath")
    """
    Path relative to the host's output directory, always computed on the host.
    """

    content: bytes
    """
    Raw artifact bytes.
    """

    @field_validator("content", mode="before")
    @classmethod
    def validate_content(cls, value: Any) -> Any:
        # wire form is text; a non-latin-1 string was not produced by us
        if isinstance(value, str):
            try:
                return value.encode(CONTENT_ENCODING)
            except UnicodeEncodeError as e:
                raise ValueError(f"content is not byte-encoded text: {e}")
        return value

    @field_serializer("content")
    def serialize_content(self, value: bytes) -> str:
        return value.decode(CONTENT_ENCODING)

    def to_wire(self) -> dict[str, str]:
        """
        Get JSON-compatible form to send over the transport.
        """
        return self.model_dump(by_alias=True)

    @classmethod
    def from_wire(cls, data: Any) -> Self:
        """
        Validate and decode data received from the transport.
        """
        return cls.model_validate(data)
