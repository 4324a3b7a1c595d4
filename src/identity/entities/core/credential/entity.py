"""Credential domain entity."""

from enum import StrEnum
from typing import Any

from pydantic import Field

from src.identity.entities.core._base import Entity


class CredentialsType(StrEnum):
    """Type tags of credentials produced by this package."""

    OIDC = "oidc"


class Credential(Entity):
    """Generic credential record attached to an identity.

    The identity store owns and persists this record. ``identifiers`` must be
    unique across the whole store; ``config`` is an opaque payload whose shape
    depends on ``type``.
    """

    type: CredentialsType = Field(description="Credential type tag")
    identifiers: list[str] = Field(
        default_factory=list,
        description="External-facing identifiers used to look up this credential",
    )
    config: str = Field(default="{}", description="Serialized credential configuration")
    version: int = Field(default=0, description="Version of the config payload shape")
    identity_id: str | None = Field(
        default=None, description="Identity this credential belongs to"
    )

    def __eq__(self, other: Any) -> bool:
        """Compare credentials by business attributes, ignoring timestamps."""
        if not isinstance(other, Credential):
            return False

        return (
            self.id == other.id
            and self.type == other.type
            and self.identifiers == other.identifiers
            and self.config == other.config
            and self.version == other.version
            and self.identity_id == other.identity_id
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.type,
            tuple(self.identifiers),
            self.config,
            self.version,
            self.identity_id,
        ))
