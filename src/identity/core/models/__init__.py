"""OIDC credential models."""

from .oidc import (
    OIDCCredentialsConfig,
    OIDCProviderLink,
    find_provider,
    oidc_unique_id,
    organization_of,
)

__all__ = [
    "OIDCCredentialsConfig",
    "OIDCProviderLink",
    "find_provider",
    "oidc_unique_id",
    "organization_of",
]
