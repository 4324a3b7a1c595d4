from .credentials import (
    decode_oidc_config,
    encode_oidc_config,
    new_oidc_credentials,
    with_oidc_config,
)
from .linking import OIDCLinkingService

__all__ = [
    "OIDCLinkingService",
    "decode_oidc_config",
    "encode_oidc_config",
    "new_oidc_credentials",
    "with_oidc_config",
]
