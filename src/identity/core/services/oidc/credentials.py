"""Construction and encoding of ``oidc`` credentials."""

from datetime import UTC, datetime

from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from src.identity.core.errors import (
    CorruptCredentialError,
    InvariantViolationError,
    ValidationError,
)
from src.identity.core.models.oidc import (
    OIDCCredentialsConfig,
    OIDCProviderLink,
    oidc_unique_id,
)
from src.identity.entities.core.credential.entity import Credential, CredentialsType


def new_oidc_credentials(
    id_token: str,
    access_token: str,
    refresh_token: str,
    provider: str,
    subject: str,
    organization: str = "",
) -> Credential:
    """Build the credential for a freshly linked OIDC provider account.

    Args:
        id_token: ID token returned by the provider
        access_token: Access token returned by the provider
        refresh_token: Refresh token returned by the provider
        provider: Configured provider connection key
        subject: Provider-issued subject of the end user
        organization: Enterprise SSO organization, empty if none

    Returns:
        Credential of type ``oidc`` holding exactly one provider link

    Raises:
        ValidationError: If provider or subject is empty
        InvariantViolationError: If the payload cannot be serialized
    """
    if not provider:
        raise ValidationError(
            "received empty provider in oidc credentials", field="provider"
        )
    if not subject:
        raise ValidationError(
            "received empty subject in oidc credentials", field="subject"
        )

    config = OIDCCredentialsConfig(
        providers=[
            OIDCProviderLink.create(
                provider=provider,
                subject=subject,
                id_token=id_token,
                access_token=access_token,
                refresh_token=refresh_token,
                organization=organization or "",
            )
        ]
    )

    return Credential(
        type=CredentialsType.OIDC,
        identifiers=[oidc_unique_id(provider, subject)],
        config=encode_oidc_config(config),
    )


def encode_oidc_config(config: OIDCCredentialsConfig) -> str:
    """Serialize a provider set into the credential payload.

    Raises:
        InvariantViolationError: If serialization fails
    """
    try:
        return config.to_json()
    except (PydanticSerializationError, TypeError, ValueError) as e:
        logger.critical(f"Unable to encode oidc credentials config to JSON: {e}")
        raise InvariantViolationError(
            f"Unable to encode oidc credentials config to JSON: {e}"
        ) from e


def decode_oidc_config(credential: Credential) -> OIDCCredentialsConfig:
    """Decode the provider set stored in an ``oidc`` credential.

    Raises:
        ValidationError: If the credential is not of type ``oidc``
        CorruptCredentialError: If the stored payload is malformed
    """
    if credential.type != CredentialsType.OIDC:
        raise ValidationError(
            f"expected credential of type oidc, got {credential.type}", field="type"
        )

    try:
        return OIDCCredentialsConfig.from_json(credential.config)
    except PydanticValidationError as e:
        logger.error(f"Stored oidc config of credential {credential.id} is corrupt: {e}")
        raise CorruptCredentialError(
            f"Unable to decode oidc config of credential {credential.id}"
        ) from e


def with_oidc_config(
    credential: Credential, config: OIDCCredentialsConfig
) -> Credential:
    """Return a copy of the credential carrying an updated provider set."""
    return credential.model_copy(
        update={
            "identifiers": config.identifiers(),
            "config": encode_oidc_config(config),
            "updated_at": datetime.now(UTC),
        }
    )
