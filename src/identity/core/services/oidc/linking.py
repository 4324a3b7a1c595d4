from loguru import logger

from src.identity.core.errors import ConflictError, ValidationError
from src.identity.core.models.oidc import OIDCProviderLink, oidc_unique_id
from src.identity.core.services.oidc.credentials import (
    decode_oidc_config,
    new_oidc_credentials,
    with_oidc_config,
)
from src.identity.entities.core.credential.entity import Credential
from src.identity.runtime.config.config_data import ConfigData
from src.identity.runtime.context import get_config


class OIDCLinkingService:
    """Named operations the account-linking workflow performs on ``oidc`` credentials.

    Credentials are treated as values: every operation returns an updated
    copy and never persists anything. Writers for the same identity must be
    serialized by the caller.
    """

    def __init__(self, config: ConfigData | None = None):
        self._config = config

    @property
    def config(self) -> ConfigData:
        return self._config or get_config()

    @staticmethod
    def _require_provider_and_subject(provider: str, subject: str) -> None:
        if not provider:
            raise ValidationError(
                "received empty provider in oidc credentials", field="provider"
            )
        if not subject:
            raise ValidationError(
                "received empty subject in oidc credentials", field="subject"
            )

    def _resolve_organization(self, provider: str, organization: str) -> str:
        """Validate the provider key and apply its configured organization."""
        providers = self.config.oidc.providers
        if not providers:
            return organization

        provider_config = providers.get(provider)
        if provider_config is None:
            raise ValidationError(
                f"OIDC provider '{provider}' is not configured", field="provider"
            )
        return organization or provider_config.organization or ""

    def create_credential(
        self,
        id_token: str,
        access_token: str,
        refresh_token: str,
        provider: str,
        subject: str,
        organization: str = "",
    ) -> Credential:
        """Create the credential for the first provider account of an identity.

        Raises:
            ValidationError: If provider or subject is empty, or the provider is unknown
        """
        self._require_provider_and_subject(provider, subject)
        organization = self._resolve_organization(provider, organization)

        credential = new_oidc_credentials(
            id_token, access_token, refresh_token, provider, subject, organization
        )
        logger.info(
            f"Created oidc credential {credential.id} for {oidc_unique_id(provider, subject)}"
        )
        return credential

    def link_provider(
        self,
        credential: Credential,
        id_token: str,
        access_token: str,
        refresh_token: str,
        provider: str,
        subject: str,
        organization: str = "",
    ) -> Credential:
        """Link an additional provider account to an existing credential.

        Raises:
            ValidationError: If provider or subject is empty, or the provider is unknown
            ConflictError: If the provider account is already linked
        """
        self._require_provider_and_subject(provider, subject)
        organization = self._resolve_organization(provider, organization)
        config = decode_oidc_config(credential)
        config.link_provider(
            OIDCProviderLink.create(
                provider=provider,
                subject=subject,
                id_token=id_token,
                access_token=access_token,
                refresh_token=refresh_token,
                organization=organization,
            )
        )

        logger.info(
            f"Linked {oidc_unique_id(provider, subject)} to oidc credential {credential.id}"
        )
        return with_oidc_config(credential, config)

    def refresh_tokens(
        self,
        credential: Credential,
        provider: str,
        subject: str,
        id_token: str | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> Credential:
        """Store the tokens of a refreshed provider session.

        Raises:
            NotFoundError: If the provider account is not linked
        """
        config = decode_oidc_config(credential)
        config.rotate_tokens(
            provider,
            subject,
            id_token=id_token,
            access_token=access_token,
            refresh_token=refresh_token,
        )

        logger.debug(
            f"Rotated tokens of {oidc_unique_id(provider, subject)} in oidc credential {credential.id}"
        )
        return with_oidc_config(credential, config)

    def unlink_provider(
        self, credential: Credential, provider: str, subject: str
    ) -> Credential:
        """Remove a linked provider account.

        Raises:
            NotFoundError: If the provider account is not linked
            ConflictError: If it is the last link and unlinking it is not allowed
        """
        config = decode_oidc_config(credential)
        _, found = config.find_provider(provider, subject)
        if (
            found
            and len(config.providers) == 1
            and not self.config.linking.allow_unlink_last_provider
        ):
            raise ConflictError(
                f"Refusing to unlink {oidc_unique_id(provider, subject)}: it is the last linked provider"
            )

        config.unlink_provider(provider, subject)

        logger.info(
            f"Unlinked {oidc_unique_id(provider, subject)} from oidc credential {credential.id}"
        )
        return with_oidc_config(credential, config)

    def organization_of(self, credential: Credential) -> str:
        return decode_oidc_config(credential).organization()
