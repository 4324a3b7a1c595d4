"""OIDC credential configuration models.

These models describe the payload stored in the ``config`` field of an
``oidc`` credential: the ordered set of external provider accounts linked to
one identity, and the tokens captured for each of them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from src.identity.core.errors import ConflictError, NotFoundError

OIDC_IDENTIFIER_DELIMITER = ":"


def oidc_unique_id(provider: str, subject: str) -> str:
    """Return the store-wide identifier of a provider account.

    No escaping is applied, so a delimiter inside ``provider`` can make two
    distinct pairs share an identifier.
    """
    return f"{provider}{OIDC_IDENTIFIER_DELIMITER}{subject}"


class OIDCProviderLink(BaseModel):
    """One external provider account linked to a local identity.

    Links are immutable. ``create`` is the only way to set the initial tokens,
    and ``rotate`` returns a copy with new current tokens.
    """

    model_config = ConfigDict(frozen=True)

    subject: str = Field(description="Provider-issued subject of the end user")
    provider: str = Field(description="Configured provider connection key")
    initial_id_token: str = Field(default="", description="ID token at link time")
    initial_access_token: str = Field(default="", description="Access token at link time")
    initial_refresh_token: str = Field(default="", description="Refresh token at link time")
    current_id_token: str = Field(default="", description="Latest known ID token")
    current_access_token: str = Field(default="", description="Latest known access token")
    current_refresh_token: str = Field(default="", description="Latest known refresh token")
    organization: str = Field(default="", description="Enterprise SSO organization, if any")

    @classmethod
    def create(
        cls,
        provider: str,
        subject: str,
        id_token: str = "",
        access_token: str = "",
        refresh_token: str = "",
        organization: str = "",
    ) -> "OIDCProviderLink":
        """Create a freshly linked provider account with initial == current tokens."""
        return cls(
            subject=subject,
            provider=provider,
            initial_id_token=id_token,
            initial_access_token=access_token,
            initial_refresh_token=refresh_token,
            current_id_token=id_token,
            current_access_token=access_token,
            current_refresh_token=refresh_token,
            organization=organization,
        )

    def rotate(
        self,
        id_token: str | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> "OIDCProviderLink":
        """Return a copy carrying new current tokens.

        ``None`` keeps the previous current value. Refresh responses often omit
        the ID token or the refresh token.
        """
        update: dict[str, str] = {}
        if id_token is not None:
            update["current_id_token"] = id_token
        if access_token is not None:
            update["current_access_token"] = access_token
        if refresh_token is not None:
            update["current_refresh_token"] = refresh_token
        return self.model_copy(update=update)

    def matches(self, provider: str, subject: str) -> bool:
        return self.provider == provider and self.subject == subject

    @property
    def unique_id(self) -> str:
        return oidc_unique_id(self.provider, self.subject)

    @model_serializer(mode="wrap")
    def omit_empty_organization(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if not data.get("organization"):
            data.pop("organization", None)
        return data


class OIDCCredentialsConfig(BaseModel):
    """Ordered set of provider links stored in an ``oidc`` credential.

    The set is owned by the caller; concurrent writers for the same identity
    must be serialized outside this class.
    """

    providers: list[OIDCProviderLink] = Field(
        default_factory=list, description="Linked provider accounts in link order"
    )

    def find_provider(self, provider: str, subject: str) -> tuple[int, bool]:
        """Return ``(index, True)`` for the first matching link, else ``(-1, False)``."""
        for index, link in enumerate(self.providers):
            if link.matches(provider, subject):
                return index, True
        return -1, False

    def get_provider(self, provider: str, subject: str) -> OIDCProviderLink | None:
        index, found = self.find_provider(provider, subject)
        return self.providers[index] if found else None

    def organization(self) -> str:
        """Return the first non-empty organization in link order, or ``""``."""
        for link in self.providers:
            if link.organization:
                return link.organization
        return ""

    def identifiers(self) -> list[str]:
        """Canonical identifiers of all links, in link order and de-duplicated."""
        return list(dict.fromkeys(link.unique_id for link in self.providers))

    def link_provider(self, link: OIDCProviderLink) -> None:
        """Append a newly linked provider account.

        Raises:
            ConflictError: If the provider/subject pair is already linked
        """
        _, found = self.find_provider(link.provider, link.subject)
        if found:
            raise ConflictError(
                f"Provider account {link.unique_id} is already linked"
            )
        self.providers.append(link)

    def rotate_tokens(
        self,
        provider: str,
        subject: str,
        *,
        id_token: str | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> OIDCProviderLink:
        """Replace the current tokens of a linked provider account.

        Raises:
            NotFoundError: If the provider/subject pair is not linked
        """
        index, found = self.find_provider(provider, subject)
        if not found:
            raise NotFoundError(
                f"Provider account {oidc_unique_id(provider, subject)} is not linked"
            )
        rotated = self.providers[index].rotate(
            id_token=id_token, access_token=access_token, refresh_token=refresh_token
        )
        self.providers[index] = rotated
        return rotated

    def unlink_provider(self, provider: str, subject: str) -> OIDCProviderLink:
        """Remove and return a linked provider account.

        Raises:
            NotFoundError: If the provider/subject pair is not linked
        """
        index, found = self.find_provider(provider, subject)
        if not found:
            raise NotFoundError(
                f"Provider account {oidc_unique_id(provider, subject)} is not linked"
            )
        return self.providers.pop(index)

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str | bytes) -> "OIDCCredentialsConfig":
        return cls.model_validate_json(data)


def find_provider(
    config: OIDCCredentialsConfig, provider: str, subject: str
) -> tuple[int, bool]:
    return config.find_provider(provider, subject)


def organization_of(config: OIDCCredentialsConfig) -> str:
    return config.organization()
