"""Tests for the OIDC account-linking service."""

import pytest

from src.identity.core.errors import ConflictError, NotFoundError, ValidationError
from src.identity.core.services.oidc.credentials import decode_oidc_config
from src.identity.core.services.oidc.linking import OIDCLinkingService
from src.identity.runtime.config.config_data import ConfigData
from src.identity.runtime.context import with_context


class TestCreateCredential:
    """Test creating the first link of an identity."""

    def test_create_with_any_provider(self, linking_service):
        credential = linking_service.create_credential(
            "idt", "acc", "ref", "google", "u-1"
        )

        assert credential.type == "oidc"
        assert credential.identifiers == ["google:u-1"]

    def test_create_rejects_empty_values(self, linking_service):
        with pytest.raises(ValidationError):
            linking_service.create_credential("idt", "acc", "ref", "", "u-1")
        with pytest.raises(ValidationError):
            linking_service.create_credential("idt", "acc", "ref", "google", "")

    def test_empty_subject_reported_before_unknown_provider(
        self, restricted_linking_service
    ):
        with pytest.raises(ValidationError) as exc_info:
            restricted_linking_service.create_credential(
                "idt", "acc", "ref", "github", ""
            )
        assert exc_info.value.field == "subject"

    def test_create_rejects_unknown_provider(self, restricted_linking_service):
        with pytest.raises(ValidationError, match="github") as exc_info:
            restricted_linking_service.create_credential(
                "idt", "acc", "ref", "github", "u-1"
            )
        assert exc_info.value.field == "provider"

    def test_create_uses_configured_organization(self, restricted_linking_service):
        credential = restricted_linking_service.create_credential(
            "idt", "acc", "ref", "acme-sso", "u-1"
        )
        assert restricted_linking_service.organization_of(credential) == "acme"

    def test_explicit_organization_wins(self, restricted_linking_service):
        credential = restricted_linking_service.create_credential(
            "idt", "acc", "ref", "acme-sso", "u-1", organization="org-x"
        )
        assert restricted_linking_service.organization_of(credential) == "org-x"

    def test_provider_without_organization(self, restricted_linking_service):
        credential = restricted_linking_service.create_credential(
            "idt", "acc", "ref", "google", "u-1"
        )
        assert restricted_linking_service.organization_of(credential) == ""


class TestLinkProvider:
    """Test linking additional provider accounts."""

    def test_link_second_provider(self, linking_service, google_credential):
        updated = linking_service.link_provider(
            google_credential, "gh-idt", "gh-acc", "gh-ref", "github", "42"
        )

        assert updated.identifiers == ["google:u-1", "github:42"]
        config = decode_oidc_config(updated)
        assert config.find_provider("github", "42") == (1, True)
        link = config.providers[1]
        assert link.initial_access_token == link.current_access_token == "gh-acc"

    def test_link_duplicate_provider(self, linking_service, google_credential):
        with pytest.raises(ConflictError):
            linking_service.link_provider(
                google_credential, "idt", "acc", "ref", "google", "u-1"
            )

    def test_link_rejects_empty_values(self, linking_service, google_credential):
        with pytest.raises(ValidationError):
            linking_service.link_provider(google_credential, "i", "a", "r", "", "42")
        with pytest.raises(ValidationError):
            linking_service.link_provider(google_credential, "i", "a", "r", "github", "")

    def test_link_unknown_provider(self, restricted_linking_service, google_credential):
        with pytest.raises(ValidationError):
            restricted_linking_service.link_provider(
                google_credential, "i", "a", "r", "github", "42"
            )

    def test_link_sso_provider_sets_organization(
        self, restricted_linking_service, google_credential
    ):
        updated = restricted_linking_service.link_provider(
            google_credential, "i", "a", "r", "acme-sso", "u-1"
        )
        assert restricted_linking_service.organization_of(updated) == "acme"


class TestRefreshTokens:
    """Test rotating current tokens after a provider session refresh."""

    def test_refresh_rotates_current_tokens(self, linking_service, google_credential):
        updated = linking_service.refresh_tokens(
            google_credential, "google", "u-1", access_token="acc-2", id_token="idt-2"
        )

        link = decode_oidc_config(updated).providers[0]
        assert link.current_access_token == "acc-2"
        assert link.current_id_token == "idt-2"
        assert link.current_refresh_token == "ref"
        assert link.initial_access_token == "acc"
        assert link.initial_id_token == "idt"
        assert updated.identifiers == google_credential.identifiers

    def test_refresh_unknown_link(self, linking_service, google_credential):
        with pytest.raises(NotFoundError):
            linking_service.refresh_tokens(
                google_credential, "github", "42", access_token="acc-2"
            )


class TestUnlinkProvider:
    """Test removing provider accounts."""

    def test_unlink_one_of_two(self, linking_service, google_credential):
        linked = linking_service.link_provider(
            google_credential, "i", "a", "r", "github", "42"
        )

        updated = linking_service.unlink_provider(linked, "google", "u-1")

        assert updated.identifiers == ["github:42"]
        assert decode_oidc_config(updated).find_provider("google", "u-1") == (-1, False)

    def test_refuse_unlinking_last_provider(self, linking_service, google_credential):
        with pytest.raises(ConflictError):
            linking_service.unlink_provider(google_credential, "google", "u-1")

    def test_unlink_last_provider_when_allowed(self, google_credential):
        config = ConfigData()
        config.linking.allow_unlink_last_provider = True
        service = OIDCLinkingService(config)

        updated = service.unlink_provider(google_credential, "google", "u-1")

        assert updated.identifiers == []
        assert decode_oidc_config(updated).providers == []

    def test_unlink_unknown_link(self, linking_service, google_credential):
        with pytest.raises(NotFoundError):
            linking_service.unlink_provider(google_credential, "github", "42")


class TestRuntimeConfiguration:
    """The service reads the runtime context when no config is given."""

    def test_uses_context_config(self, google_credential):
        service = OIDCLinkingService()
        override = ConfigData()
        override.linking.allow_unlink_last_provider = True

        with with_context(override):
            updated = service.unlink_provider(google_credential, "google", "u-1")

        assert updated.identifiers == []
