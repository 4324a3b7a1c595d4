"""Tests for building and encoding oidc credentials."""

import json
from unittest.mock import patch

import pytest

from src.identity.core.errors import (
    CorruptCredentialError,
    InvariantViolationError,
    ValidationError,
)
from src.identity.core.models.oidc import OIDCCredentialsConfig, OIDCProviderLink
from src.identity.core.services.oidc.credentials import (
    decode_oidc_config,
    encode_oidc_config,
    new_oidc_credentials,
    with_oidc_config,
)
from src.identity.entities.core.credential.entity import CredentialsType


class TestNewOIDCCredentials:
    """Test the credential builder."""

    def test_build_google_credential(self, google_credential):
        assert google_credential.type == CredentialsType.OIDC
        assert google_credential.type == "oidc"
        assert google_credential.identifiers == ["google:u-1"]

        config = decode_oidc_config(google_credential)
        assert len(config.providers) == 1
        link = config.providers[0]
        assert link.current_access_token == "acc"
        assert link.initial_access_token == "acc"

    def test_initial_tokens_equal_current_tokens(self):
        credential = new_oidc_credentials("i", "a", "r", "github", "42")
        link = decode_oidc_config(credential).providers[0]

        assert (link.initial_id_token, link.initial_access_token, link.initial_refresh_token) == ("i", "a", "r")
        assert (link.current_id_token, link.current_access_token, link.current_refresh_token) == ("i", "a", "r")

    def test_organization_is_stored(self):
        credential = new_oidc_credentials("i", "a", "r", "acme-sso", "u-1", "org-x")
        config = decode_oidc_config(credential)

        assert config.providers[0].organization == "org-x"
        assert json.loads(credential.config)["providers"][0]["organization"] == "org-x"

    def test_empty_organization_is_omitted(self, google_credential):
        payload = json.loads(google_credential.config)
        assert "organization" not in payload["providers"][0]

    def test_empty_provider_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            new_oidc_credentials("i", "a", "r", "", "u-1")

        assert exc_info.value.field == "provider"
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_empty_subject_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            new_oidc_credentials("i", "a", "r", "google", "")

        assert exc_info.value.field == "subject"

    def test_empty_tokens_are_accepted(self):
        credential = new_oidc_credentials("", "", "", "google", "u-1")
        assert credential.identifiers == ["google:u-1"]

    def test_each_credential_gets_its_own_id(self):
        first = new_oidc_credentials("i", "a", "r", "google", "u-1")
        second = new_oidc_credentials("i", "a", "r", "google", "u-1")
        assert first.id != second.id

    def test_serialization_failure_is_an_invariant_violation(self):
        with patch.object(
            OIDCCredentialsConfig, "to_json", side_effect=TypeError("not serializable")
        ):
            with pytest.raises(InvariantViolationError):
                new_oidc_credentials("i", "a", "r", "google", "u-1")


class TestDecodeOIDCConfig:
    """Test decoding of stored credential payloads."""

    def test_rejects_other_credential_types(self, google_credential):
        credential = google_credential.model_copy(update={"type": "password"})

        with pytest.raises(ValidationError) as exc_info:
            decode_oidc_config(credential)
        assert exc_info.value.field == "type"

    def test_corrupt_payload(self, google_credential):
        credential = google_credential.model_copy(update={"config": "{not json"})

        with pytest.raises(CorruptCredentialError):
            decode_oidc_config(credential)

    def test_wrong_payload_shape(self, google_credential):
        credential = google_credential.model_copy(
            update={"config": '{"providers": [{"provider": "google"}]}'}
        )

        with pytest.raises(CorruptCredentialError):
            decode_oidc_config(credential)


class TestWithOIDCConfig:
    """Test re-encoding an updated provider set into a credential."""

    def test_updates_config_and_identifiers(self, google_credential, sso_link):
        config = decode_oidc_config(google_credential)
        config.link_provider(sso_link)

        updated = with_oidc_config(google_credential, config)

        assert updated.id == google_credential.id
        assert updated.identifiers == ["google:u-1", "acme-sso:u-1"]
        assert decode_oidc_config(updated) == config
        assert updated.updated_at >= google_credential.updated_at
        # The original credential is untouched
        assert google_credential.identifiers == ["google:u-1"]

    def test_encode_matches_model_json(self):
        config = OIDCCredentialsConfig(
            providers=[OIDCProviderLink.create(provider="google", subject="u-1")]
        )
        assert encode_oidc_config(config) == config.to_json()
