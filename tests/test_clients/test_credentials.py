"""Tests for build_credential: service principal vs. DefaultAzureCredential."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from compute_management.clients import build_credential


class TestBuildCredential:
    def test_service_principal_when_all_values_present(self) -> None:
        with (
            patch("compute_management.clients.ClientSecretCredential") as mock_secret,
            patch("compute_management.clients.DefaultAzureCredential") as mock_default,
        ):
            credential = build_credential(tenant_id="tenant", client_id="client", client_secret="secret")
        assert credential is mock_secret.return_value
        mock_secret.assert_called_once_with(tenant_id="tenant", client_id="client", client_secret="secret")
        mock_default.assert_not_called()

    @pytest.mark.parametrize(
        "tenant_id,client_id,client_secret",
        [
            (None, None, None),
            ("tenant", "client", None),
            ("tenant", None, "secret"),
            (None, "client", "secret"),
        ],
    )
    def test_default_chain_otherwise(
        self, tenant_id: str | None, client_id: str | None, client_secret: str | None
    ) -> None:
        with (
            patch("compute_management.clients.ClientSecretCredential") as mock_secret,
            patch("compute_management.clients.DefaultAzureCredential") as mock_default,
        ):
            credential = build_credential(tenant_id, client_id, client_secret)
        assert credential is mock_default.return_value
        mock_secret.assert_not_called()
