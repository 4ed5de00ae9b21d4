"""Tests for validation.py: configuration fields and operation parameters."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from compute_management.validation import (
    validate_api_version,
    validate_credential,
    validate_endpoint,
    validate_location,
    validate_resource_group,
    validate_subscription_id,
    validate_vm_name,
)


class TestValidateEndpoint:
    @pytest.mark.parametrize(
        "endpoint",
        [
            "https://management.azure.com",
            "https://management.usgovcloudapi.net/",
            "http://localhost:8080",
        ],
    )
    def test_valid_endpoints(self, endpoint: str) -> None:
        validate_endpoint(endpoint)

    @pytest.mark.parametrize("endpoint", [None, ""])
    def test_missing_endpoint(self, endpoint: str | None) -> None:
        with pytest.raises(ValueError, match="endpoint is required"):
            validate_endpoint(endpoint)

    @pytest.mark.parametrize(
        "endpoint",
        ["management.azure.com", "ftp://management.azure.com", "https://", "/relative/path"],
    )
    def test_invalid_endpoints(self, endpoint: str) -> None:
        with pytest.raises(ValueError, match="Invalid endpoint"):
            validate_endpoint(endpoint)


class TestValidateCredential:
    def test_object_with_get_token(self) -> None:
        validate_credential(MagicMock())

    def test_none_rejected(self) -> None:
        with pytest.raises(ValueError, match="credential is required"):
            validate_credential(None)

    def test_object_without_get_token_rejected(self) -> None:
        with pytest.raises(ValueError, match="no callable get_token"):
            validate_credential("not-a-credential")


class TestValidateSubscriptionId:
    def test_none_is_allowed(self) -> None:
        validate_subscription_id(None)

    @pytest.mark.parametrize("subscription_id", ["sub-123", "00000000-0000-0000-0000-000000000001"])
    def test_valid_ids(self, subscription_id: str) -> None:
        validate_subscription_id(subscription_id)

    def test_blank_rejected(self) -> None:
        with pytest.raises(ValueError, match="blank"):
            validate_subscription_id("   ")

    def test_placeholder_rejected(self) -> None:
        with pytest.raises(ValueError, match="Placeholder"):
            validate_subscription_id("<your-subscription-id>")

    def test_whitespace_rejected(self) -> None:
        with pytest.raises(ValueError, match="whitespace"):
            validate_subscription_id("sub 123")


class TestValidateApiVersion:
    @pytest.mark.parametrize("api_version", [None, "2024-07-01", "2023-10-02-preview"])
    def test_valid_versions(self, api_version: str | None) -> None:
        validate_api_version(api_version)

    @pytest.mark.parametrize("api_version", ["latest", "2024-7-1", "2024-07-01-beta", ""])
    def test_invalid_versions(self, api_version: str) -> None:
        with pytest.raises(ValueError, match="Invalid api_version"):
            validate_api_version(api_version)


class TestValidateResourceGroup:
    @pytest.mark.parametrize("resource_group", [None, "rg-prod", "My_Group.(1)", "a"])
    def test_valid_names(self, resource_group: str | None) -> None:
        validate_resource_group(resource_group)

    @pytest.mark.parametrize("resource_group", ["", "ends-with-period.", "has space", "x" * 91])
    def test_invalid_names(self, resource_group: str) -> None:
        with pytest.raises(ValueError, match="Invalid resource group"):
            validate_resource_group(resource_group)


class TestValidateVmName:
    @pytest.mark.parametrize("vm_name", ["vm1", "web-01", "db_primary", "a" * 64])
    def test_valid_names(self, vm_name: str) -> None:
        validate_vm_name(vm_name)

    @pytest.mark.parametrize("vm_name", ["-leading", "trailing-", "trailing.", "bad/name", "a" * 65])
    def test_invalid_names(self, vm_name: str) -> None:
        with pytest.raises(ValueError, match="Invalid virtual machine name"):
            validate_vm_name(vm_name)

    @pytest.mark.parametrize("vm_name", [None, ""])
    def test_missing_name(self, vm_name: str | None) -> None:
        with pytest.raises(ValueError, match="vm_name is required"):
            validate_vm_name(vm_name)  # type: ignore[arg-type]


class TestValidateLocation:
    @pytest.mark.parametrize("location", ["eastus", "westus2", "northcentralus"])
    def test_valid_locations(self, location: str) -> None:
        validate_location(location)

    @pytest.mark.parametrize("location", ["East US", "EASTUS", "2eastus", "e"])
    def test_invalid_locations(self, location: str) -> None:
        with pytest.raises(ValueError, match="Invalid location"):
            validate_location(location)

    @pytest.mark.parametrize("location", [None, ""])
    def test_missing_location(self, location: str | None) -> None:
        with pytest.raises(ValueError, match="location is required"):
            validate_location(location)  # type: ignore[arg-type]
