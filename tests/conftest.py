"""Shared test fixtures for all test modules."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from compute_management.config import DEFAULT_REGISTRY, ComputeConfig, ConfigRegistry

_CONFIG_ENV_VARS = (
    "COMPUTE_MGMT_CONFIG",
    "COMPUTE_MGMT_ENDPOINT",
    "COMPUTE_MGMT_API_VERSION",
    "AZURE_SUBSCRIPTION_ID",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep real environment variables, a stray compute.yaml, and the process default out of tests."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    DEFAULT_REGISTRY.reset()
    yield
    DEFAULT_REGISTRY.reset()


@pytest.fixture
def stub_credential() -> MagicMock:
    """A token credential double; get_token is never expected to be called."""
    credential = MagicMock()
    credential.get_token.return_value = MagicMock(token="stub-token", expires_on=0)
    return credential


@pytest.fixture
def compute_config(stub_credential: MagicMock) -> ComputeConfig:
    return ComputeConfig(
        endpoint="https://management.example.com",
        credential=stub_credential,
        subscription_id="sub-123",
    )


@pytest.fixture
def registry() -> ConfigRegistry:
    """A fresh registry with no loader, isolated from the process default."""
    return ConfigRegistry()
