"""Client-specific test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from compute_management.clients.compute import ManagementClient
from compute_management.config import ComputeConfig
from compute_management.execution import ExecutionContext


@pytest.fixture
def client(compute_config: ComputeConfig) -> Iterator[ManagementClient]:
    """A client with its own elastic pool, closed after the test."""
    client = ManagementClient(compute_config, ExecutionContext.elastic())
    yield client
    client.close()


@pytest.fixture
def mock_sdk_client() -> MagicMock:
    """Stand-in for azure.mgmt.compute.ComputeManagementClient."""
    return MagicMock()
