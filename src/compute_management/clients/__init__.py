"""Client wrappers for the Azure compute management plane."""

from __future__ import annotations

from azure.core.credentials import TokenCredential
from azure.identity import ClientSecretCredential, DefaultAzureCredential


def build_credential(
    tenant_id: str | None = None,
    client_id: str | None = None,
    client_secret: str | None = None,
) -> TokenCredential:
    """Create a token credential from optional service principal settings.

    A ClientSecretCredential is returned only when all three service principal
    values are present. Otherwise DefaultAzureCredential walks its usual chain
    (environment, workload identity, managed identity, Azure CLI, ...).
    Neither constructor performs network I/O; tokens are fetched on first use.
    """
    if tenant_id and client_id and client_secret:
        return ClientSecretCredential(
            tenant_id=tenant_id,
            client_id=client_id,
            client_secret=client_secret,
        )
    return DefaultAzureCredential()
