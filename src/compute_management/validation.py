"""Input validation helpers for configuration fields and operation parameters."""

from __future__ import annotations

import re
from urllib.parse import urlparse

# Azure resource group: 1-90 chars of letters, digits, underscores, hyphens,
# periods and parentheses; must not end with a period.
_RESOURCE_GROUP_RE = re.compile(r"^[-\w.()]{0,89}[-\w()]$")

# VM name: 1-64 chars (the Linux limit), starts alphanumeric, must not end with '.' or '-'.
_VM_NAME_RE = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9_.-]{0,62}[A-Za-z0-9_])?$")

# Azure region short names, e.g. 'eastus', 'westus2', 'northcentralusstage'.
_LOCATION_RE = re.compile(r"^[a-z][a-z0-9]{1,39}$")

_API_VERSION_RE = re.compile(r"^\d{4}-\d{2}-\d{2}(-preview)?$")

_VALID_SCHEMES = {"http", "https"}


def validate_endpoint(endpoint: str | None) -> None:
    """Validate a management endpoint: an absolute http(s) URI with a host."""
    if not endpoint:
        msg = "endpoint is required"
        raise ValueError(msg)
    parsed = urlparse(endpoint)
    if parsed.scheme not in _VALID_SCHEMES or not parsed.netloc:
        valid = ", ".join(sorted(_VALID_SCHEMES))
        msg = f"Invalid endpoint: {endpoint!r}. Must be an absolute URI with scheme {valid}."
        raise ValueError(msg)


def validate_credential(credential: object) -> None:
    """Validate that a credential can produce tokens on demand."""
    if credential is None:
        msg = "credential is required"
        raise ValueError(msg)
    if not callable(getattr(credential, "get_token", None)):
        msg = f"Invalid credential: {type(credential).__name__} has no callable get_token()."
        raise ValueError(msg)


def validate_subscription_id(subscription_id: str | None) -> None:
    """Validate a subscription identifier when one is given."""
    if subscription_id is None:
        return
    if not subscription_id.strip():
        msg = "subscription_id is blank"
        raise ValueError(msg)
    if subscription_id.startswith("<") and subscription_id.endswith(">"):
        msg = f"Placeholder subscription_id detected: {subscription_id!r}."
        raise ValueError(msg)
    if any(ch.isspace() for ch in subscription_id):
        msg = f"Invalid subscription_id: {subscription_id!r}. Must not contain whitespace."
        raise ValueError(msg)


def validate_api_version(api_version: str | None) -> None:
    """Validate a compute API version such as '2024-07-01' or '2023-10-02-preview'."""
    if api_version is None:
        return
    if not _API_VERSION_RE.match(api_version):
        msg = f"Invalid api_version: {api_version!r}. Must look like YYYY-MM-DD or YYYY-MM-DD-preview."
        raise ValueError(msg)


def validate_resource_group(resource_group: str | None) -> None:
    """Validate an Azure resource group name."""
    if resource_group is None:
        return
    if not _RESOURCE_GROUP_RE.match(resource_group):
        msg = (
            f"Invalid resource group: {resource_group!r}. "
            "Must be 1-90 letters, digits, underscores, hyphens, periods or parentheses, not ending in a period."
        )
        raise ValueError(msg)


def validate_vm_name(vm_name: str) -> None:
    """Validate a virtual machine name."""
    if not vm_name:
        msg = "vm_name is required"
        raise ValueError(msg)
    if not _VM_NAME_RE.match(vm_name):
        msg = f"Invalid virtual machine name: {vm_name!r}. Must be 1-64 alphanumeric, '_', '.' or '-' characters."
        raise ValueError(msg)


def validate_location(location: str) -> None:
    """Validate an Azure region short name."""
    if not location:
        msg = "location is required"
        raise ValueError(msg)
    if not _LOCATION_RE.match(location):
        msg = f"Invalid location: {location!r}. Must be a lowercase region name such as 'eastus'."
        raise ValueError(msg)
