"""Pydantic v2 models for client outputs, plus log scrubbing."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

# --- Output scrubbing ---

_SUBSCRIPTION_PATTERN = re.compile(r"/subscriptions/[^/\s'\"]+", re.IGNORECASE)
_RESOURCE_GROUP_PATTERN = re.compile(r"/resourceGroups/[^/\s'\"]+", re.IGNORECASE)
_BEARER_PATTERN = re.compile(r"\bBearer\s+[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE)


def scrub_sensitive_values(text: str) -> str:
    """Redact subscription IDs, resource group names, and bearer tokens from text.

    Resource names such as VM names are preserved.
    """
    if not text:
        return text
    result = _SUBSCRIPTION_PATTERN.sub("/subscriptions/[REDACTED]", text)
    result = _RESOURCE_GROUP_PATTERN.sub("/resourceGroups/[REDACTED]", result)
    result = _BEARER_PATTERN.sub("Bearer [REDACTED]", result)
    return result


# --- Virtual machine models ---


class VirtualMachineSummary(BaseModel):
    """Flattened view of a virtual machine resource."""

    id: str | None = None
    name: str
    location: str
    vm_size: str | None = None
    os_type: str | None = None
    provisioning_state: str | None = None
    zones: list[str] = Field(default_factory=list)
    tags: dict[str, str] = Field(default_factory=dict)


class VirtualMachineSizeInfo(BaseModel):
    """Capacity of a virtual machine size available in a region."""

    name: str
    number_of_cores: int | None = None
    memory_in_mb: int | None = None
    max_data_disk_count: int | None = None
    os_disk_size_in_mb: int | None = None
    resource_disk_size_in_mb: int | None = None
