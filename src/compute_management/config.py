"""Compute configuration, YAML/environment loading, and the process-wide default registry."""

from __future__ import annotations

import dataclasses
import os
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
import yaml
from azure.core.credentials import TokenCredential

from compute_management.clients import build_credential
from compute_management.errors import ConfigurationMissingError, InvalidConfigurationError
from compute_management.validation import (
    validate_api_version,
    validate_credential,
    validate_endpoint,
    validate_subscription_id,
)

log = structlog.get_logger()


@dataclass(frozen=True)
class ComputeConfig:
    """Connection parameters for the compute management plane."""

    endpoint: str
    credential: TokenCredential | None
    subscription_id: str | None = None
    api_version: str | None = None

    @property
    def credential_scopes(self) -> list[str]:
        """OAuth scopes requested from the credential, derived from the endpoint."""
        return [f"{self.endpoint.rstrip('/')}/.default"]

    def with_overrides(self, **changes: Any) -> ComputeConfig:
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)


def validate_config(config: ComputeConfig | None) -> None:
    """Validate a configuration, collecting every problem before raising.

    Endpoint and credential are mandatory. Subscription ID and API version are
    optional but must be well formed when present.

    Raises:
        InvalidConfigurationError: If the configuration is None or any field is invalid.
    """
    if config is None:
        msg = "configuration is required"
        raise InvalidConfigurationError(msg)

    errors: list[str] = []
    checks: list[tuple[Callable[[Any], None], Any]] = [
        (validate_endpoint, config.endpoint),
        (validate_credential, config.credential),
        (validate_subscription_id, config.subscription_id),
        (validate_api_version, config.api_version),
    ]
    for check, value in checks:
        try:
            check(value)
        except ValueError as exc:
            errors.append(str(exc))

    if errors:
        raise InvalidConfigurationError(errors)


_KNOWN_FIELDS = (
    "endpoint",
    "subscription_id",
    "api_version",
    "tenant_id",
    "client_id",
    "client_secret",
)


def load_config_file(path: Path) -> dict[str, str]:
    """Parse a YAML compute configuration file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A dict of the recognised settings found under the top-level 'compute' key.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        InvalidConfigurationError: If the file content is malformed.
    """
    if not path.exists():
        msg = (
            f"Compute configuration file not found: {path}. "
            "Copy compute.example.yaml to compute.yaml and fill in your endpoint and subscription, "
            "or set COMPUTE_MGMT_CONFIG to point to your config file."
        )
        raise FileNotFoundError(msg)

    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        msg = f"Compute config file {path} is not valid YAML: {exc}"
        raise InvalidConfigurationError(msg) from exc

    if not isinstance(raw, dict) or "compute" not in raw:
        msg = f"Compute config file {path} must contain a top-level 'compute' key."
        raise InvalidConfigurationError(msg)

    section: Any = raw["compute"]
    if not isinstance(section, dict):
        msg = f"'compute' section in {path} must be a mapping, got {type(section).__name__}."
        raise InvalidConfigurationError(msg)

    unknown = sorted(set(section) - set(_KNOWN_FIELDS))
    if unknown:
        log.warning("unknown_config_keys_ignored", path=str(path), keys=unknown)

    return {key: str(section[key]) for key in _KNOWN_FIELDS if section.get(key) is not None}


def load_config_from_environment() -> ComputeConfig | None:
    """Build a configuration from the YAML file and environment variable overrides.

    Reads the file path from ``COMPUTE_MGMT_CONFIG``, defaulting to
    ``compute.yaml`` in the current working directory. The default file is
    optional; a file named explicitly by the variable must exist.
    ``COMPUTE_MGMT_ENDPOINT``, ``AZURE_SUBSCRIPTION_ID`` and
    ``COMPUTE_MGMT_API_VERSION`` override values from the file.

    Returns:
        The configuration, or None when no endpoint is configured anywhere.
    """
    explicit_path = os.environ.get("COMPUTE_MGMT_CONFIG")
    path = Path(explicit_path or "compute.yaml")
    settings: dict[str, str] = {}
    if explicit_path or path.exists():
        settings = load_config_file(path)

    overrides = {
        "endpoint": os.environ.get("COMPUTE_MGMT_ENDPOINT"),
        "subscription_id": os.environ.get("AZURE_SUBSCRIPTION_ID"),
        "api_version": os.environ.get("COMPUTE_MGMT_API_VERSION"),
    }
    settings.update({key: value for key, value in overrides.items() if value})

    if "endpoint" not in settings:
        return None

    return ComputeConfig(
        endpoint=settings["endpoint"],
        credential=build_credential(
            tenant_id=settings.get("tenant_id"),
            client_id=settings.get("client_id"),
            client_secret=settings.get("client_secret"),
        ),
        subscription_id=settings.get("subscription_id"),
        api_version=settings.get("api_version"),
    )


class ConfigRegistry:
    """Initialize-once holder for a default ComputeConfig.

    The first successful ``initialize`` (or loader run) wins; later calls keep
    the stored value. Pass a registry explicitly to isolate tests from the
    process default.
    """

    def __init__(self, loader: Callable[[], ComputeConfig | None] | None = None) -> None:
        self._loader = loader
        self._config: ComputeConfig | None = None
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._config is not None

    def initialize(self, config: ComputeConfig) -> bool:
        """Set the default configuration if none is set yet.

        Returns:
            True if this call stored ``config``, False if a default already existed.

        Raises:
            InvalidConfigurationError: If ``config`` fails validation.
        """
        validate_config(config)
        with self._lock:
            if self._config is not None:
                log.debug("default_config_already_initialized")
                return False
            self._config = config
        log.info("default_config_initialized", endpoint=config.endpoint)
        return True

    def get(self) -> ComputeConfig:
        """Return the default configuration, running the loader on first use.

        Raises:
            ConfigurationMissingError: If no configuration is set and none can be loaded,
                including when the loader's configuration file does not exist.
            InvalidConfigurationError: If the loader produced an invalid configuration.
        """
        config = self._config
        if config is not None:
            return config

        with self._lock:
            if self._config is None and self._loader is not None:
                try:
                    loaded = self._loader()
                except FileNotFoundError as exc:
                    raise ConfigurationMissingError(str(exc)) from exc
                if loaded is not None:
                    validate_config(loaded)
                    self._config = loaded
                    log.info("default_config_loaded", endpoint=loaded.endpoint)
            config = self._config

        if config is None:
            msg = (
                "No default compute configuration has been established. "
                "Call initialize() on the registry, or set COMPUTE_MGMT_ENDPOINT / COMPUTE_MGMT_CONFIG."
            )
            raise ConfigurationMissingError(msg)
        return config

    def reset(self) -> None:
        """Forget the stored configuration so the next ``get`` starts fresh."""
        with self._lock:
            self._config = None


DEFAULT_REGISTRY = ConfigRegistry(loader=load_config_from_environment)
