"""Factory functions that construct ready-to-use compute management clients."""

from __future__ import annotations

from concurrent.futures import Executor

import structlog

from compute_management.clients.compute import ManagementClient
from compute_management.config import DEFAULT_REGISTRY, ComputeConfig, ConfigRegistry, validate_config
from compute_management.execution import ExecutionContext

log = structlog.get_logger()


def _context_for(executor: Executor | None) -> ExecutionContext:
    if executor is None:
        return ExecutionContext.elastic()
    return ExecutionContext.shared(executor)


def create_default(
    registry: ConfigRegistry = DEFAULT_REGISTRY,
    *,
    executor: Executor | None = None,
) -> ManagementClient:
    """Create a client bound to the registry's default configuration.

    Args:
        registry: Where the default configuration is resolved. Defaults to the process-wide registry.
        executor: Optional caller-owned executor to share. When omitted, the client
            gets its own elastic pool, shut down by ``ManagementClient.close``.

    Raises:
        ConfigurationMissingError: If the registry has no configuration and cannot load one.
    """
    config = registry.get()
    return create_with_config(config, executor=executor)


def create_with_config(
    config: ComputeConfig,
    *,
    executor: Executor | None = None,
) -> ManagementClient:
    """Create a client bound to ``config`` as given, without merging in defaults.

    Every call allocates a fresh pool unless ``executor`` is supplied; pools are
    never reused across calls.

    Raises:
        InvalidConfigurationError: If ``config`` is None or lacks an endpoint or credential.
    """
    # Validate before allocating the pool so a rejected config leaks nothing.
    validate_config(config)
    context = _context_for(executor)
    client = ManagementClient(config, context)
    log.info(
        "management_client_created",
        endpoint=config.endpoint,
        api_version=config.api_version,
        owned_pool=context.owned,
    )
    return client
