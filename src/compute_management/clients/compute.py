"""Compute management client handle: virtual machines and VM sizes."""

from __future__ import annotations

import threading
from types import TracebackType
from typing import Any

import structlog
from azure.mgmt.compute import ComputeManagementClient

from compute_management.config import ComputeConfig
from compute_management.errors import InvalidConfigurationError
from compute_management.execution import ExecutionContext
from compute_management.models import VirtualMachineSizeInfo, VirtualMachineSummary, scrub_sensitive_values
from compute_management.validation import validate_location, validate_resource_group, validate_vm_name

log = structlog.get_logger()


def _enum_value(value: Any) -> Any:
    """Unwrap SDK string enums (e.g. OperatingSystemTypes) to their plain value."""
    return getattr(value, "value", value)


def _summarize_vm(vm: Any) -> VirtualMachineSummary:
    os_disk = vm.storage_profile.os_disk if vm.storage_profile else None
    return VirtualMachineSummary(
        id=vm.id,
        name=vm.name,
        location=vm.location,
        vm_size=_enum_value(vm.hardware_profile.vm_size) if vm.hardware_profile else None,
        os_type=_enum_value(os_disk.os_type) if os_disk else None,
        provisioning_state=vm.provisioning_state,
        zones=list(vm.zones or []),
        tags=dict(vm.tags or {}),
    )


def _summarize_size(size: Any) -> VirtualMachineSizeInfo:
    return VirtualMachineSizeInfo(
        name=size.name,
        number_of_cores=size.number_of_cores,
        memory_in_mb=size.memory_in_mb,
        max_data_disk_count=size.max_data_disk_count,
        os_disk_size_in_mb=size.os_disk_size_in_mb,
        resource_disk_size_in_mb=size.resource_disk_size_in_mb,
    )


class ManagementClient:
    """Handle for the compute management plane, bound to one configuration and one worker pool.

    The handle is usable as soon as it is constructed. The underlying SDK
    client is created on first use, so construction never touches the network.
    Blocking SDK calls run on the execution context, not on the event loop.
    """

    def __init__(self, config: ComputeConfig, execution_context: ExecutionContext) -> None:
        self._config = config
        self._context = execution_context
        self._sdk_client: ComputeManagementClient | None = None
        self._closed = False
        self._lock = threading.RLock()

    @property
    def config(self) -> ComputeConfig:
        return self._config

    @property
    def execution_context(self) -> ExecutionContext:
        return self._context

    @property
    def closed(self) -> bool:
        return self._closed

    def _get_sdk_client(self) -> ComputeManagementClient:
        with self._lock:
            if self._closed:
                msg = "ManagementClient is closed"
                raise RuntimeError(msg)
            if self._sdk_client is None:
                if not self._config.subscription_id:
                    msg = "subscription_id is required for compute operations"
                    raise InvalidConfigurationError(msg)
                kwargs: dict[str, Any] = {"credential_scopes": self._config.credential_scopes}
                if self._config.api_version:
                    kwargs["api_version"] = self._config.api_version
                self._sdk_client = ComputeManagementClient(
                    credential=self._config.credential,
                    subscription_id=self._config.subscription_id,
                    base_url=self._config.endpoint,
                    **kwargs,
                )
                log.debug("compute_sdk_client_created", endpoint=self._config.endpoint)
            return self._sdk_client

    async def list_virtual_machines(self, resource_group: str | None = None) -> list[VirtualMachineSummary]:
        """List virtual machines in a resource group, or across the subscription.

        Args:
            resource_group: Resource group to list. None lists every VM in the subscription.
        """
        validate_resource_group(resource_group)
        client = self._get_sdk_client()
        try:
            return await self._context.run(self._collect_vms, client, resource_group)
        except Exception as exc:
            log.error(
                "failed_to_list_virtual_machines",
                resource_group=resource_group,
                error=scrub_sensitive_values(str(exc)),
            )
            raise

    def _collect_vms(
        self,
        client: ComputeManagementClient,
        resource_group: str | None,
    ) -> list[VirtualMachineSummary]:
        """Synchronous helper that drains the VM paginator."""
        if resource_group:
            pager = client.virtual_machines.list(resource_group)
        else:
            pager = client.virtual_machines.list_all()
        return [_summarize_vm(vm) for vm in pager]

    async def get_virtual_machine(self, resource_group: str, vm_name: str) -> VirtualMachineSummary:
        """Get a single virtual machine by resource group and name."""
        validate_resource_group(resource_group)
        validate_vm_name(vm_name)
        client = self._get_sdk_client()
        try:
            vm = await self._context.run(client.virtual_machines.get, resource_group, vm_name)
        except Exception as exc:
            log.error(
                "failed_to_get_virtual_machine",
                vm=vm_name,
                error=scrub_sensitive_values(str(exc)),
            )
            raise
        return _summarize_vm(vm)

    async def list_virtual_machine_sizes(self, location: str) -> list[VirtualMachineSizeInfo]:
        """List the VM sizes available in a region."""
        validate_location(location)
        client = self._get_sdk_client()
        try:
            sizes = await self._context.run(lambda: list(client.virtual_machine_sizes.list(location)))
        except Exception as exc:
            log.error(
                "failed_to_list_virtual_machine_sizes",
                location=location,
                error=scrub_sensitive_values(str(exc)),
            )
            raise
        return [_summarize_size(size) for size in sizes]

    def close(self) -> None:
        """Release the SDK client and, if this client owns it, the worker pool.

        A shared execution context is left running for its owner to shut down.
        Calling close more than once is a no-op.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            sdk_client, self._sdk_client = self._sdk_client, None
        if sdk_client is not None:
            sdk_client.close()
        self._context.shutdown(wait=False)
        log.debug("management_client_closed", owned_pool=self._context.owned)

    def __enter__(self) -> ManagementClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
