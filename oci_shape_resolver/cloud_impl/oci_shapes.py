import logging
import threading
from typing import Callable

import oci

from oci_shape_resolver.cloud_impl import oci_client
from oci_shape_resolver.cloud_impl.cloud_structs import (
    ComputeInstanceDetails,
    InstanceDetails,
    InstanceLaunchConfig,
    InstanceOptionsDetails,
    InstancePoolRef,
    LaunchDetails,
    ShapeCatalogEntry,
    ShapeConfigOverride,
    UnknownInstanceDetails,
)
from oci_shape_resolver.constants import (
    INSTANCE_DETAILS_TYPE_COMPUTE,
    INSTANCE_DETAILS_TYPE_INSTANCE_OPTIONS,
)
from oci_shape_resolver.errors import RemoteLookupError

logger = logging.getLogger(__name__)

OCI_CALL_ERRORS = (
    oci.exceptions.ServiceError,
    oci.exceptions.RequestException,
    oci.exceptions.ConnectTimeout,
)


def oci_launch_details_to_launch_details(ld) -> LaunchDetails | None:
    if ld is None:
        return None
    shape_config = None
    if ld.shape_config is not None:
        shape_config = ShapeConfigOverride(
            ocpus=ld.shape_config.ocpus,
            memory_in_gbs=ld.shape_config.memory_in_gbs,
        )
    return LaunchDetails(shape=ld.shape, shape_config=shape_config)


def oci_instance_details_to_instance_details(
    details,
) -> InstanceDetails | None:
    if details is None:
        return None
    if details.instance_type == INSTANCE_DETAILS_TYPE_COMPUTE:
        return ComputeInstanceDetails(
            launch_details=oci_launch_details_to_launch_details(
                details.launch_details
            )
        )
    if details.instance_type == INSTANCE_DETAILS_TYPE_INSTANCE_OPTIONS:
        return InstanceOptionsDetails()
    return UnknownInstanceDetails(instance_type=str(details.instance_type))


def oci_instance_configuration_to_launch_config(
    ic: oci.core.models.InstanceConfiguration,
) -> InstanceLaunchConfig:
    return InstanceLaunchConfig(
        id=ic.id,
        compartment_id=ic.compartment_id,
        instance_details=oci_instance_details_to_instance_details(
            ic.instance_details
        ),
    )


def oci_shape_list_to_catalog_entries(
    oci_shapes: list[oci.core.models.Shape],
) -> list[ShapeCatalogEntry]:
    return [
        ShapeCatalogEntry(
            shape=s.shape,
            ocpus=s.ocpus,
            memory_in_gbs=s.memory_in_gbs,
            gpus=s.gpus,
        )
        for s in oci_shapes
    ]


def oci_instance_pool_to_pool_ref(
    pool: oci.core.models.InstancePool,
) -> InstancePoolRef:
    return InstancePoolRef(
        id=pool.id, instance_configuration_id=pool.instance_configuration_id
    )


def service_error_to_remote_lookup_error(
    e: Exception, what: str, pool_id: str = ""
) -> RemoteLookupError:
    if isinstance(e, oci.exceptions.ServiceError):
        return RemoteLookupError(
            f"Failed to {what}: {e.status} {e.code} {e.message}",
            pool_id=pool_id,
            status=e.status,
        )
    return RemoteLookupError(f"Failed to {what}: {e}", pool_id=pool_id)


class OciShapeSource:
    """Pass-through to the two OCI calls needed for shape resolution.
    No retries and no interpretation, SDK errors are re-raised as RemoteLookupError.

    The SDK has no per-operation timeout, so one client is kept per distinct
    per-call timeout. Clients are never modified after creation.
    """

    def __init__(
        self,
        compute_management_client_factory: Callable | None = None,
        compute_client_factory: Callable | None = None,
    ):
        self.compute_management_client_factory = (
            compute_management_client_factory
            or oci_client.get_compute_management_client
        )
        self.compute_client_factory = (
            compute_client_factory or oci_client.get_compute_client
        )
        self.compute_management_client = (
            self.compute_management_client_factory()
        )
        self.compute_client = self.compute_client_factory()
        self._clients_by_timeout: dict[tuple[str, float], object] = {}
        self._clients_lock = threading.Lock()

    def _get_client(self, kind: str, timeout_s: float | None):
        if not timeout_s:
            if kind == "compute":
                return self.compute_client
            return self.compute_management_client
        key = (kind, timeout_s)
        with self._clients_lock:
            client = self._clients_by_timeout.get(key)
        if client is not None:
            return client
        factory = (
            self.compute_client_factory
            if kind == "compute"
            else self.compute_management_client_factory
        )
        # Built outside the lock, reads the OCI config file
        client = factory(timeout_s)
        with self._clients_lock:
            return self._clients_by_timeout.setdefault(key, client)

    def get_instance_configuration(
        self, config_id: str, timeout_s: float | None = None
    ) -> InstanceLaunchConfig:
        logger.debug("Fetching instance configuration %s ...", config_id)
        client = self._get_client("compute_management", timeout_s)
        try:
            resp = client.get_instance_configuration(config_id)
        except OCI_CALL_ERRORS as e:
            raise service_error_to_remote_lookup_error(
                e, f"get instance configuration {config_id}"
            ) from e
        return oci_instance_configuration_to_launch_config(resp.data)

    def list_shapes(
        self, compartment_id: str, timeout_s: float | None = None
    ) -> list[ShapeCatalogEntry]:
        logger.debug("Listing shapes for compartment %s ...", compartment_id)
        client = self._get_client("compute", timeout_s)
        try:
            resp = oci.pagination.list_call_get_all_results(
                client.list_shapes, compartment_id
            )
        except OCI_CALL_ERRORS as e:
            raise service_error_to_remote_lookup_error(
                e, f"list shapes for compartment {compartment_id}"
            ) from e
        logger.debug(
            "%s shapes found for compartment %s", len(resp.data), compartment_id
        )
        return oci_shape_list_to_catalog_entries(resp.data)


def get_instance_pool_ref(
    pool_id: str, compute_management_client=None
) -> InstancePoolRef:
    client = (
        compute_management_client
        or oci_client.get_compute_management_client()
    )
    try:
        resp = client.get_instance_pool(pool_id)
    except OCI_CALL_ERRORS as e:
        raise service_error_to_remote_lookup_error(
            e, f"get instance pool {pool_id}", pool_id=pool_id
        ) from e
    return oci_instance_pool_to_pool_ref(resp.data)
