import logging
import threading

from oci_shape_resolver.cloud_impl.cloud_structs import (
    ComputeInstanceDetails,
    InstanceLaunchConfig,
    InstancePoolRef,
    RemoteShapeSource,
    Shape,
    ShapeCatalogEntry,
)
from oci_shape_resolver.constants import (
    CATALOG_ERROR_POLICIES,
    CATALOG_ERROR_POLICY_RAISE,
    DEFAULT_CATALOG_ERROR_POLICY,
)
from oci_shape_resolver.errors import (
    InvalidShapeError,
    MissingConfigurationError,
    ShapeNotFoundError,
    UnsupportedConfigurationError,
)
from oci_shape_resolver.util import bytes_to_gib, gib_to_bytes

logger = logging.getLogger(__name__)


def shape_from_flexible_launch_details(
    details: ComputeInstanceDetails,
) -> Shape:
    """Flexible shapes carry the sizing in the launch details, GPU count is never set there"""
    ld = details.launch_details
    sc = ld.shape_config
    cpu: float = 0
    memory_in_bytes: float = 0
    if sc.ocpus is not None:
        cpu = sc.ocpus
        # Minimum amount of memory unless explicitly set higher
        memory_in_bytes = gib_to_bytes(sc.ocpus)
    if sc.memory_in_gbs is not None:
        memory_in_bytes = gib_to_bytes(sc.memory_in_gbs)
    return Shape(
        name=ld.shape or "", cpu=cpu, memory_in_bytes=memory_in_bytes
    )


def shape_from_catalog(
    shape_name: str | None, catalog: list[ShapeCatalogEntry]
) -> Shape:
    """Last matching entry wins. Empty name if no match"""
    name, cpu, gpu, memory_in_bytes = "", 0.0, 0, 0.0
    for entry in catalog:
        if entry.shape != shape_name:
            continue
        name = entry.shape
        if entry.ocpus is not None:
            cpu = entry.ocpus
        if entry.memory_in_gbs is not None:
            memory_in_bytes = gib_to_bytes(entry.memory_in_gbs)
        if entry.gpus is not None:
            gpu = entry.gpus
    return Shape(name=name, cpu=cpu, gpu=gpu, memory_in_bytes=memory_in_bytes)


class ShapeResolver:
    """Resolves instance pools to shapes, caching successful results for the lifetime of the object.

    Cache reads and writes are guarded by a single lock, remote calls are made outside of it.
    Failed resolutions are not cached, so the next call for the pool goes remote again.
    """

    def __init__(
        self,
        shape_source: RemoteShapeSource,
        catalog_error_policy: str = DEFAULT_CATALOG_ERROR_POLICY,
    ):
        if catalog_error_policy not in CATALOG_ERROR_POLICIES:
            raise ValueError(
                f"Unknown catalog error policy: {catalog_error_policy}"
            )
        self.shape_source = shape_source
        self.catalog_error_policy = catalog_error_policy
        self._cache: dict[str, Shape] = {}
        self._lock = threading.Lock()

    def get_cached_shape(self, pool_id: str) -> Shape | None:
        with self._lock:
            return self._cache.get(pool_id)

    def cached_pool_ids(self) -> list[str]:
        with self._lock:
            return list(self._cache)

    def resolve(
        self, pool: InstancePoolRef, timeout_s: float | None = None
    ) -> Shape:
        cached = self.get_cached_shape(pool.id)
        if cached is not None:
            logger.debug("Shape cache hit for instance pool %s", pool.id)
            return cached

        logger.debug(
            "Fetching shape configuration details for instance pool %s",
            pool.id,
        )
        instance_config = self.shape_source.get_instance_configuration(
            pool.instance_configuration_id, timeout_s=timeout_s
        )

        if instance_config.instance_details is None:
            raise MissingConfigurationError(
                f"Instance configuration details for instance pool {pool.id} have not been set",
                pool_id=pool.id,
            )

        details = instance_config.instance_details
        if not isinstance(details, ComputeInstanceDetails):
            raise UnsupportedConfigurationError(
                f"Compute instance configuration for instance pool {pool.id} not found, got: {details.instance_type}",
                pool_id=pool.id,
            )

        if (
            details.launch_details is not None
            and details.launch_details.shape_config is not None
        ):
            shape = shape_from_flexible_launch_details(details)
        else:
            shape = shape_from_catalog(
                (
                    details.launch_details.shape
                    if details.launch_details
                    else None
                ),
                self.list_catalog(pool, instance_config, timeout_s),
            )

        if not shape.name:
            raise ShapeNotFoundError(
                f"Shape information for instance pool {pool.id} not found",
                pool_id=pool.id,
            )
        if shape.cpu < 0 or shape.memory_in_bytes < 0:
            raise InvalidShapeError(
                f"Negative CPU or memory reported for shape {shape.name} of instance pool {pool.id}",
                pool_id=pool.id,
            )

        with self._lock:
            shape = self._cache.setdefault(pool.id, shape)
        logger.debug(
            "Resolved instance pool %s to %s (%.1f GiB)",
            pool.id,
            shape,
            bytes_to_gib(shape.memory_in_bytes),
        )
        return shape

    def list_catalog(
        self,
        pool: InstancePoolRef,
        instance_config: InstanceLaunchConfig,
        timeout_s: float | None = None,
    ) -> list[ShapeCatalogEntry]:
        try:
            return self.shape_source.list_shapes(
                instance_config.compartment_id, timeout_s=timeout_s
            )
        except Exception as e:
            if self.catalog_error_policy == CATALOG_ERROR_POLICY_RAISE:
                raise
            logger.warning(
                "Failed to list shapes for instance pool %s, continuing with an empty catalog: %s",
                pool.id,
                e,
            )
            return []
