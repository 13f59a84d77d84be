from dataclasses import dataclass
from typing import Protocol

from oci_shape_resolver.constants import (
    INSTANCE_DETAILS_TYPE_COMPUTE,
    INSTANCE_DETAILS_TYPE_INSTANCE_OPTIONS,
)


@dataclass(frozen=True)
class InstancePoolRef:
    id: str
    instance_configuration_id: str


@dataclass(frozen=True)
class ShapeConfigOverride:
    """Flexible shape sizing set in the launch details"""

    ocpus: float | None = None
    memory_in_gbs: float | None = None


@dataclass(frozen=True)
class LaunchDetails:
    shape: str | None = None
    shape_config: ShapeConfigOverride | None = None


# Instance details variants, tagged by "instance_type" as in the OCI API
@dataclass(frozen=True)
class ComputeInstanceDetails:
    launch_details: LaunchDetails | None = None
    instance_type: str = INSTANCE_DETAILS_TYPE_COMPUTE


@dataclass(frozen=True)
class InstanceOptionsDetails:
    instance_type: str = INSTANCE_DETAILS_TYPE_INSTANCE_OPTIONS


@dataclass(frozen=True)
class UnknownInstanceDetails:
    instance_type: str


InstanceDetails = (
    ComputeInstanceDetails | InstanceOptionsDetails | UnknownInstanceDetails
)


@dataclass(frozen=True)
class InstanceLaunchConfig:
    id: str
    compartment_id: str
    instance_details: InstanceDetails | None = None


# One row of ComputeClient.list_shapes
@dataclass(frozen=True)
class ShapeCatalogEntry:
    shape: str
    ocpus: float | None = None
    memory_in_gbs: float | None = None
    gpus: int | None = None


@dataclass(frozen=True)
class Shape:
    """Resource attributes of a pool's shape, used for sizing node templates"""

    name: str
    cpu: float = 0
    gpu: int = 0
    memory_in_bytes: float = 0


class RemoteShapeSource(Protocol):
    """The two remote operations shape resolution needs"""

    def get_instance_configuration(
        self, config_id: str, timeout_s: float | None = None
    ) -> InstanceLaunchConfig: ...

    def list_shapes(
        self, compartment_id: str, timeout_s: float | None = None
    ) -> list[ShapeCatalogEntry]: ...
