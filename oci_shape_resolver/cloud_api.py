import logging

from oci_shape_resolver.cloud_impl import oci_client
from oci_shape_resolver.cloud_impl.cloud_structs import (  # noqa: F401
    InstancePoolRef,
    RemoteShapeSource,
)
from oci_shape_resolver.cloud_impl.oci_shapes import (
    OciShapeSource,
    get_instance_pool_ref,
)
from oci_shape_resolver.config import ResolverConfig
from oci_shape_resolver.errors import RemoteLookupError

logger = logging.getLogger(__name__)


def get_oci_shape_source(config: ResolverConfig) -> OciShapeSource:
    oci_client.set_auth(
        auth=config.oci.auth,
        config_file=config.oci.config_file,
        profile=config.oci.profile,
        region=config.oci.region,
        timeout_s=config.resolver.timeout_s,
    )
    return OciShapeSource()


def get_instance_pool_refs(
    pool_ids: list[str],
) -> tuple[list[InstancePoolRef], list[str]]:
    """Returns found pools plus IDs of the ones that could not be fetched"""
    client = oci_client.get_compute_management_client()
    refs: list[InstancePoolRef] = []
    failed: list[str] = []
    for pool_id in pool_ids:
        try:
            refs.append(get_instance_pool_ref(pool_id, client))
        except RemoteLookupError as e:
            logger.error("Skipping instance pool %s: %s", pool_id, e)
            failed.append(pool_id)
    return refs, failed
