import logging

import oci

from oci_shape_resolver.constants import (
    DEFAULT_OCI_CONFIG_FILE,
    DEFAULT_OCI_PROFILE,
    DEFAULT_REMOTE_CALL_TIMEOUT_S,
    OCI_AUTH_CONFIG_FILE,
    OCI_AUTH_INSTANCE_PRINCIPAL,
    OCI_CONNECT_TIMEOUT_S,
)

logger = logging.getLogger(__name__)

logging.getLogger("oci").setLevel(logging.WARNING)

OCI_AUTH: str = OCI_AUTH_CONFIG_FILE
OCI_CONFIG_FILE: str = DEFAULT_OCI_CONFIG_FILE
OCI_PROFILE: str = DEFAULT_OCI_PROFILE
OCI_REGION: str = ""
OCI_TIMEOUT_S: float = DEFAULT_REMOTE_CALL_TIMEOUT_S


def set_auth(
    auth: str = OCI_AUTH_CONFIG_FILE,
    config_file: str = "",
    profile: str = "",
    region: str = "",
    timeout_s: float = DEFAULT_REMOTE_CALL_TIMEOUT_S,
):
    """timeout_s=0 leaves the SDK default timeout in place"""
    global OCI_AUTH, OCI_CONFIG_FILE, OCI_PROFILE, OCI_REGION, OCI_TIMEOUT_S
    OCI_AUTH = auth
    if config_file:
        OCI_CONFIG_FILE = config_file
    if profile:
        OCI_PROFILE = profile
    OCI_REGION = region
    OCI_TIMEOUT_S = timeout_s


def to_http_timeout(timeout_s: float) -> tuple[float, float]:
    """(connect, read) as expected by the SDK's requests based transport"""
    return min(OCI_CONNECT_TIMEOUT_S, timeout_s), timeout_s


def get_client_kwargs(timeout_s: float | None = None) -> dict:
    """timeout_s=None uses the module level timeout"""
    if timeout_s is None:
        timeout_s = OCI_TIMEOUT_S
    kwargs: dict = {"retry_strategy": oci.retry.NoneRetryStrategy()}
    if timeout_s:
        kwargs["timeout"] = to_http_timeout(timeout_s)
    if OCI_AUTH == OCI_AUTH_INSTANCE_PRINCIPAL:
        signer = oci.auth.signers.InstancePrincipalsSecurityTokenSigner()
        kwargs["config"] = {"region": OCI_REGION or signer.region}
        kwargs["signer"] = signer
    else:
        config = oci.config.from_file(
            file_location=OCI_CONFIG_FILE, profile_name=OCI_PROFILE
        )
        if OCI_REGION:
            config["region"] = OCI_REGION
        oci.config.validate_config(config)
        kwargs["config"] = config
    logger.debug(
        "OCI client auth: %s, profile: %s, region: %s, timeout: %s",
        OCI_AUTH,
        OCI_PROFILE if OCI_AUTH == OCI_AUTH_CONFIG_FILE else "-",
        kwargs["config"].get("region"),
        kwargs.get("timeout", "SDK default"),
    )
    return kwargs


def get_compute_client(
    timeout_s: float | None = None,
) -> oci.core.ComputeClient:
    return oci.core.ComputeClient(**get_client_kwargs(timeout_s))


def get_compute_management_client(
    timeout_s: float | None = None,
) -> oci.core.ComputeManagementClient:
    return oci.core.ComputeManagementClient(**get_client_kwargs(timeout_s))
