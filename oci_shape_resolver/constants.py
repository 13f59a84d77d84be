# 1 GiB, OCI reports memory in "GB" meaning GiB
BYTES_IN_GIB = 1024 * 1024 * 1024

INSTANCE_DETAILS_TYPE_COMPUTE = "compute"
INSTANCE_DETAILS_TYPE_INSTANCE_OPTIONS = "instance_options"

# What to do when listing the shape catalog fails on the fixed shape path
CATALOG_ERROR_POLICY_EMPTY = (
    "empty"  # Log and continue with an empty catalog, i.e. "shape not found"
)
CATALOG_ERROR_POLICY_RAISE = "raise"
CATALOG_ERROR_POLICIES = (
    CATALOG_ERROR_POLICY_EMPTY,
    CATALOG_ERROR_POLICY_RAISE,
)
DEFAULT_CATALOG_ERROR_POLICY = CATALOG_ERROR_POLICY_EMPTY

OCI_AUTH_CONFIG_FILE = "config_file"
OCI_AUTH_INSTANCE_PRINCIPAL = "instance_principal"
OCI_AUTH_METHODS = (OCI_AUTH_CONFIG_FILE, OCI_AUTH_INSTANCE_PRINCIPAL)

DEFAULT_OCI_CONFIG_FILE = "~/.oci/config"
DEFAULT_OCI_PROFILE = "DEFAULT"

DEFAULT_REMOTE_CALL_TIMEOUT_S = 30
OCI_CONNECT_TIMEOUT_S = 10

OCID_PREFIX = "ocid1."
OCID_TYPE_INSTANCE_POOL = "instancepool"
