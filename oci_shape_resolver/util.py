import re

from oci_shape_resolver.constants import BYTES_IN_GIB, OCID_PREFIX


def str_to_bool(param: str) -> bool:
    if not param:
        return False
    if param.strip().lower() == "on":
        return True
    if param.strip().lower()[0] == "t":
        return True
    if param.strip().lower()[0] == "y":
        return True
    return False


def gib_to_bytes(gib: float) -> float:
    return gib * BYTES_IN_GIB


def bytes_to_gib(size_bytes: float) -> float:
    return size_bytes / BYTES_IN_GIB


def is_ocid(value: str, resource_type: str = "") -> bool:
    """ocid1.<resource_type>.<realm>.[region][.future_use].<unique_id>
    https://docs.oracle.com/en-us/iaas/Content/General/Concepts/identifiers.htm
    """
    if not value or not value.startswith(OCID_PREFIX):
        return False
    if resource_type and value.split(".")[1] != resource_type:
        return False
    return bool(re.match(r"^ocid1\.[a-z0-9]+\.[a-z0-9\-]+\.", value))


def split_comma_separated(param: str) -> list[str]:
    return [x.strip() for x in param.split(",") if x.strip()]
