import logging
import os.path
from dataclasses import field
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError, model_validator
from typing_extensions import Self

from oci_shape_resolver.constants import (
    CATALOG_ERROR_POLICIES,
    DEFAULT_CATALOG_ERROR_POLICY,
    DEFAULT_OCI_CONFIG_FILE,
    DEFAULT_OCI_PROFILE,
    DEFAULT_REMOTE_CALL_TIMEOUT_S,
    OCI_AUTH_CONFIG_FILE,
    OCI_AUTH_METHODS,
    OCID_TYPE_INSTANCE_POOL,
)
from oci_shape_resolver.util import is_ocid

logger = logging.getLogger(__name__)


class SectionOci(BaseModel):
    auth: str = OCI_AUTH_CONFIG_FILE  # config_file | instance_principal
    config_file: str = DEFAULT_OCI_CONFIG_FILE
    profile: str = DEFAULT_OCI_PROFILE
    region: str = ""  # Overrides the profile region if set


class SectionResolver(BaseModel):
    catalog_error_policy: str = (
        DEFAULT_CATALOG_ERROR_POLICY  # empty | raise
    )
    timeout_s: float = DEFAULT_REMOTE_CALL_TIMEOUT_S  # 0 = SDK default


class ResolverConfig(BaseModel):
    oci: SectionOci = field(default_factory=SectionOci)
    resolver: SectionResolver = field(default_factory=SectionResolver)
    instance_pools: list[str] = field(default_factory=list)

    def fill_in_defaults(self):
        if "~" in self.oci.config_file:
            self.oci.config_file = os.path.expanduser(self.oci.config_file)

    @model_validator(mode="after")
    def check_valid_auth(self) -> Self:
        if self.oci.auth not in OCI_AUTH_METHODS:
            raise ValueError(
                f"Invalid oci.auth. Expected: {' | '.join(OCI_AUTH_METHODS)}"
            )
        return self

    @model_validator(mode="after")
    def check_valid_catalog_error_policy(self) -> Self:
        if self.resolver.catalog_error_policy not in CATALOG_ERROR_POLICIES:
            raise ValueError(
                "Invalid resolver.catalog_error_policy. Expected: "
                + " | ".join(CATALOG_ERROR_POLICIES)
            )
        return self

    @model_validator(mode="after")
    def check_valid_timeout(self) -> Self:
        if self.resolver.timeout_s < 0:
            raise ValueError("resolver.timeout_s can't be negative")
        return self

    @model_validator(mode="after")
    def check_valid_instance_pool_ids(self) -> Self:
        for pool_id in self.instance_pools:
            if not is_ocid(pool_id, OCID_TYPE_INSTANCE_POOL):
                raise ValueError(
                    f"Invalid instance pool ID: {pool_id}. Expected: ocid1.{OCID_TYPE_INSTANCE_POOL}.*"
                )
        return self


def load_config_from_string(config_yaml_str: Any) -> ResolverConfig:
    c = yaml.safe_load(config_yaml_str) or {}
    return ResolverConfig(**c)


def try_load_config_from_string(
    config_yaml_str: Any,
) -> ResolverConfig | None:
    try:
        return load_config_from_string(config_yaml_str)
    except ValidationError as e:
        logger.error("Failed to load config from string: %s", config_yaml_str)
        logger.error(str(e))
    except Exception:
        logger.exception("Failed to parse config YAML")
    return None


def try_load_config_from_file(config_path: str) -> ResolverConfig | None:
    config_path = os.path.expanduser(config_path)
    if not os.path.exists(config_path):
        logger.error("Config file not found at: %s", config_path)
        return None
    with open(config_path, "r") as f:
        return try_load_config_from_string(f.read())
