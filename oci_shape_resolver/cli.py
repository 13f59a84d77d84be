import json
import logging
import os.path
from dataclasses import asdict

import humanize
from prettytable import PrettyTable
from tap import Tap

from oci_shape_resolver import cloud_api
from oci_shape_resolver.cloud_impl.cloud_structs import Shape
from oci_shape_resolver.config import (
    ResolverConfig,
    try_load_config_from_file,
)
from oci_shape_resolver.constants import (
    CATALOG_ERROR_POLICIES,
    OCI_AUTH_INSTANCE_PRINCIPAL,
)
from oci_shape_resolver.errors import ShapeResolutionError
from oci_shape_resolver.shape_resolver import ShapeResolver
from oci_shape_resolver.util import (
    bytes_to_gib,
    split_comma_separated,
    str_to_bool,
)

logger = logging.getLogger(__name__)


class ArgumentParser(Tap):
    config_path: str = os.getenv(
        "OSR_CONFIG_PATH", ""
    )  # YAML config, CLI params below override it
    instance_pools: str = os.getenv(
        "OSR_INSTANCE_POOLS", ""
    )  # Comma separated instance pool OCIDs
    profile: str = os.getenv("OSR_PROFILE", "")  # ~/.oci/config profile
    oci_config_file: str = os.getenv("OSR_OCI_CONFIG_FILE", "")
    region: str = os.getenv("OSR_REGION", "")
    instance_principal: bool = str_to_bool(
        os.getenv("OSR_INSTANCE_PRINCIPAL", "false")
    )  # Use instance principal auth instead of the config file
    catalog_error_policy: str = os.getenv(
        "OSR_CATALOG_ERROR_POLICY", ""
    )  # empty | raise
    timeout_s: float = float(
        os.getenv("OSR_TIMEOUT_S", "0")
    )  # Per remote call
    output_json: bool = str_to_bool(os.getenv("OSR_OUTPUT_JSON", "false"))
    verbose: bool = str_to_bool(os.getenv("OSR_VERBOSE", "false"))


def validate_and_parse_args() -> ArgumentParser:
    args = ArgumentParser(
        prog="oci-shape-resolver",
        description="Resolves OCI instance pool shapes to CPU / GPU / memory",
        underscores_to_dashes=True,
    ).parse_args()

    if (
        args.catalog_error_policy
        and args.catalog_error_policy not in CATALOG_ERROR_POLICIES
    ):
        args.error(
            f"--catalog-error-policy expected: {' | '.join(CATALOG_ERROR_POLICIES)}"
        )
    if args.timeout_s < 0:
        args.error("--timeout-s can't be negative")

    return args


def compile_config_from_cmdline_params(
    args: ArgumentParser, config: ResolverConfig | None = None
) -> ResolverConfig:
    """Explicitly set CLI params win over the config file"""
    c = config.model_copy(deep=True) if config else ResolverConfig()
    if args.instance_pools:
        c.instance_pools = split_comma_separated(args.instance_pools)
    if args.profile:
        c.oci.profile = args.profile
    if args.oci_config_file:
        c.oci.config_file = args.oci_config_file
    if args.region:
        c.oci.region = args.region
    if args.instance_principal:
        c.oci.auth = OCI_AUTH_INSTANCE_PRINCIPAL
    if args.catalog_error_policy:
        c.resolver.catalog_error_policy = args.catalog_error_policy
    if args.timeout_s:
        c.resolver.timeout_s = args.timeout_s
    # Re-run validators on the merged result
    return ResolverConfig(**c.model_dump())


def shapes_to_table(shapes: dict[str, Shape]) -> PrettyTable:
    tab = PrettyTable(["Instance pool", "Shape", "CPU", "GPU", "Memory"])
    for pool_id, shape in shapes.items():
        tab.add_row(
            [
                pool_id,
                shape.name,
                shape.cpu,
                shape.gpu,
                humanize.naturalsize(shape.memory_in_bytes, binary=True),
            ]
        )
    return tab


def shapes_to_json(shapes: dict[str, Shape]) -> str:
    return json.dumps(
        {
            pool_id: {
                **asdict(shape),
                "memory_in_gib": bytes_to_gib(shape.memory_in_bytes),
            }
            for pool_id, shape in shapes.items()
        },
        indent=2,
    )


def resolve_pools(
    resolver: ShapeResolver, config: ResolverConfig
) -> tuple[dict[str, Shape], list[str]]:
    pool_refs, failed = cloud_api.get_instance_pool_refs(
        config.instance_pools
    )
    shapes: dict[str, Shape] = {}
    for pool in pool_refs:
        try:
            shapes[pool.id] = resolver.resolve(
                pool, timeout_s=config.resolver.timeout_s or None
            )
        except ShapeResolutionError as e:
            logger.error("Skipping instance pool %s: %s", pool.id, e)
            failed.append(pool.id)
    return shapes, failed


def main():  # pragma: no cover
    args = validate_and_parse_args()

    logging.basicConfig(
        format=(
            "%(asctime)s %(levelname)s %(threadName)s %(filename)s:%(lineno)d %(message)s"
            if args.verbose
            else "%(asctime)s %(levelname)s %(message)s"
        ),
        level=(logging.DEBUG if args.verbose else logging.INFO),
    )

    file_config: ResolverConfig | None = None
    if args.config_path:
        file_config = try_load_config_from_file(args.config_path)
        if not file_config:
            exit(1)

    try:
        config = compile_config_from_cmdline_params(args, file_config)
    except ValueError as e:
        logger.error("Invalid config: %s", e)
        exit(1)
    config.fill_in_defaults()

    if not config.instance_pools:
        logger.error("No instance pools to resolve, see --instance-pools")
        exit(1)

    logger.debug("Config: %s", config.model_dump())

    resolver = ShapeResolver(
        cloud_api.get_oci_shape_source(config),
        catalog_error_policy=config.resolver.catalog_error_policy,
    )
    shapes, failed = resolve_pools(resolver, config)

    if args.output_json:
        print(shapes_to_json(shapes))
    elif shapes:
        print(shapes_to_table(shapes))

    if failed:
        logger.error("Failed to resolve %s instance pool(s)", len(failed))
    exit(1 if failed else 0)
