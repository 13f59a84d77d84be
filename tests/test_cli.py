import json

from oci_shape_resolver.cli import (
    ArgumentParser,
    compile_config_from_cmdline_params,
    resolve_pools,
    shapes_to_json,
    shapes_to_table,
)
from oci_shape_resolver.cloud_impl.cloud_structs import InstancePoolRef, Shape
from oci_shape_resolver.config import load_config_from_string
from oci_shape_resolver.shape_resolver import ShapeResolver
from tests.test_config import TEST_CONFIG
from tests.test_shape_resolver import (
    FakeShapeSource,
    fixed_config,
)

POOL_ID_1 = "ocid1.instancepool.oc1.iad.aaaaaaaa1"
POOL_ID_2 = "ocid1.instancepool.oc1.iad.aaaaaaaa2"

SHAPES = {
    POOL_ID_1: Shape(
        name="VM.Standard2.1", cpu=1, gpu=0, memory_in_bytes=15 * 1024**3
    ),
}


def test_compile_config_from_cmdline_params():
    args = ArgumentParser(underscores_to_dashes=True).parse_args(
        [
            "--instance-pools",
            f"{POOL_ID_1}, {POOL_ID_2}",
            "--profile",
            "dev",
            "--catalog-error-policy",
            "raise",
        ]
    )
    c = compile_config_from_cmdline_params(args)
    assert c.instance_pools == [POOL_ID_1, POOL_ID_2]
    assert c.oci.profile == "dev"
    assert c.resolver.catalog_error_policy == "raise"


def test_compile_config_cmdline_params_override_file():
    file_config = load_config_from_string(TEST_CONFIG)
    args = ArgumentParser(underscores_to_dashes=True).parse_args(
        ["--timeout-s", "3"]
    )
    c = compile_config_from_cmdline_params(args, file_config)
    assert c.resolver.timeout_s == 3
    assert c.oci.region == "us-ashburn-1"
    assert len(c.instance_pools) == 2
    assert file_config.resolver.timeout_s == 10


def test_shapes_to_table():
    tab = shapes_to_table(SHAPES)
    out = str(tab)
    assert "VM.Standard2.1" in out
    assert "15.0 GiB" in out


def test_shapes_to_json():
    d = json.loads(shapes_to_json(SHAPES))
    assert d[POOL_ID_1]["name"] == "VM.Standard2.1"
    assert d[POOL_ID_1]["memory_in_bytes"] == 15 * 1024**3
    assert d[POOL_ID_1]["memory_in_gib"] == 15


def test_documented_cli_flags_parse():
    args = ArgumentParser(underscores_to_dashes=True).parse_args(
        ["--output-json", "--oci-config-file", "/tmp/oci.conf"]
    )
    assert args.output_json
    c = compile_config_from_cmdline_params(args)
    assert c.oci.config_file == "/tmp/oci.conf"


def test_resolve_pools_skips_failed(monkeypatch):
    pools = [
        InstancePoolRef(id=POOL_ID_1, instance_configuration_id="ic1"),
        InstancePoolRef(id=POOL_ID_2, instance_configuration_id="ic2"),
    ]
    monkeypatch.setattr(
        "oci_shape_resolver.cloud_api.get_instance_pool_refs",
        lambda pool_ids: (pools, ["ocid1.instancepool.oc1.iad.gone"]),
    )
    source = FakeShapeSource(fixed_config("VM.Standard2.1"))

    def get_instance_configuration(config_id, timeout_s=None):
        if config_id == "ic2":
            return fixed_config("VM.Unknown.1")
        return fixed_config("VM.Standard2.1")

    source.get_instance_configuration = get_instance_configuration
    config = load_config_from_string(TEST_CONFIG)

    shapes, failed = resolve_pools(ShapeResolver(source), config)
    assert list(shapes) == [POOL_ID_1]
    assert sorted(failed) == sorted(
        [POOL_ID_2, "ocid1.instancepool.oc1.iad.gone"]
    )
