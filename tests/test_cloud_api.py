import os
import subprocess
import sys

import oci
import pytest

from oci_shape_resolver import cloud_api
from oci_shape_resolver.cloud_impl import cloud_structs, oci_client
from oci_shape_resolver.config import load_config_from_string
from oci_shape_resolver.shape_resolver import ShapeResolver
from tests.test_config import TEST_CONFIG
from tests.test_oci_shapes import (
    FIXED_INSTANCE_CONFIGURATION,
    SHAPE_LISTING,
    FakeComputeClient,
    FakeComputeManagementClient,
    service_error,
)


@pytest.fixture(autouse=True)
def restore_oci_auth_globals():
    saved = (
        oci_client.OCI_AUTH,
        oci_client.OCI_CONFIG_FILE,
        oci_client.OCI_PROFILE,
        oci_client.OCI_REGION,
        oci_client.OCI_TIMEOUT_S,
    )
    yield
    (
        oci_client.OCI_AUTH,
        oci_client.OCI_CONFIG_FILE,
        oci_client.OCI_PROFILE,
        oci_client.OCI_REGION,
        oci_client.OCI_TIMEOUT_S,
    ) = saved


def test_get_oci_shape_source_resolves_fixed_shape(monkeypatch):
    mgmt = FakeComputeManagementClient(FIXED_INSTANCE_CONFIGURATION)
    compute = FakeComputeClient(SHAPE_LISTING)
    monkeypatch.setattr(
        oci_client, "get_compute_management_client", lambda: mgmt
    )
    monkeypatch.setattr(oci_client, "get_compute_client", lambda: compute)
    config = load_config_from_string(TEST_CONFIG)

    source = cloud_api.get_oci_shape_source(config)
    assert oci_client.OCI_AUTH == "instance_principal"
    assert oci_client.OCI_REGION == "us-ashburn-1"
    assert oci_client.OCI_TIMEOUT_S == 10

    pool_refs, failed = cloud_api.get_instance_pool_refs(
        config.instance_pools
    )
    assert not failed
    shape = ShapeResolver(source).resolve(pool_refs[0])
    assert shape.name == "VM.Standard2.1"
    assert shape.memory_in_bytes == 15 * 1024**3


def test_get_instance_pool_refs_reports_failed(monkeypatch):
    mgmt = FakeComputeManagementClient(error=service_error())
    monkeypatch.setattr(
        oci_client, "get_compute_management_client", lambda: mgmt
    )
    pool_refs, failed = cloud_api.get_instance_pool_refs(
        ["ocid1.instancepool.oc1.iad.aaaaaaaa1"]
    )
    assert pool_refs == []
    assert failed == ["ocid1.instancepool.oc1.iad.aaaaaaaa1"]


def test_to_http_timeout():
    assert oci_client.to_http_timeout(60) == (10, 60)
    assert oci_client.to_http_timeout(3) == (3, 3)


def stub_oci_config_file(monkeypatch):
    monkeypatch.setattr(
        oci.config,
        "from_file",
        lambda file_location, profile_name: {"region": "eu-frankfurt-1"},
    )
    monkeypatch.setattr(oci.config, "validate_config", lambda config: None)


def test_zero_timeout_leaves_sdk_default(monkeypatch):
    stub_oci_config_file(monkeypatch)
    oci_client.set_auth(timeout_s=0)
    kwargs = oci_client.get_client_kwargs()
    assert "timeout" not in kwargs
    assert kwargs["config"]["region"] == "eu-frankfurt-1"


def test_client_kwargs_timeout(monkeypatch):
    stub_oci_config_file(monkeypatch)
    oci_client.set_auth()
    assert oci_client.get_client_kwargs()["timeout"] == (10, 30)
    assert oci_client.get_client_kwargs(5)["timeout"] == (5, 5)


def test_shape_source_protocol_reexported():
    assert cloud_api.RemoteShapeSource is cloud_structs.RemoteShapeSource


def test_shape_resolver_import_does_not_load_sdk():
    code = (
        "import sys\n"
        "import oci_shape_resolver.shape_resolver\n"
        "assert 'oci' not in sys.modules, 'oci'\n"
        "assert 'pydantic' not in sys.modules, 'pydantic'\n"
    )
    proc = subprocess.run(
        [sys.executable, "-c", code],
        capture_output=True,
        text=True,
        cwd=os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    )
    assert proc.returncode == 0, proc.stderr
