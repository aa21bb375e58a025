"""Read-only checks against a real AWS account.

Credentials come from the environment or .env, as for the CLI. Run with:

    uv run pytest tests/ -m integration --run-integration
"""

import pytest

from clusterlaunch.config import load_settings
from clusterlaunch.provisioner import ClusterClient


@pytest.fixture(scope="module")
def cluster():
    return ClusterClient.from_settings(load_settings())


@pytest.mark.integration
def test_credentials_are_valid(cluster):
    identity = cluster.validate_auth()
    assert identity.get("Account")


@pytest.mark.integration
def test_region_has_availability_zones(cluster):
    zones = cluster.list_availability_zones()
    assert zones
    assert all(zone["region"] == cluster.region for zone in zones)


@pytest.mark.integration
def test_unknown_group_has_no_instances(cluster):
    assert cluster.list_instances("clusterlaunch-no-such-group-0000") == []
