"""Shared fixtures: fake credentials, integration gating and moto."""

import pytest
from helpers import REGION
from moto import mock_aws

from clusterlaunch.types import BasicCredentials


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests against a real AWS account",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-integration"):
        return
    skip = pytest.mark.skip(reason="needs --run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def aws_credentials(request, monkeypatch):
    """Fake AWS credentials so no test can reach a real account by accident."""
    if "integration" in request.keywords:
        return
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def credentials():
    return BasicCredentials(access_key_id="testing", secret_access_key="testing")


@pytest.fixture
def moto_aws():
    with mock_aws():
        yield
