"""
Shared pytest fixtures for provisioner tests.

Provides configuration, mocked remote clients and environment management.
"""

import os
from typing import Generator
from unittest.mock import MagicMock, create_autospec

import pytest
from databricks.sdk import AccountClient, WorkspaceClient

from brickprovisioner.clients import AzurePermissionsManager, AzureRestClient, AzureWorkspaceManager, GraphClient
from brickprovisioner.config import ProvisionerConfig
from brickprovisioner.principals import Mapper
from tests.fixtures import make_config


@pytest.fixture
def config() -> ProvisionerConfig:
    """Provisioner configuration with premium SKU and both roles configured."""
    return make_config()


@pytest.fixture
def mock_rest_client() -> MagicMock:
    """AzureRestClient double that never reaches Azure."""
    return create_autospec(AzureRestClient, instance=True)


@pytest.fixture
def mock_graph_client() -> MagicMock:
    return create_autospec(GraphClient, instance=True)


@pytest.fixture
def mock_workspace_manager() -> MagicMock:
    return create_autospec(AzureWorkspaceManager, instance=True)


@pytest.fixture
def mock_permissions_manager() -> MagicMock:
    return create_autospec(AzurePermissionsManager, instance=True)


@pytest.fixture
def mock_mapper() -> MagicMock:
    """
    Mapper double.

    ``map`` is left for each test to configure, since results depend on the
    references the code under test asks for.
    """
    return create_autospec(Mapper, instance=True)


@pytest.fixture
def mock_workspace_client() -> MagicMock:
    """WorkspaceClient double with a configured host."""
    client = MagicMock(spec=WorkspaceClient)
    client.config = MagicMock()
    client.config.host = "https://adb-1234567890.12.azuredatabricks.net"
    client.tables = MagicMock()
    client.grants = MagicMock()
    return client


@pytest.fixture
def mock_account_client() -> MagicMock:
    client = MagicMock(spec=AccountClient)
    client.groups = MagicMock()
    return client


@pytest.fixture
def provisioner_secret_env() -> Generator[str, None, None]:
    """
    Fixture that sets AZURE_CLIENT_SECRET for the test duration.

    Restores the original value after the test completes.
    """
    original = os.environ.get("AZURE_CLIENT_SECRET")
    os.environ["AZURE_CLIENT_SECRET"] = "secret-from-env"
    yield "secret-from-env"
    if original is not None:
        os.environ["AZURE_CLIENT_SECRET"] = original
    elif "AZURE_CLIENT_SECRET" in os.environ:
        del os.environ["AZURE_CLIENT_SECRET"]
