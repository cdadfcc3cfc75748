"""Remote clients: Azure Resource Manager, Microsoft Graph and Databricks."""

from .azure_rest import AzureApiError, AzureRestClient, obtain_service_principal_token
from .databricks_clients import create_account_client, create_workspace_client
from .graph_client import GraphClient
from .permissions_manager import NO_PERMISSIONS, AzurePermissionsManager
from .unity_catalog import UnityCatalogManager
from .workspace_manager import AzureWorkspaceManager, workspace_resource_id

__all__ = [
    "NO_PERMISSIONS",
    "AzureApiError",
    "AzurePermissionsManager",
    "AzureRestClient",
    "AzureWorkspaceManager",
    "GraphClient",
    "UnityCatalogManager",
    "create_account_client",
    "create_workspace_client",
    "obtain_service_principal_token",
    "workspace_resource_id",
]
