"""
Azure Databricks workspace lookup and creation through Azure Resource Manager.
"""

import logging
from typing import Any, Dict, Iterator, Optional

import requests

from brickprovisioner.common import Result, Success, failure
from brickprovisioner.models import DatabricksWorkspaceInfo, ProvisioningState, SkuType

from .azure_rest import AzureApiError, AzureRestClient

logger = logging.getLogger(__name__)

WORKSPACES_API_VERSION = "2024-05-01"
APPLIANCE_BEING_CREATED = "ApplianceBeingCreated"


def workspace_resource_id(subscription_id: str, resource_group: str, workspace_name: str) -> str:
    """ARM id of a Databricks workspace."""
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/Microsoft.Databricks/workspaces/{workspace_name}"
    )


def being_created_message(workspace_name: str) -> str:
    return (
        f"The workspace {workspace_name} is currently being created. "
        f"Please wait a few minutes and try again."
    )


class AzureWorkspaceManager:
    """
    Looks up and creates Azure Databricks workspaces.

    Creation is a PUT on the workspace resource: repeating it with the same
    name and parameters converges on the existing workspace instead of
    failing, so concurrent provisioning requests for one workspace are safe.
    """

    def __init__(self, rest: AzureRestClient, subscription_id: str, resource_group: str, tenant_id: str):
        self.rest = rest
        self.subscription_id = subscription_id
        self.resource_group = resource_group
        self.tenant_id = tenant_id

    def _list_workspaces(self) -> Iterator[Dict[str, Any]]:
        path: Optional[str] = f"/subscriptions/{self.subscription_id}/providers/Microsoft.Databricks/workspaces"
        params: Optional[Dict[str, Any]] = {"api-version": WORKSPACES_API_VERSION}
        while path:
            page = self.rest.get_json(path, params=params)
            yield from page.get("value", [])
            # nextLink already carries the query string
            path, params = page.get("nextLink"), None

    def _to_workspace_info(self, workspace: Dict[str, Any]) -> DatabricksWorkspaceInfo:
        properties = workspace.get("properties", {})
        name = workspace["name"]
        resource_id = workspace.get("id") or workspace_resource_id(self.subscription_id, self.resource_group, name)
        state = properties.get("provisioningState")
        return DatabricksWorkspaceInfo(
            name=name,
            id=str(properties.get("workspaceId") or ""),
            databricks_host=properties.get("workspaceUrl") or "",
            azure_resource_id=resource_id,
            azure_resource_url=f"https://portal.azure.com/#@{self.tenant_id}/resource{resource_id}",
            provisioning_state=ProvisioningState(state) if state else None,
        )

    def get_workspace(self, workspace_name: str, managed_resource_group_id: str) -> Result[Optional[DatabricksWorkspaceInfo]]:
        """
        Find a workspace by name and managed resource group.

        Both are compared case-insensitively, as ARM does.

        Args:
            workspace_name: Name of the workspace
            managed_resource_group_id: ARM id of the workspace's managed resource group

        Returns:
            Success(None) if no such workspace exists, Success(info) if it does,
            Failure if the lookup itself failed
        """
        try:
            for workspace in self._list_workspaces():
                managed_rg = workspace.get("properties", {}).get("managedResourceGroupId", "")
                if (workspace.get("name", "").lower() == workspace_name.lower()
                        and managed_rg.lower() == managed_resource_group_id.lower()):
                    return Success(self._to_workspace_info(workspace))
            logger.info(f"Workspace {workspace_name} not found")
            return Success(None)
        except (AzureApiError, requests.RequestException, RuntimeError, KeyError, ValueError) as e:
            error = (
                f"An error occurred getting info of the workspace: {workspace_name}. Please try again "
                f"and if the error persists contact the platform team. Details: {e}"
            )
            logger.error(error)
            return failure(error, e)

    def create_workspace(
        self,
        workspace_name: str,
        region: str,
        resource_group: str,
        managed_resource_group_id: str,
        sku: SkuType,
    ) -> Result[DatabricksWorkspaceInfo]:
        """
        Create a workspace, or converge on it if it already exists.

        Args:
            workspace_name: Name of the workspace
            region: Azure region
            resource_group: Existing resource group hosting the workspace resource
            managed_resource_group_id: ARM id of the managed resource group
            sku: Pricing tier

        Returns:
            Success with the workspace info, or Failure. A workspace still
            being deployed by Azure is reported as a Failure asking to retry.
        """
        path = workspace_resource_id(self.subscription_id, resource_group, workspace_name)
        body = {
            "location": region,
            "sku": {"name": sku.value},
            "properties": {"managedResourceGroupId": managed_resource_group_id},
        }
        try:
            logger.info(f"Creating workspace {workspace_name}")
            workspace = self.rest.put_json(path, body, params={"api-version": WORKSPACES_API_VERSION})
            workspace.setdefault("name", workspace_name)
            info = self._to_workspace_info(workspace)
        except AzureApiError as e:
            if e.code == APPLIANCE_BEING_CREATED:
                error = being_created_message(workspace_name)
                logger.error(error)
                return failure(error, e)
            return self._creation_failure(workspace_name, e)
        except (requests.RequestException, RuntimeError, KeyError, ValueError) as e:
            return self._creation_failure(workspace_name, e)

        if not info.is_available():
            error = being_created_message(workspace_name)
            logger.warning(f"{error} Current state: {info.provisioning_state}")
            return failure(error)
        return Success(info)

    def _creation_failure(self, workspace_name: str, error: Exception) -> Result[DatabricksWorkspaceInfo]:
        message = (
            f"An error occurred creating the workspace: {workspace_name}. Please try again "
            f"and if the error persists contact the platform team. Details: {error}"
        )
        logger.error(message)
        return failure(message, error)
