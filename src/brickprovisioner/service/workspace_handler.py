"""
Workspace lifecycle: name resolution, lookup, create-or-reuse and baseline permissions.

A workspace moves from ABSENT to CREATING to AVAILABLE. Nothing here polls:
a workspace still being deployed by Azure is reported as a failure asking
the caller to retry, and the next call converges on the same resource.
"""

import logging
import re
import uuid
from typing import Callable, Optional

from databricks.sdk import WorkspaceClient

from brickprovisioner.clients import (
    NO_PERMISSIONS,
    AzurePermissionsManager,
    AzureWorkspaceManager,
    create_workspace_client,
    workspace_resource_id,
)
from brickprovisioner.common import Result, Success, failure
from brickprovisioner.config import AzureAuthConfig, ProvisionerConfig
from brickprovisioner.models import (
    AzurePrincipalType,
    DatabricksDLTWorkloadSpecific,
    DatabricksJobWorkloadSpecific,
    DatabricksOutputPortSpecific,
    DatabricksWorkflowWorkloadSpecific,
    DatabricksWorkspaceInfo,
    ProvisioningState,
    ProvisionRequest,
    SkuType,
)
from brickprovisioner.principals import Mapper, as_group_reference

logger = logging.getLogger(__name__)

WORKSPACE_URL_PATTERN = re.compile(r"(?:https://)?(adb-(\d+)\.\d+\.azuredatabricks\.net)/?")

ACCEPTED_SPECIFICS = (
    DatabricksJobWorkloadSpecific,
    DatabricksDLTWorkloadSpecific,
    DatabricksWorkflowWorkloadSpecific,
    DatabricksOutputPortSpecific,
)

WorkspaceClientFactory = Callable[[str, AzureAuthConfig], WorkspaceClient]


class WorkspaceHandler:
    """
    Stateless facade over the workspace-hosting and authorization APIs.

    Concurrent calls for the same workspace rely on the idempotent ARM
    create and on role assignments treating existing grants as success.
    """

    def __init__(
        self,
        config: ProvisionerConfig,
        workspace_manager: AzureWorkspaceManager,
        permissions_manager: AzurePermissionsManager,
        mapper: Mapper,
        client_factory: WorkspaceClientFactory = create_workspace_client,
    ):
        """
        Initialize the handler.

        Args:
            config: Provisioner configuration
            workspace_manager: ARM workspace lookups and creation
            permissions_manager: ARM role assignments
            mapper: Resolves principal references into Azure object ids
            client_factory: Builds a WorkspaceClient for a workspace host
        """
        self.config = config
        self.workspace_manager = workspace_manager
        self.permissions_manager = permissions_manager
        self.mapper = mapper
        self.client_factory = client_factory

    # =========================================================================
    # NAME AND LOOKUP
    # =========================================================================

    def get_workspace_name(self, provision_request: ProvisionRequest) -> Result[str]:
        """
        Extract the workspace name declared by the component's specific section.

        Returns:
            Success with the name, or Failure for an unknown specific type or
            an empty name
        """
        component = provision_request.component
        specific = component.specific

        match specific:
            case DatabricksJobWorkloadSpecific() | DatabricksDLTWorkloadSpecific() | DatabricksWorkflowWorkloadSpecific():
                workspace_name = specific.workspace
            case DatabricksOutputPortSpecific():
                workspace_name = specific.workspace_op
            case _:
                accepted = ", ".join(cls.__name__ for cls in ACCEPTED_SPECIFICS)
                message = (
                    f"The specific section of the component '{component.id}' is not a valid type. "
                    f"Only the following types are accepted: {accepted}"
                )
                logger.error(message)
                return failure(message)

        if not workspace_name or not workspace_name.strip():
            message = f"The provided specific section of the component '{component.id}' doesn't contain a workspace name"
            logger.error(message)
            return failure(message)
        return Success(workspace_name.strip())

    def managed_resource_group_id(self, workspace_name: str) -> str:
        permissions = self.config.azure.permissions
        return f"/subscriptions/{permissions.subscription_id}/resourceGroups/{workspace_name}-rg"

    def get_workspace_info(self, workspace: str) -> Result[Optional[DatabricksWorkspaceInfo]]:
        """
        Look up a workspace by name, or reference an existing one by URL.

        Args:
            workspace: Workspace name, or the URL of a workspace not managed
                by the provisioner (e.g. "https://adb-1234.5.azuredatabricks.net")

        Returns:
            Success(None) if absent, Success(info) if present, Failure on remote error
        """
        unmanaged = self._unmanaged_workspace_info(workspace)
        if unmanaged is not None:
            return Success(unmanaged)
        return self.workspace_manager.get_workspace(workspace, self.managed_resource_group_id(workspace))

    def get_workspace_info_for_request(self, provision_request: ProvisionRequest) -> Result[Optional[DatabricksWorkspaceInfo]]:
        return self.get_workspace_name(provision_request).and_then(self.get_workspace_info)

    @staticmethod
    def _unmanaged_workspace_info(workspace: str) -> Optional[DatabricksWorkspaceInfo]:
        match = WORKSPACE_URL_PATTERN.fullmatch(workspace.strip())
        if match is None:
            return None
        host = match.group(1)
        logger.info(f"Workspace {host} is referenced by URL and will not be managed")
        return DatabricksWorkspaceInfo(
            name=host,
            id=match.group(2),
            databricks_host=host,
            provisioning_state=ProvisioningState.SUCCEEDED,
            is_managed=False,
        )

    # =========================================================================
    # PROVISIONING
    # =========================================================================

    def select_sku(self) -> SkuType:
        """
        Pick the pricing tier from configuration.

        Only "trial" (any casing) selects the trial tier; every other value,
        including "standard", results in premium.
        """
        configured = self.config.azure.auth.sku_type
        if configured.lower() == SkuType.TRIAL.value:
            return SkuType.TRIAL
        if configured.lower() != SkuType.PREMIUM.value:
            logger.warning(f"SKU type '{configured}' is not recognized, using {SkuType.PREMIUM.value}")
        return SkuType.PREMIUM

    def provision_workspace(self, provision_request: ProvisionRequest) -> Result[DatabricksWorkspaceInfo]:
        """
        Make the component's workspace available and grant baseline roles.

        Steps, each short-circuiting on failure:
        1. resolve the workspace name
        2. create the workspace, or reuse it if it already exists
        3. grant the owner role to the data product owner and the
           developer role to the data product dev group

        Workspaces referenced by URL are returned as they are.

        Returns:
            Success with the workspace info, or the first Failure encountered
        """
        return (
            self.get_workspace_name(provision_request)
            .and_then(self._create_or_reuse)
            .and_then(lambda info: self._assign_baseline_permissions(provision_request, info).map(lambda _: info))
        )

    def _create_or_reuse(self, workspace_name: str) -> Result[DatabricksWorkspaceInfo]:
        unmanaged = self._unmanaged_workspace_info(workspace_name)
        if unmanaged is not None:
            return Success(unmanaged)

        result = self.workspace_manager.create_workspace(
            workspace_name,
            self.config.azure.auth.region,
            self.config.azure.permissions.resource_group,
            self.managed_resource_group_id(workspace_name),
            self.select_sku(),
        )
        if result.is_success():
            logger.info(f"Workspace available at: {result.value.databricks_host}")
        return result

    def _assign_baseline_permissions(
        self, provision_request: ProvisionRequest, info: DatabricksWorkspaceInfo
    ) -> Result[None]:
        if not info.is_managed:
            return Success(None)

        permissions = self.config.azure.permissions
        data_product = provision_request.data_product
        resource_id = workspace_resource_id(permissions.subscription_id, permissions.resource_group, info.name)
        logger.info(f"Assigning Azure permissions to {info.name}")

        return self._assign_role(
            resource_id,
            data_product.data_product_owner,
            permissions.dp_owner_role_definition_id,
            AzurePrincipalType.USER,
        ).and_then(lambda _: self._assign_role(
            resource_id,
            as_group_reference(data_product.dev_group),
            permissions.dev_group_role_definition_id,
            AzurePrincipalType.GROUP,
        ))

    def _assign_role(
        self,
        resource_id: str,
        reference: str,
        role_definition_id: Optional[str],
        principal_type: AzurePrincipalType,
    ) -> Result[None]:
        if role_definition_id is None:
            logger.info(f"No role configured for {principal_type.value} principals, skipping {reference}")
            return Success(None)

        mapped = self.mapper.map([reference])[reference]
        if mapped.is_failure():
            message = f"Failed to get AzureID of: {reference}. Details: {mapped.error}"
            logger.error(message)
            return failure(message)

        if role_definition_id.lower() == NO_PERMISSIONS:
            return self.permissions_manager.remove_permissions(resource_id, mapped.value)

        return self.permissions_manager.assign_permissions(
            resource_id,
            str(uuid.uuid4()),
            role_definition_id,
            mapped.value,
            principal_type,
        )

    # =========================================================================
    # CLIENTS
    # =========================================================================

    def get_workspace_client(self, info: DatabricksWorkspaceInfo) -> Result[WorkspaceClient]:
        """Build a client bound to the workspace host."""
        try:
            return Success(self.client_factory(info.databricks_host, self.config.azure.auth))
        except Exception as e:
            message = (
                f"An error occurred while getting Databricks workspaceClient for workspace {info.name}. "
                f"Please try again and if the error persists contact the platform team. Details: {e}"
            )
            logger.error(message)
            return failure(message, e)
