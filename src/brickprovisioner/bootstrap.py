"""
Assembly of the provisioning services from configuration.

Usage:
    from brickprovisioner.bootstrap import build_update_acl_service
    from brickprovisioner.config import load_config

    service = build_update_acl_service(load_config("provisioner.yaml")).unwrap()
    status = service.update_acl(request)
"""

import logging

from brickprovisioner.clients import AzurePermissionsManager, AzureRestClient, AzureWorkspaceManager
from brickprovisioner.common import Result
from brickprovisioner.config import ProvisionerConfig
from brickprovisioner.principals import DatabricksMapper, MapperFactory
from brickprovisioner.service import (
    OutputPortAclHandler,
    OutputPortValidation,
    UpdateAclService,
    ValidationService,
    WorkspaceHandler,
)

logger = logging.getLogger(__name__)


def build_workspace_handler(config: ProvisionerConfig) -> Result[WorkspaceHandler]:
    """Create a WorkspaceHandler using the configured principal mapping provider."""
    resource_manager = AzureRestClient.for_resource_manager(config.azure.auth)
    workspace_manager = AzureWorkspaceManager(
        resource_manager,
        config.azure.permissions.subscription_id,
        config.azure.permissions.resource_group,
        config.azure.auth.tenant_id,
    )
    permissions_manager = AzurePermissionsManager(resource_manager)
    return MapperFactory.create(config).map(
        lambda mapper: WorkspaceHandler(config, workspace_manager, permissions_manager, mapper)
    )


def build_update_acl_service(config: ProvisionerConfig) -> Result[UpdateAclService]:
    """
    Create the update-ACL service and its collaborators.

    Grants in Unity Catalog always use Databricks account names, so the
    output port handler gets a Databricks mapper whatever the provider
    configured for workspace provisioning.
    """

    def assemble(workspace_handler: WorkspaceHandler, account_mapper: DatabricksMapper) -> UpdateAclService:
        validation_service = ValidationService(
            config.use_case_templates.workload,
            OutputPortValidation(config.misc, workspace_handler),
        )
        logger.info("Update ACL service ready")
        return UpdateAclService(
            validation_service,
            workspace_handler,
            OutputPortAclHandler(account_mapper, config.misc),
        )

    return build_workspace_handler(config).and_then(
        lambda handler: MapperFactory.create(config, DatabricksMapper.identifier).map(
            lambda mapper: assemble(handler, mapper)
        )
    )
