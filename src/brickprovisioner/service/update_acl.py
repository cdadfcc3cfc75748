"""
Update-ACL use case.

Re-validates the descriptor received with the request, resolves the
workspace hosting the output port and delegates the grant changes to the
output port ACL handler. Execution failures become a FAILED status;
requests of the wrong shape raise ValidationException.
"""

import logging

from brickprovisioner.clients import UnityCatalogManager
from brickprovisioner.common import FailedOperation, Problem, ValidationException
from brickprovisioner.models import (
    ComponentKind,
    DatabricksOutputPortSpecific,
    DescriptorKind,
    ProvisioningRequest,
    ProvisioningStatus,
    UpdateAclRequest,
)

from .outputport_acl import OutputPortAclHandler
from .validation import ValidationService
from .workspace_handler import WorkspaceHandler

logger = logging.getLogger(__name__)

WORKSPACE_INFO_FAILED = "Update Acl failed while getting workspace info"
WORKSPACE_CLIENT_FAILED = "Update Acl failed while getting workspace client"
ASSIGN_PERMISSIONS_FAILED = "Update Acl failed while assigning permissions"


class UpdateAclService:
    """Orchestrates ACL updates of provisioned components."""

    def __init__(
        self,
        validation_service: ValidationService,
        workspace_handler: WorkspaceHandler,
        output_port_handler: OutputPortAclHandler,
    ):
        self.validation_service = validation_service
        self.workspace_handler = workspace_handler
        self.output_port_handler = output_port_handler

    def update_acl(self, update_acl_request: UpdateAclRequest) -> ProvisioningStatus:
        """
        Update the ACL of the component described by the request.

        Args:
            update_acl_request: Principal references plus the original provisioning request

        Returns:
            The handler's status on success, or a FAILED status naming the failed step

        Raises:
            ValidationException: If the descriptor is invalid or the component
                kind does not support ACL updates
        """
        provisioning_request = ProvisioningRequest(
            descriptor_kind=DescriptorKind.COMPONENT_DESCRIPTOR,
            descriptor=update_acl_request.provision_info.request,
            remove_data=False,
        )
        validation = self.validation_service.validate(provisioning_request)
        if validation.is_failure():
            raise ValidationException(validation.error)
        provision_request = validation.value

        component = provision_request.component
        if component.kind != ComponentKind.OUTPUTPORT.value or not isinstance(
            component.specific, DatabricksOutputPortSpecific
        ):
            message = f"The kind '{component.kind}' of the component is not supported by this Specific Provisioner"
            logger.error(message)
            raise ValidationException(FailedOperation.of(Problem(message)))

        workspace_name = component.specific.workspace_op
        workspace_info = self.workspace_handler.get_workspace_info(workspace_name)
        if workspace_info.is_failure() or workspace_info.value is None:
            logger.error(f"Unable to retrieve info of workspace '{workspace_name}'")
            return ProvisioningStatus.failed(WORKSPACE_INFO_FAILED)
        info = workspace_info.value

        workspace_client = self.workspace_handler.get_workspace_client(info)
        if workspace_client.is_failure():
            return ProvisioningStatus.failed(WORKSPACE_CLIENT_FAILED)
        client = workspace_client.value

        updated = self.output_port_handler.update_acl(
            provision_request,
            update_acl_request,
            client,
            UnityCatalogManager(client, info),
        )
        if updated.is_failure():
            for problem in updated.error.problems:
                logger.error(f"Problem: {problem.description}")
            return ProvisioningStatus.failed(ASSIGN_PERMISSIONS_FAILED)
        return updated.value
