"""
Descriptor validation.

Validation of one request is a chain of checks; the first failing check
stops the chain and its problem is returned.
"""

import logging
from typing import List, Optional, Type

from brickprovisioner.clients import UnityCatalogManager
from brickprovisioner.common import Result, Success, failure
from brickprovisioner.config import MiscConfig, WorkloadTemplatesConfig
from brickprovisioner.models import (
    Component,
    ComponentKind,
    DatabricksDLTWorkloadSpecific,
    DatabricksJobWorkloadSpecific,
    DatabricksOutputPortSpecific,
    DatabricksWorkflowWorkloadSpecific,
    DatabricksWorkspaceInfo,
    Descriptor,
    DescriptorKind,
    OutputPort,
    ProvisioningRequest,
    ProvisionRequest,
    Specific,
    Workload,
    parse_component,
    parse_descriptor,
)

from .workspace_handler import WorkspaceHandler

logger = logging.getLogger(__name__)


def strip_template_version(use_case_template_id: str) -> str:
    """
    Drop the trailing version segment of a use case template id.

    Example:
        >>> strip_template_version("urn:dmb:utm:databricks-workload-job-template:0.0.0")
        'urn:dmb:utm:databricks-workload-job-template'
    """
    parts = use_case_template_id.strip().strip('"').split(":")
    return ":".join(parts[:-1])


def workload_specific_for(
    use_case_template_id: Optional[str], templates: WorkloadTemplatesConfig
) -> Optional[Type[Specific]]:
    """Return the specific type bound to a use case template id, if any."""
    if not use_case_template_id:
        return None
    template = strip_template_version(use_case_template_id)
    if template in templates.job:
        return DatabricksJobWorkloadSpecific
    if template in templates.workflow:
        return DatabricksWorkflowWorkloadSpecific
    if template in templates.dlt:
        return DatabricksDLTWorkloadSpecific
    return None


def validate_workload(component: Component, templates: WorkloadTemplatesConfig) -> Result[None]:
    """
    Check that a component is a workload whose specific section matches its template.

    Returns:
        Success, or Failure naming the first mismatch
    """
    logger.info(f"Checking component {component.name} is of type Workload")
    if not isinstance(component, Workload):
        message = f"The component {component.name} is not of type Workload"
        logger.error(message)
        return failure(message)

    if not component.use_case_template_id:
        message = "useCaseTemplateId is mandatory to detect the workload kind (job or dlt pipeline)"
        logger.error(message)
        return failure(message)

    expected = workload_specific_for(component.use_case_template_id, templates)
    if expected is None:
        message = (
            f"{component.use_case_template_id} (component {component.name}) is not an accepted "
            f"useCaseTemplateId for Databricks jobs or DLT pipelines."
        )
        logger.error(message)
        return failure(message)

    logger.info(f"Checking specific section of component {component.name} is of type {expected.__name__}")
    if not isinstance(component.specific, expected):
        message = f"The specific section of the component {component.name} is not of type {expected.__name__}"
        logger.error(message)
        return failure(message)

    logger.info(f"Validation of Workload {component.name} completed successfully")
    return Success(None)


class OutputPortValidation:
    """Cross-checks an output port against the live table it exposes."""

    def __init__(self, misc_config: MiscConfig, workspace_handler: WorkspaceHandler):
        self.misc_config = misc_config
        self.workspace_handler = workspace_handler

    def validate(self, component: OutputPort[DatabricksOutputPortSpecific], environment: str) -> Result[None]:
        """
        Validate an output port.

        The table must exist in the workspace declared by the output port,
        and every column of the data contract must be a column of the table.
        Column names are compared exactly; types are not compared.

        Args:
            component: Output port to validate
            environment: Environment of the data product

        Returns:
            Success, or Failure describing the first failed check
        """
        specific = component.specific
        table_full_name = specific.table_full_name
        logger.info(f"Checking if the table {table_full_name} provided in Output Port {component.name} exists")

        return (
            self.workspace_handler.get_workspace_info(specific.workspace)
            .and_then(lambda info: self._require_workspace(info, specific.workspace))
            .and_then(lambda info: self.workspace_handler.get_workspace_client(info)
                      .map(lambda client: UnityCatalogManager(client, info)))
            .and_then(lambda manager: self._check_table(manager, component, environment)
                      .and_then(lambda _: self._check_columns(manager, component)))
        )

    @staticmethod
    def _require_workspace(info: Optional[DatabricksWorkspaceInfo], workspace_name: str) -> Result[DatabricksWorkspaceInfo]:
        if info is None:
            message = f"Validation failed. Workspace '{workspace_name}' not found."
            logger.error(message)
            return failure(message)
        return Success(info)

    def _check_table(
        self,
        manager: UnityCatalogManager,
        component: OutputPort[DatabricksOutputPortSpecific],
        environment: str,
    ) -> Result[None]:
        specific = component.specific
        exists = manager.check_table_existence(specific.catalog_name, specific.schema_name, specific.table_name)
        if exists.is_failure():
            return exists
        if exists.value:
            logger.info(f"The table '{specific.table_full_name}', provided in Output Port {component.name}, exists.")
            return Success(None)

        if environment.lower() == self.misc_config.development_environment_name.lower():
            hint = (
                "Be sure that the table exists by either running the DLT Workload that creates it "
                "or creating the table manually."
            )
        else:
            hint = "Be sure that the DLT Workload is being deployed correctly and that the table name is correct."
        message = (
            f"The table '{specific.table_full_name}', provided in Output Port {component.name}, "
            f"does not exist. {hint}"
        )
        logger.error(message)
        return failure(message)

    @staticmethod
    def _check_columns(manager: UnityCatalogManager, component: OutputPort[DatabricksOutputPortSpecific]) -> Result[None]:
        specific = component.specific
        columns = manager.retrieve_table_column_names(specific.catalog_name, specific.schema_name, specific.table_name)
        if columns.is_failure():
            return columns

        table_columns: List[str] = columns.value
        for column in component.data_contract.columns:
            logger.debug(f"Checking column {column.name} of Output Port {component.name}")
            if column.name not in table_columns:
                message = (
                    f"Check for Output Port {component.name}: the column '{column.name}' "
                    f"cannot be found in the table '{specific.table_full_name}'."
                )
                logger.error(message)
                return failure(message)

        logger.info(f"Validation of Output Port {component.name} (id: {component.id}) completed successfully")
        return Success(None)


class ValidationService:
    """Validates provisioning requests into typed provision requests."""

    def __init__(
        self,
        templates: WorkloadTemplatesConfig,
        output_port_validation: OutputPortValidation,
    ):
        self.templates = templates
        self.output_port_validation = output_port_validation

    def validate(self, provisioning_request: ProvisioningRequest) -> Result[ProvisionRequest]:
        """
        Validate a provisioning request.

        Checks, in order: descriptor kind, descriptor parsing, presence of the
        component to provision and of its kind, then the kind-specific
        validation of workloads or output ports.

        Returns:
            Success with the typed ProvisionRequest, or the first Failure
        """
        logger.info("Starting Descriptor validation")
        logger.info("Checking Descriptor Kind equals COMPONENT_DESCRIPTOR")
        if provisioning_request.descriptor_kind != DescriptorKind.COMPONENT_DESCRIPTOR:
            message = (
                f"The descriptorKind field is not valid. Expected: '{DescriptorKind.COMPONENT_DESCRIPTOR.value}', "
                f"Actual: '{provisioning_request.descriptor_kind.value}'"
            )
            logger.error(message)
            return failure(message)

        logger.info("Parsing Descriptor")
        return parse_descriptor(provisioning_request.descriptor).and_then(
            lambda descriptor: self._validate_component(descriptor, provisioning_request.remove_data)
        )

    def _validate_component(self, descriptor: Descriptor, remove_data: bool) -> Result[ProvisionRequest]:
        data_product = descriptor.data_product
        component_id = descriptor.component_id_to_provision

        logger.info(f"Checking component to provision {component_id} is in the descriptor")
        raw_component = data_product.get_component(component_id)
        if raw_component is None:
            message = f"Component with ID {component_id} not found in the Descriptor"
            logger.error(message)
            return failure(message)

        logger.info(f"Getting component kind for component to provision {component_id}")
        kind = data_product.get_component_kind(component_id)
        if kind is None:
            message = f"Component Kind not found for the component with ID {component_id}"
            logger.error(message)
            return failure(message)

        if kind == ComponentKind.WORKLOAD.value:
            logger.info(f"Parsing Workload Component [id {component_id}]")
            component = self._parse_workload(raw_component).and_then(
                lambda workload: validate_workload(workload, self.templates).map(lambda _: workload)
            )
        elif kind == ComponentKind.OUTPUTPORT.value:
            environment = data_product.environment
            component = parse_component(raw_component, OutputPort[DatabricksOutputPortSpecific]).and_then(
                lambda output_port: self.output_port_validation.validate(output_port, environment)
                .map(lambda _: output_port)
            )
        else:
            message = f"The kind '{kind}' of the component to provision is not supported by this Specific Provisioner"
            logger.error(message)
            return failure(message)

        return component.map(lambda parsed: ProvisionRequest(data_product, parsed, remove_data))

    def _parse_workload(self, raw_component: dict) -> Result[Workload]:
        specific_type = workload_specific_for(raw_component.get("useCaseTemplateId"), self.templates)
        if specific_type is None:
            message = (
                f"An error occurred while parsing the component {raw_component.get('name')}. Please try again "
                f"and if the error persists contact the platform team. Details: unsupported use case template id."
            )
            logger.error(message)
            return failure(message)
        return parse_component(raw_component, Workload[specific_type])
