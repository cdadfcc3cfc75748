"""
Access control of output port views.

The principals allowed to read an output port are given as a list of
references. Updating the ACL revokes SELECT from principals that are no
longer listed and grants read access to every listed principal.
"""

import logging
from typing import List

from databricks.sdk import WorkspaceClient
from databricks.sdk.service.catalog import Privilege

from brickprovisioner.clients import UnityCatalogManager
from brickprovisioner.common import Result, collect
from brickprovisioner.config import MiscConfig
from brickprovisioner.models import (
    DatabricksOutputPortSpecific,
    ProvisioningStatus,
    ProvisionRequest,
    UpdateAclRequest,
    View,
)
from brickprovisioner.principals import Mapper, as_group_reference

logger = logging.getLogger(__name__)

ACL_UPDATED = "Update of Acl completed!"


class OutputPortAclHandler:
    """Applies an update-ACL request to the view exposed by an output port."""

    def __init__(self, mapper: Mapper, misc_config: MiscConfig):
        """
        Initialize the handler.

        Args:
            mapper: Databricks account mapper; its results are the principal
                names used in Unity Catalog grants
            misc_config: Provides the development environment name
        """
        self.mapper = mapper
        self.misc_config = misc_config

    def update_acl(
        self,
        provision_request: ProvisionRequest[DatabricksOutputPortSpecific],
        update_acl_request: UpdateAclRequest,
        workspace_client: WorkspaceClient,
        unity_catalog_manager: UnityCatalogManager,
    ) -> Result[ProvisioningStatus]:
        """
        Align the grants on the output port view with the requested principals.

        In the development environment the data product owner and dev group
        keep their grants even when they are not listed.

        Returns:
            Success with a completed status, or Failure with every problem
            found in the failing step
        """
        specific = provision_request.component.specific
        view = View(
            catalog_name=specific.catalog_name_op,
            schema_name=specific.schema_name_op,
            name=specific.view_name_op,
        )
        logger.info(f"Start updating Access Control List for {view.full_name} on {workspace_client.config.host}")

        mapped_refs = self._map_refs(update_acl_request.refs)
        if mapped_refs.is_failure():
            logger.error("An error occurred while mapping Databricks entities")
            return mapped_refs

        owners = self._map_owners(provision_request)
        if owners.is_failure():
            return owners

        return (
            self._revoke_stale_grants(unity_catalog_manager, view, mapped_refs.value, owners.value, provision_request)
            .and_then(lambda _: self._grant_refs(unity_catalog_manager, view, mapped_refs.value))
            .map(lambda _: ProvisioningStatus.completed(ACL_UPDATED))
        )

    def _map_refs(self, refs: List[str]) -> Result[List[str]]:
        outcomes = self.mapper.map(refs)
        return collect(outcomes[ref] for ref in dict.fromkeys(refs))

    def _map_owners(self, provision_request: ProvisionRequest) -> Result[List[str]]:
        data_product = provision_request.data_product
        owner = data_product.data_product_owner
        dev_group = as_group_reference(data_product.dev_group)
        outcomes = self.mapper.map([owner, dev_group])
        return outcomes[owner].and_then(
            lambda mapped_owner: outcomes[dev_group].map(lambda mapped_group: [mapped_owner, mapped_group])
        )

    def _revoke_stale_grants(
        self,
        manager: UnityCatalogManager,
        view: View,
        mapped_refs: List[str],
        owners: List[str],
        provision_request: ProvisionRequest,
    ) -> Result[None]:
        current = manager.retrieve_permissions(view)
        if current.is_failure():
            return current

        environment = provision_request.data_product.environment
        is_development = environment.lower() == self.misc_config.development_environment_name.lower()

        outcomes = []
        for assignment in current.value:
            principal = assignment.principal
            if is_development and principal in owners:
                logger.info(
                    f"Environment is {environment} and so, privileges of {principal} "
                    f"(Data Product Owner or Development Group) are not removed"
                )
                continue
            if principal in mapped_refs or Privilege.SELECT not in (assignment.privileges or []):
                continue
            logger.info(f"Principal {principal} does not have SELECT permission any longer on {view.full_name}")
            outcomes.append(manager.update_permissions(principal, Privilege.SELECT, False, view))

        result = collect(outcomes)
        if result.is_failure():
            logger.error("An error occurred while removing permissions on Databricks entities")
        return result.map(lambda _: None)

    @staticmethod
    def _grant_refs(manager: UnityCatalogManager, view: View, mapped_refs: List[str]) -> Result[None]:
        outcomes = []
        for principal in mapped_refs:
            logger.info(f"Assigning permissions to Databricks entity: {principal}")
            outcomes.append(manager.assign_select_to_view(principal, view))
        result = collect(outcomes)
        if result.is_failure():
            logger.error("An error occurred while adding permissions on Databricks entities")
        return result.map(lambda _: None)
