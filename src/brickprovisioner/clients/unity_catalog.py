"""
Unity Catalog metadata and grants for a single workspace.
"""

import logging
from typing import List

from databricks.sdk import WorkspaceClient
from databricks.sdk.service.catalog import PermissionsChange, Privilege, PrivilegeAssignment

from brickprovisioner.common import Result, Success, collect, describe_sdk_error, failure
from brickprovisioner.models import DatabricksWorkspaceInfo, DBObject, View

logger = logging.getLogger(__name__)


class UnityCatalogManager:
    """Table lookups and grant changes bound to one workspace client."""

    def __init__(self, client: WorkspaceClient, workspace_info: DatabricksWorkspaceInfo):
        self.client = client
        self.workspace_info = workspace_info

    def check_table_existence(self, catalog_name: str, schema_name: str, table_name: str) -> Result[bool]:
        """Check whether a table (or view) exists."""
        full_name = f"{catalog_name}.{schema_name}.{table_name}"
        try:
            response = self.client.tables.exists(full_name=full_name)
            return Success(bool(response.table_exists))
        except Exception as e:
            message = (
                f"An error occurred while checking the existence of the table '{full_name}' "
                f"in workspace {self.workspace_info.name}. Details: {describe_sdk_error(e)}"
            )
            logger.error(message)
            return failure(message, e)

    def retrieve_table_column_names(self, catalog_name: str, schema_name: str, table_name: str) -> Result[List[str]]:
        """List the column names of a table, in table order."""
        full_name = f"{catalog_name}.{schema_name}.{table_name}"
        try:
            table = self.client.tables.get(full_name=full_name)
            return Success([column.name for column in table.columns or []])
        except Exception as e:
            message = (
                f"An error occurred while retrieving the columns of the table '{full_name}' "
                f"in workspace {self.workspace_info.name}. Details: {describe_sdk_error(e)}"
            )
            logger.error(message)
            return failure(message, e)

    def retrieve_permissions(self, db_object: DBObject) -> Result[List[PrivilegeAssignment]]:
        """Return the current grants on a securable."""
        try:
            grants = self.client.grants.get(
                securable_type=db_object.securable_type.value,
                full_name=db_object.full_name,
            )
            return Success(list(grants.privilege_assignments or []))
        except Exception as e:
            message = (
                f"An error occurred while retrieving the permissions of '{db_object.full_name}' "
                f"in workspace {self.workspace_info.name}. Details: {describe_sdk_error(e)}"
            )
            logger.error(message)
            return failure(message, e)

    def update_permissions(
        self,
        principal: str,
        privilege: Privilege,
        add: bool,
        db_object: DBObject,
    ) -> Result[None]:
        """
        Grant or revoke one privilege on a securable.

        Args:
            principal: User name, group display name or application id
            privilege: Privilege to change
            add: True to grant, False to revoke
            db_object: Securable to act on

        Returns:
            Success, or Failure describing the SDK error
        """
        change = (
            PermissionsChange(principal=principal, add=[privilege])
            if add
            else PermissionsChange(principal=principal, remove=[privilege])
        )
        action = "Granting" if add else "Revoking"
        logger.info(f"{action} {privilege.value} on {db_object.full_name} for {principal}")
        try:
            self.client.grants.update(
                securable_type=db_object.securable_type.value,
                full_name=db_object.full_name,
                changes=[change],
            )
            return Success(None)
        except Exception as e:
            verb = "granting" if add else "revoking"
            message = (
                f"An error occurred while {verb} {privilege.value} on '{db_object.full_name}' "
                f"for {principal}. Details: {describe_sdk_error(e)}"
            )
            logger.error(message)
            return failure(message, e)

    def assign_select_to_view(self, principal: str, view: View) -> Result[None]:
        """
        Give a principal read access to a view.

        Grants USE_CATALOG on the catalog, USE_SCHEMA on the schema and SELECT
        on the view. All three grants are attempted; problems are collected.
        """
        outcomes = [
            self.update_permissions(principal, Privilege.USE_CATALOG, True, view.parent_catalog),
            self.update_permissions(principal, Privilege.USE_SCHEMA, True, view.parent_schema),
            self.update_permissions(principal, Privilege.SELECT, True, view),
        ]
        return collect(outcomes).map(lambda _: None)
