"""
Principal mapping against the Databricks account.

Databricks resolves ``displayName eq`` filters case-insensitively, while
group names are case-sensitive everywhere else in the platform: "Team-A"
and "team-a" are two distinct groups. Group references are therefore
resolved to the exact display name stored in the account, and every later
call (grants, ownership) must use that casing.
"""

import logging
from typing import List

from databricks.sdk import AccountClient

from brickprovisioner.clients import create_account_client
from brickprovisioner.common import Result, Success, failure
from brickprovisioner.config import ProvisionerConfig

from .mapper import Mapper, register_mapper, user_reference_to_mail

logger = logging.getLogger(__name__)


def _scim_literal(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class DatabricksMapper(Mapper):
    """Resolves users into account user names and groups into stored display names."""

    identifier = "databricks"

    def __init__(self, account_client: AccountClient):
        self.account_client = account_client

    def map_user(self, user_id: str) -> Result[str]:
        # The mail address is the account user name
        return Success(user_reference_to_mail(user_id))

    def map_group(self, group_name: str) -> Result[str]:
        """
        Find the account group matching ``group_name`` ignoring case.

        Returns:
            Success with the stored display name when exactly one group
            matches; Failure when none or several do
        """
        scim_filter = f'displayName eq "{_scim_literal(group_name)}"'
        logger.debug(f"Listing account groups with filter {scim_filter}")
        groups = self.account_client.groups.list(filter=scim_filter, attributes="id,displayName")
        matches: List[str] = [
            group.display_name
            for group in groups
            if group.display_name and group.display_name.lower() == group_name.lower()
        ]

        if not matches:
            message = f"Group '{group_name}' not found at Databricks account level."
            logger.warning(message)
            return failure(message)
        if len(matches) > 1:
            message = (
                f"More than one group with name '{group_name}' found at Databricks account level: "
                f"{', '.join(matches)}. Group names must be unique ignoring case."
            )
            logger.warning(message)
            return failure(message)

        if matches[0] != group_name:
            logger.info(f"Group '{group_name}' resolved to '{matches[0]}'")
        return Success(matches[0])


@register_mapper(DatabricksMapper.identifier)
def build_databricks_mapper(config: ProvisionerConfig) -> DatabricksMapper:
    return DatabricksMapper(create_account_client(config.databricks.auth, config.azure.auth))
