"""
Factories for Databricks SDK clients authenticated as the Azure service principal.

Each call builds a new, fully configured client for one host; clients are
never re-pointed at another workspace after construction.
"""

import logging

from databricks.sdk import AccountClient, WorkspaceClient

from brickprovisioner.config import AzureAuthConfig, DatabricksAuthConfig

logger = logging.getLogger(__name__)


def _with_scheme(host: str) -> str:
    if not host.startswith("https://"):
        host = f"https://{host}"
    return host


def create_workspace_client(host: str, auth: AzureAuthConfig) -> WorkspaceClient:
    """
    Create a WorkspaceClient for one workspace.

    Args:
        host: Workspace URL, with or without scheme (e.g. "adb-123.4.azuredatabricks.net")
        auth: Azure service principal credentials

    Returns:
        WorkspaceClient authenticated with Azure client secret credentials
    """
    host = _with_scheme(host)
    logger.debug(f"Creating workspace client for {host}")
    return WorkspaceClient(
        host=host,
        azure_client_id=auth.client_id,
        azure_client_secret=auth.client_secret,
        azure_tenant_id=auth.tenant_id,
        auth_type="azure-client-secret",
    )


def create_account_client(databricks: DatabricksAuthConfig, auth: AzureAuthConfig) -> AccountClient:
    """Create an AccountClient for account-level group lookups."""
    host = _with_scheme(databricks.account_host)
    logger.debug(f"Creating account client for {host} (account {databricks.account_id})")
    return AccountClient(
        host=host,
        account_id=databricks.account_id,
        azure_client_id=auth.client_id,
        azure_client_secret=auth.client_secret,
        azure_tenant_id=auth.tenant_id,
        auth_type="azure-client-secret",
    )
