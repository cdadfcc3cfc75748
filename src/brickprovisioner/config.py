"""
Provisioner configuration.

Configuration is declared in a YAML file and validated into pydantic models.
Values of the form ``${VAR}`` are expanded from the environment so that
secrets never need to live in the file itself.

Example config (provisioner.yaml):
    azure:
      auth:
        client_id: ${AZURE_CLIENT_ID}
        tenant_id: ${AZURE_TENANT_ID}
        client_secret: ${AZURE_CLIENT_SECRET}
        sku_type: premium
      permissions:
        subscription_id: 00000000-0000-0000-0000-000000000000
        resource_group: rg-data-platform
        dp_owner_role_definition_id: /providers/Microsoft.Authorization/roleDefinitions/...
        dev_group_role_definition_id: /providers/Microsoft.Authorization/roleDefinitions/...
    databricks:
      auth:
        account_id: ${DATABRICKS_ACCOUNT_ID}
    misc:
      development_environment_name: development
    use_case_templates:
      workload:
        job: [urn:dmb:utm:databricks-workload-job-template]
        dlt: [urn:dmb:utm:databricks-workload-dlt-template]
        workflow: [urn:dmb:utm:databricks-workload-workflow-template]
    principal_mapping:
      provider: azure
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )


class AzureAuthConfig(_ConfigModel):
    """Service principal credentials used against Azure Resource Manager and Microsoft Graph."""

    client_id: str = Field(..., min_length=1)
    tenant_id: str = Field(..., min_length=1)
    client_secret: str = Field(..., min_length=1, repr=False)
    sku_type: str = "premium"
    region: str = "westeurope"


class AzurePermissionsConfig(_ConfigModel):
    """Where workspaces live and which roles their owners receive."""

    subscription_id: str = Field(..., min_length=1)
    resource_group: str = Field(..., min_length=1)
    dp_owner_role_definition_id: Optional[str] = None
    dev_group_role_definition_id: Optional[str] = None

    @field_validator('dp_owner_role_definition_id', 'dev_group_role_definition_id')
    @classmethod
    def blank_role_is_none(cls, v: Optional[str]) -> Optional[str]:
        """
        An empty role id disables the corresponding grant.

        The literal ``no_permissions`` is kept as is: it removes the roles the
        principal already holds on the workspace instead of granting one.
        """
        return v or None


class AzureConfig(_ConfigModel):
    auth: AzureAuthConfig
    permissions: AzurePermissionsConfig


class DatabricksAuthConfig(_ConfigModel):
    """Databricks account coordinates used for account-level lookups."""

    account_id: str = Field(..., min_length=1)
    account_host: str = "https://accounts.azuredatabricks.net"


class DatabricksConfig(_ConfigModel):
    auth: DatabricksAuthConfig


class MiscConfig(_ConfigModel):
    development_environment_name: str = "development"


class WorkloadTemplatesConfig(_ConfigModel):
    """Use case template ids (without version) accepted for each workload type."""

    job: List[str] = Field(default_factory=list)
    dlt: List[str] = Field(default_factory=list)
    workflow: List[str] = Field(default_factory=list)


class UseCaseTemplatesConfig(_ConfigModel):
    workload: WorkloadTemplatesConfig = Field(default_factory=WorkloadTemplatesConfig)


class PrincipalMappingConfig(_ConfigModel):
    """Which identity provider resolves principals during workspace provisioning."""

    provider: str = "azure"


class ProvisionerConfig(_ConfigModel):
    """Root configuration of the provisioner."""

    azure: AzureConfig
    databricks: DatabricksConfig
    misc: MiscConfig = Field(default_factory=MiscConfig)
    use_case_templates: UseCaseTemplatesConfig = Field(default_factory=UseCaseTemplatesConfig)
    principal_mapping: PrincipalMappingConfig = Field(default_factory=PrincipalMappingConfig)


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    return value


def load_config(path: Union[str, Path]) -> ProvisionerConfig:
    """
    Load the provisioner configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Validated ProvisionerConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If required settings are missing or invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    config = ProvisionerConfig.model_validate(_expand_env(data))
    logger.info(f"Loaded provisioner configuration from {path}")
    return config


__all__ = [
    "AzureAuthConfig",
    "AzureConfig",
    "AzurePermissionsConfig",
    "DatabricksAuthConfig",
    "DatabricksConfig",
    "MiscConfig",
    "PrincipalMappingConfig",
    "ProvisionerConfig",
    "UseCaseTemplatesConfig",
    "WorkloadTemplatesConfig",
    "load_config",
]
