"""
Workspace snapshots and Unity Catalog object references.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Optional

from databricks.sdk.service.catalog import SecurableType
from pydantic import BaseModel, ConfigDict, computed_field

from .enums import ProvisioningState, WorkspaceState


class DatabricksWorkspaceInfo(BaseModel):
    """
    Read-only snapshot of an Azure Databricks workspace.

    Managed workspaces are looked up or created in the configured resource
    group; unmanaged workspaces are referenced by URL and never modified.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    id: str
    databricks_host: str
    azure_resource_id: Optional[str] = None
    azure_resource_url: Optional[str] = None
    provisioning_state: Optional[ProvisioningState] = None
    is_managed: bool = True

    @computed_field
    @property
    def state(self) -> WorkspaceState:
        """Lifecycle state derived from the ARM provisioning state."""
        if not self.is_managed or self.provisioning_state == ProvisioningState.SUCCEEDED:
            return WorkspaceState.AVAILABLE
        return WorkspaceState.CREATING

    def is_available(self) -> bool:
        return self.state == WorkspaceState.AVAILABLE


class DBObject(BaseModel):
    """A Unity Catalog securable addressed by its full name."""

    model_config = ConfigDict(frozen=True)

    @property
    @abstractmethod
    def full_name(self) -> str:
        ...

    @property
    @abstractmethod
    def securable_type(self) -> SecurableType:
        ...


class Catalog(DBObject):
    name: str

    @property
    def full_name(self) -> str:
        return self.name

    @property
    def securable_type(self) -> SecurableType:
        return SecurableType.CATALOG


class Schema(DBObject):
    catalog_name: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.catalog_name}.{self.name}"

    @property
    def securable_type(self) -> SecurableType:
        return SecurableType.SCHEMA


class View(DBObject):
    catalog_name: str
    schema_name: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.catalog_name}.{self.schema_name}.{self.name}"

    @property
    def securable_type(self) -> SecurableType:
        # Unity Catalog grants on views use the TABLE securable
        return SecurableType.TABLE

    @property
    def parent_catalog(self) -> Catalog:
        return Catalog(name=self.catalog_name)

    @property
    def parent_schema(self) -> Schema:
        return Schema(catalog_name=self.catalog_name, name=self.schema_name)
