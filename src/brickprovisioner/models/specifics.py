"""
Specific sections of Databricks components.

The ``specific`` block of a component carries the technology-specific
configuration. The known variants form a closed set:

- ``DatabricksJobWorkloadSpecific``: batch job workloads
- ``DatabricksDLTWorkloadSpecific``: Delta Live Tables pipeline workloads
- ``DatabricksWorkflowWorkloadSpecific``: multi-task workflow workloads
- ``DatabricksOutputPortSpecific``: Unity Catalog views exposed as output ports

Cluster definitions are kept as free-form mappings; creating clusters, jobs
and pipelines happens outside this package.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import ConfigDict, Field

from .base import BaseProvisionerModel
from .enums import GitProvider, GitReferenceType, PipelineChannel, ProductEdition


class Specific(BaseProvisionerModel):
    """Untyped specific section; keeps every field it receives."""

    model_config = ConfigDict(extra="allow")


# =============================================================================
# WORKLOADS
# =============================================================================

class GitSpecific(BaseProvisionerModel):
    git_repo_url: str = Field(..., min_length=1)


class JobGitSpecific(GitSpecific):
    """Git coordinates of the notebook a job runs."""

    git_reference: str = Field(..., min_length=1)
    git_reference_type: GitReferenceType
    git_path: str = Field(..., min_length=1)
    git_provider: Optional[GitProvider] = None


class SchedulingSpecific(BaseProvisionerModel):
    enable_scheduling: Optional[bool] = None
    cron_expression: Optional[str] = None
    java_timezone_id: Optional[str] = None


class DatabricksWorkloadSpecific(Specific):
    """Fields shared by job and pipeline workloads."""

    model_config = ConfigDict(extra="ignore")

    workspace: str = Field(..., min_length=1)
    git: GitSpecific
    repo_path: str = Field(..., min_length=1)
    run_as_principal_name: Optional[str] = None


class DatabricksJobWorkloadSpecific(DatabricksWorkloadSpecific):
    job_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    metastore: Optional[str] = None
    git: JobGitSpecific
    scheduling: Optional[SchedulingSpecific] = None
    cluster: Dict[str, Any] = Field(default_factory=dict)


class PipelineNotification(BaseProvisionerModel):
    mail: str
    alert: List[str] = Field(default_factory=list)


class DatabricksDLTWorkloadSpecific(DatabricksWorkloadSpecific):
    pipeline_name: str = Field(..., min_length=1)
    product_edition: ProductEdition
    continuous: bool = False
    notebooks: List[str] = Field(default_factory=list)
    files: List[str] = Field(default_factory=list)
    # None when workspace creation is disabled
    metastore: Optional[str] = None
    catalog: str = Field(..., min_length=1)
    target: Optional[str] = None
    photon: bool = False
    notifications: List[PipelineNotification] = Field(default_factory=list)
    channel: PipelineChannel = PipelineChannel.CURRENT
    cluster: Dict[str, Any] = Field(default_factory=dict)


class DatabricksWorkflowWorkloadSpecific(Specific):
    """Workflow definition exported from a workspace, replayed on provisioning."""

    model_config = ConfigDict(extra="ignore")

    workspace: str = Field(..., min_length=1)
    repo_path: str = Field(..., min_length=1)
    git: GitSpecific
    workflow: Dict[str, Any] = Field(default_factory=dict)
    override: bool = False


# =============================================================================
# OUTPUT PORTS
# =============================================================================

class DatabricksOutputPortSpecific(Specific):
    """
    An output port exposes a view over a table produced by a workload.

    ``workspace``, ``catalog_name``, ``schema_name`` and ``table_name`` locate
    the source table; the ``*_op`` fields locate the exposed view and the
    workspace hosting it.
    """

    model_config = ConfigDict(extra="ignore")

    workspace: str = Field(..., min_length=1)
    # None when workspace creation is disabled
    metastore: Optional[str] = None
    catalog_name: str = Field(..., min_length=1)
    schema_name: str = Field(..., min_length=1)
    table_name: str = Field(..., min_length=1)
    sql_warehouse_name: str = Field(..., min_length=1)
    workspace_op: str = Field(..., min_length=1, alias="workspaceOP")
    catalog_name_op: str = Field(..., min_length=1, alias="catalogNameOP")
    schema_name_op: str = Field(..., min_length=1, alias="schemaNameOP")
    view_name_op: str = Field(..., min_length=1, alias="viewNameOP")

    @property
    def table_full_name(self) -> str:
        return f"{self.catalog_name}.{self.schema_name}.{self.table_name}"


WorkloadSpecific = Union[
    DatabricksJobWorkloadSpecific,
    DatabricksDLTWorkloadSpecific,
    DatabricksWorkflowWorkloadSpecific,
]

__all__ = [
    "DatabricksDLTWorkloadSpecific",
    "DatabricksJobWorkloadSpecific",
    "DatabricksOutputPortSpecific",
    "DatabricksWorkflowWorkloadSpecific",
    "DatabricksWorkloadSpecific",
    "GitSpecific",
    "JobGitSpecific",
    "PipelineNotification",
    "SchedulingSpecific",
    "Specific",
    "WorkloadSpecific",
]
