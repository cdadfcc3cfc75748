"""Descriptor, request and workspace models."""

from .descriptor import (
    Column,
    Component,
    DataContract,
    DataProduct,
    Descriptor,
    OutputPort,
    ProvisionInfo,
    ProvisionRequest,
    ProvisioningRequest,
    ProvisioningStatus,
    UpdateAclRequest,
    Workload,
    parse_component,
    parse_descriptor,
)
from .enums import (
    AzurePrincipalType,
    ComponentKind,
    DescriptorKind,
    Environment,
    ProvisioningState,
    SkuType,
    Status,
    WorkspaceState,
)
from .specifics import (
    DatabricksDLTWorkloadSpecific,
    DatabricksJobWorkloadSpecific,
    DatabricksOutputPortSpecific,
    DatabricksWorkflowWorkloadSpecific,
    DatabricksWorkloadSpecific,
    Specific,
)
from .workspace import Catalog, DatabricksWorkspaceInfo, DBObject, Schema, View

__all__ = [
    "AzurePrincipalType",
    "Catalog",
    "Column",
    "Component",
    "ComponentKind",
    "DataContract",
    "DataProduct",
    "DatabricksDLTWorkloadSpecific",
    "DatabricksJobWorkloadSpecific",
    "DatabricksOutputPortSpecific",
    "DatabricksWorkflowWorkloadSpecific",
    "DatabricksWorkloadSpecific",
    "DatabricksWorkspaceInfo",
    "DBObject",
    "Descriptor",
    "DescriptorKind",
    "Environment",
    "OutputPort",
    "ProvisionInfo",
    "ProvisionRequest",
    "ProvisioningRequest",
    "ProvisioningState",
    "ProvisioningStatus",
    "Schema",
    "SkuType",
    "Specific",
    "Status",
    "UpdateAclRequest",
    "View",
    "Workload",
    "WorkspaceState",
    "parse_component",
    "parse_descriptor",
]
