"""
Data product descriptors and provisioning requests.

A provisioning request carries a YAML descriptor holding the whole data
product plus the id of the component to act on. Components stay as raw
mappings inside the data product until the validation step knows which
typed model to parse them into.

Usage:
    descriptor = parse_descriptor(request.descriptor).unwrap()
    raw = descriptor.data_product.get_component(descriptor.component_id_to_provision)
    output_port = parse_component(raw, OutputPort[DatabricksOutputPortSpecific])
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

import yaml
from pydantic import Field, ValidationError

from brickprovisioner.common import Result, Success, failure

from .base import BaseProvisionerModel
from .enums import DescriptorKind, Status
from .specifics import Specific

logger = logging.getLogger(__name__)

SpecificT = TypeVar('SpecificT', bound=Specific)
ComponentT = TypeVar('ComponentT', bound='Component')


# =============================================================================
# COMPONENTS
# =============================================================================

class Column(BaseProvisionerModel):
    """A column declared in an output port data contract."""

    name: str
    data_type: Optional[str] = None
    description: Optional[str] = None


class DataContract(BaseProvisionerModel):
    columns: List[Column] = Field(default_factory=list, alias="schema")
    terms_and_conditions: Optional[str] = None
    endpoint: Optional[str] = None
    sla: Optional[Dict[str, Any]] = None


class Component(BaseProvisionerModel, Generic[SpecificT]):
    """Common fields of every data product component."""

    id: str = Field(..., min_length=1)
    name: str
    fully_qualified_name: Optional[str] = None
    description: Optional[str] = None
    kind: str
    specific: SpecificT


class Workload(Component[SpecificT], Generic[SpecificT]):
    version: Optional[str] = None
    infrastructure_template_id: Optional[str] = None
    use_case_template_id: Optional[str] = None
    depends_on: List[str] = Field(default_factory=list)
    platform: Optional[str] = None
    technology: Optional[str] = None
    workload_type: Optional[str] = None
    connection_type: Optional[str] = None
    tags: List[Any] = Field(default_factory=list)
    read_ports: List[str] = Field(default_factory=list)


class OutputPort(Component[SpecificT], Generic[SpecificT]):
    version: Optional[str] = None
    infrastructure_template_id: Optional[str] = None
    use_case_template_id: Optional[str] = None
    depends_on: List[str] = Field(default_factory=list)
    platform: Optional[str] = None
    technology: Optional[str] = None
    output_port_type: Optional[str] = None
    creation_date: Optional[str] = None
    start_date: Optional[str] = None
    retention_time: Optional[str] = None
    process_description: Optional[str] = None
    data_contract: DataContract = Field(default_factory=DataContract)
    data_sharing_agreement: Optional[Any] = None
    tags: List[Any] = Field(default_factory=list)
    sample_data: Optional[Any] = None
    semantic_linking: Optional[Any] = None


# =============================================================================
# DATA PRODUCT AND DESCRIPTOR
# =============================================================================

class DataProduct(BaseProvisionerModel):
    """A data product and the raw mappings of its components."""

    id: str = Field(..., min_length=1)
    name: Optional[str] = None
    fully_qualified_name: Optional[str] = None
    description: Optional[str] = None
    kind: Optional[str] = None
    domain: Optional[str] = None
    version: Optional[str] = None
    environment: str = Field(..., min_length=1)
    domain_id: Optional[str] = None
    data_product_owner: str = Field(..., min_length=1)
    data_product_owner_display_name: Optional[str] = None
    dev_group: str = Field(..., min_length=1)
    owner_group: Optional[str] = None
    ownership: Optional[Dict[str, Any]] = None
    specific: Dict[str, Any] = Field(default_factory=dict)
    components: List[Dict[str, Any]] = Field(default_factory=list)

    def get_component(self, component_id: str) -> Optional[Dict[str, Any]]:
        """Return the raw component with the given id, if present."""
        for component in self.components:
            if component.get("id") == component_id:
                return component
        return None

    def get_component_kind(self, component_id: str) -> Optional[str]:
        component = self.get_component(component_id)
        if component is None:
            return None
        kind = component.get("kind")
        return str(kind) if kind else None


class Descriptor(BaseProvisionerModel):
    data_product: DataProduct
    component_id_to_provision: str = Field(..., min_length=1)


def parse_descriptor(descriptor: str) -> Result[Descriptor]:
    """
    Parse a YAML descriptor.

    Args:
        descriptor: YAML text of the descriptor

    Returns:
        Success with the Descriptor, or Failure describing the parse error
    """
    try:
        data = yaml.safe_load(descriptor)
        return Success(Descriptor.model_validate(data))
    except (yaml.YAMLError, ValidationError) as e:
        message = f"Failed to deserialize the Yaml Descriptor. Details: {e}"
        logger.error(message)
        return failure(message, e)


def parse_component(raw: Dict[str, Any], model: Type[ComponentT]) -> Result[ComponentT]:
    """
    Parse a raw component mapping into the given component model.

    Args:
        raw: Component mapping taken from the data product
        model: Parametrized component model, e.g. ``Workload[DatabricksJobWorkloadSpecific]``

    Returns:
        Success with the typed component, or Failure describing the parse error
    """
    try:
        return Success(model.model_validate(raw))
    except ValidationError as e:
        message = f"Failed to deserialize the component. Details: {e}"
        logger.error(message)
        return failure(message, e)


# =============================================================================
# REQUESTS AND STATUS
# =============================================================================

class ProvisioningRequest(BaseProvisionerModel):
    """Request as received from the platform."""

    descriptor_kind: DescriptorKind
    descriptor: str
    remove_data: bool = False


class ProvisionInfo(BaseProvisionerModel):
    request: str
    result: Optional[str] = None


class UpdateAclRequest(BaseProvisionerModel):
    """Request to align the ACL of a provisioned component with a list of principals."""

    refs: List[str] = Field(default_factory=list)
    provision_info: ProvisionInfo


@dataclass(frozen=True)
class ProvisionRequest(Generic[SpecificT]):
    """A validated request: the data product plus the typed component to act on."""

    data_product: DataProduct
    component: Component[SpecificT]
    remove_data: bool = False


class ProvisioningStatus(BaseProvisionerModel):
    """Outcome reported back to the caller of a provisioning operation."""

    status: Status
    result: str = ""
    info: Optional[Dict[str, Any]] = None

    @classmethod
    def completed(cls, result: str, info: Optional[Dict[str, Any]] = None) -> ProvisioningStatus:
        return cls(status=Status.COMPLETED, result=result, info=info)

    @classmethod
    def failed(cls, message: str) -> ProvisioningStatus:
        return cls(status=Status.FAILED, result=message)


__all__ = [
    "Column",
    "Component",
    "DataContract",
    "DataProduct",
    "Descriptor",
    "OutputPort",
    "ProvisionInfo",
    "ProvisionRequest",
    "ProvisioningRequest",
    "ProvisioningStatus",
    "UpdateAclRequest",
    "Workload",
    "parse_component",
    "parse_descriptor",
]
