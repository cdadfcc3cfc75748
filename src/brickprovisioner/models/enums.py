"""
Enum definitions for provisioning models.

This module contains all enumeration types used throughout the provisioner.
"""

from enum import Enum


class ComponentKind(str, Enum):
    """Kind of a data product component, as declared in the descriptor."""
    WORKLOAD = "workload"
    OUTPUTPORT = "outputport"
    STORAGE = "storage"
    OBSERVABILITY = "observability"


class Environment(str, Enum):
    """Deployment environments known to the platform."""
    DEVELOPMENT = "development"
    QA = "qa"
    PRODUCTION = "production"


class DescriptorKind(str, Enum):
    """What the received descriptor describes."""
    DATAPRODUCT_DESCRIPTOR = "DATAPRODUCT_DESCRIPTOR"
    COMPONENT_DESCRIPTOR = "COMPONENT_DESCRIPTOR"
    DATAPRODUCT_DESCRIPTOR_WITH_RESULTS = "DATAPRODUCT_DESCRIPTOR_WITH_RESULTS"


class Status(str, Enum):
    """Terminal or intermediate status of a provisioning operation."""
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class SkuType(str, Enum):
    """Azure Databricks pricing tiers."""
    TRIAL = "trial"
    STANDARD = "standard"
    PREMIUM = "premium"


class ProvisioningState(str, Enum):
    """Provisioning state reported by Azure Resource Manager for a workspace."""
    ACCEPTED = "Accepted"
    RUNNING = "Running"
    READY = "Ready"
    CREATING = "Creating"
    CREATED = "Created"
    DELETING = "Deleting"
    DELETED = "Deleted"
    CANCELED = "Canceled"
    FAILED = "Failed"
    SUCCEEDED = "Succeeded"
    UPDATING = "Updating"

    @classmethod
    def _missing_(cls, value):
        # ARM is not consistent with casing across API versions
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class WorkspaceState(str, Enum):
    """Lifecycle of a workspace as seen by the provisioner."""
    ABSENT = "ABSENT"
    CREATING = "CREATING"
    AVAILABLE = "AVAILABLE"


class AzurePrincipalType(str, Enum):
    """Principal types accepted by Azure role assignments."""
    USER = "User"
    GROUP = "Group"
    SERVICE_PRINCIPAL = "ServicePrincipal"
    FOREIGN_GROUP = "ForeignGroup"
    DEVICE = "Device"


class GitReferenceType(str, Enum):
    BRANCH = "branch"
    TAG = "tag"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


class GitProvider(str, Enum):
    GITLAB = "gitlab"
    GITHUB = "github"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


class ProductEdition(str, Enum):
    """Delta Live Tables product editions."""
    ADVANCED = "advanced"
    CORE = "core"
    PRO = "pro"


class PipelineChannel(str, Enum):
    """Delta Live Tables runtime channels."""
    PREVIEW = "preview"
    CURRENT = "current"
