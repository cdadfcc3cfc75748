"""Provisioning use cases: workspace lifecycle, validation and ACL updates."""

from .outputport_acl import OutputPortAclHandler
from .update_acl import UpdateAclService
from .validation import OutputPortValidation, ValidationService, validate_workload
from .workspace_handler import WorkspaceHandler

__all__ = [
    "OutputPortAclHandler",
    "OutputPortValidation",
    "UpdateAclService",
    "ValidationService",
    "WorkspaceHandler",
    "validate_workload",
]
