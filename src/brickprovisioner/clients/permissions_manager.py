"""
Azure role assignments on workspace resources.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from brickprovisioner.common import Result, Success, collect, failure
from brickprovisioner.models import AzurePrincipalType

from .azure_rest import AzureApiError, AzureRestClient

logger = logging.getLogger(__name__)

ROLE_ASSIGNMENTS_API_VERSION = "2022-04-01"
ROLE_ASSIGNMENT_EXISTS = "RoleAssignmentExists"
NO_PERMISSIONS = "no_permissions"


class AzurePermissionsManager:
    """
    Grants Azure roles to principals.

    Assignment is a convergence operation: when Azure reports that the same
    role is already assigned to the principal on the resource, the desired
    state holds and the call succeeds. No retries are performed here.
    """

    def __init__(self, rest: AzureRestClient):
        self.rest = rest

    def assign_permissions(
        self,
        resource_id: str,
        assignment_name: str,
        role_definition_id: str,
        principal_id: str,
        principal_type: AzurePrincipalType,
    ) -> Result[None]:
        """
        Assign a role to a principal on a resource.

        Args:
            resource_id: Scope of the assignment, e.g. a workspace ARM id
            assignment_name: Name of the assignment, any GUID
            role_definition_id: ARM id of the role definition to assign
            principal_id: Object id of the principal
            principal_type: Kind of principal

        Returns:
            Success if the role is assigned (now or already), Failure otherwise
        """
        path = f"{resource_id}/providers/Microsoft.Authorization/roleAssignments/{assignment_name}"
        body = {
            "properties": {
                "roleDefinitionId": role_definition_id,
                "principalId": principal_id,
                "principalType": principal_type.value,
            }
        }
        try:
            response = self.rest.request(
                "PUT", path, params={"api-version": ROLE_ASSIGNMENTS_API_VERSION}, json=body
            )
        except (requests.RequestException, RuntimeError) as e:
            message = f"Error assigning permissions to the resource {resource_id}. Details: {e}"
            logger.error(message)
            return failure(message, e)

        if response.status_code == 201:
            logger.info(f"Assigned role {role_definition_id} to {principal_id} on {resource_id}")
            return Success(None)

        error = AzureApiError.from_response(response) if not response.ok else None
        if error is not None and error.code == ROLE_ASSIGNMENT_EXISTS:
            logger.info(f"Role {role_definition_id} already assigned to {principal_id} on {resource_id}")
            return Success(None)

        message = (
            f"Error assigning permissions to the resource {resource_id}. "
            f"Azure response status code: {response.status_code}"
        )
        if error is not None and error.code:
            message = f"{message}. Error code: {error.code}"
        logger.error(message)
        return failure(message, error)

    def list_role_assignments(self, resource_id: str, principal_id: str) -> Result[List[Dict[str, Any]]]:
        """
        List the role assignments of a principal scoped exactly to a resource.

        Assignments inherited from a parent scope (resource group, subscription)
        are left out since they cannot be removed at this scope.

        Args:
            resource_id: ARM id of the resource
            principal_id: Object id of the principal

        Returns:
            Success with the raw assignments, or Failure
        """
        path: Optional[str] = f"{resource_id}/providers/Microsoft.Authorization/roleAssignments"
        params: Optional[Dict[str, Any]] = {
            "api-version": ROLE_ASSIGNMENTS_API_VERSION,
            "$filter": f"principalId eq '{principal_id}'",
        }
        assignments: List[Dict[str, Any]] = []
        try:
            while path:
                page = self.rest.get_json(path, params=params)
                assignments.extend(page.get("value", []))
                path, params = page.get("nextLink"), None
        except (AzureApiError, requests.RequestException, RuntimeError, ValueError) as e:
            message = (
                f"An error occurred while listing the role assignments of {principal_id} "
                f"on the resource {resource_id}. Details: {e}"
            )
            logger.error(message)
            return failure(message, e)

        scoped = [
            assignment for assignment in assignments
            if assignment.get("id", "").lower().startswith(f"{resource_id.lower()}/")
        ]
        logger.debug(f"Found {len(scoped)} role assignments of {principal_id} on {resource_id}")
        return Success(scoped)

    def delete_role_assignment(self, assignment_id: str) -> Result[None]:
        """
        Delete a role assignment by its ARM id.

        An assignment that no longer exists counts as deleted.
        """
        try:
            response = self.rest.request("DELETE", assignment_id, params={"api-version": ROLE_ASSIGNMENTS_API_VERSION})
        except (requests.RequestException, RuntimeError) as e:
            message = f"Error deleting the role assignment {assignment_id}. Details: {e}"
            logger.error(message)
            return failure(message, e)

        if response.status_code in (200, 204):
            logger.info(f"Deleted role assignment {assignment_id}")
            return Success(None)

        error = AzureApiError.from_response(response) if not response.ok else None
        message = f"Error deleting the role assignment {assignment_id}. Azure response status code: {response.status_code}"
        if error is not None and error.code:
            message = f"{message}. Error code: {error.code}"
        logger.error(message)
        return failure(message, error)

    def remove_permissions(self, resource_id: str, principal_id: str) -> Result[None]:
        """
        Remove every role a principal holds directly on a resource.

        All deletions are attempted; their problems are collected.
        """
        listed = self.list_role_assignments(resource_id, principal_id)
        if listed.is_failure():
            return listed

        result = collect(self.delete_role_assignment(assignment["id"]) for assignment in listed.value)
        if result.is_success():
            logger.info(f"Removed permissions of {principal_id} on the Azure resource {resource_id}")
        return result.map(lambda _: None)
