"""
Unit tests for AzurePermissionsManager.
"""

import json
from typing import Any, Optional

import pytest
import requests

from brickprovisioner.clients import AzureApiError, AzurePermissionsManager
from brickprovisioner.models import AzurePrincipalType

RESOURCE_ID = "/subscriptions/sub-123/resourceGroups/rg-data/providers/Microsoft.Databricks/workspaces/ws-sales"


def make_response(status_code: int, body: Optional[Any] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode() if body is not None else b""
    return response


@pytest.fixture
def manager(mock_rest_client) -> AzurePermissionsManager:
    return AzurePermissionsManager(mock_rest_client)


def assign(manager: AzurePermissionsManager):
    return manager.assign_permissions(RESOURCE_ID, "assignment-1", "/roles/owner", "oid-alice", AzurePrincipalType.USER)


class TestAssignPermissions:
    """Tests for assign_permissions."""

    def test_created(self, manager, mock_rest_client) -> None:
        mock_rest_client.request.return_value = make_response(201, {})

        assert assign(manager).is_success()
        method, path = mock_rest_client.request.call_args.args
        assert method == "PUT"
        assert path == f"{RESOURCE_ID}/providers/Microsoft.Authorization/roleAssignments/assignment-1"
        body = mock_rest_client.request.call_args.kwargs["json"]
        assert body["properties"] == {
            "roleDefinitionId": "/roles/owner",
            "principalId": "oid-alice",
            "principalType": "User",
        }

    def test_existing_assignment_is_success(self, manager, mock_rest_client) -> None:
        """An already assigned role is the desired state."""
        mock_rest_client.request.return_value = make_response(
            409, {"error": {"code": "RoleAssignmentExists", "message": "The role assignment already exists."}}
        )

        assert assign(manager).is_success()

    def test_forbidden(self, manager, mock_rest_client) -> None:
        mock_rest_client.request.return_value = make_response(
            403, {"error": {"code": "AuthorizationFailed", "message": "denied"}}
        )

        result = assign(manager)

        assert result.error.messages == [
            f"Error assigning permissions to the resource {RESOURCE_ID}. "
            f"Azure response status code: 403. Error code: AuthorizationFailed"
        ]

    def test_unexpected_success_status(self, manager, mock_rest_client) -> None:
        mock_rest_client.request.return_value = make_response(200, {})

        result = assign(manager)

        assert result.error.messages == [
            f"Error assigning permissions to the resource {RESOURCE_ID}. Azure response status code: 200"
        ]

    def test_transport_error(self, manager, mock_rest_client) -> None:
        mock_rest_client.request.side_effect = requests.ConnectionError("connection reset")

        result = assign(manager)

        assert result.is_failure()
        assert "connection reset" in result.error.messages[0]


def make_assignment(name: str, scope: str = RESOURCE_ID) -> dict:
    return {"id": f"{scope}/providers/Microsoft.Authorization/roleAssignments/{name}", "name": name}


class TestRemovePermissions:
    """Tests for listing and deleting a principal's role assignments."""

    def test_lists_assignments_at_resource_scope(self, manager, mock_rest_client) -> None:
        """Assignments inherited from the resource group are not returned."""
        inherited = make_assignment("inherited", scope="/subscriptions/sub-123/resourceGroups/rg-data")
        mock_rest_client.get_json.return_value = {"value": [make_assignment("direct"), inherited]}

        result = manager.list_role_assignments(RESOURCE_ID, "oid-alice")

        assert [a["name"] for a in result.value] == ["direct"]
        path = mock_rest_client.get_json.call_args.args[0]
        params = mock_rest_client.get_json.call_args.kwargs["params"]
        assert path == f"{RESOURCE_ID}/providers/Microsoft.Authorization/roleAssignments"
        assert params == {"api-version": "2022-04-01", "$filter": "principalId eq 'oid-alice'"}

    def test_list_follows_next_link(self, manager, mock_rest_client) -> None:
        mock_rest_client.get_json.side_effect = [
            {"value": [make_assignment("first")], "nextLink": "https://management.azure.com/next-page"},
            {"value": [make_assignment("second")]},
        ]

        result = manager.list_role_assignments(RESOURCE_ID, "oid-alice")

        assert [a["name"] for a in result.value] == ["first", "second"]
        assert mock_rest_client.get_json.call_args_list[1].args[0] == "https://management.azure.com/next-page"

    def test_list_error(self, manager, mock_rest_client) -> None:
        mock_rest_client.get_json.side_effect = AzureApiError(403, "AuthorizationFailed", "denied")

        result = manager.list_role_assignments(RESOURCE_ID, "oid-alice")

        assert result.error.messages[0].startswith(
            f"An error occurred while listing the role assignments of oid-alice on the resource {RESOURCE_ID}."
        )

    @pytest.mark.parametrize("status_code", [200, 204])
    def test_delete(self, manager, mock_rest_client, status_code: int) -> None:
        mock_rest_client.request.return_value = make_response(status_code)
        assignment_id = make_assignment("direct")["id"]

        assert manager.delete_role_assignment(assignment_id).is_success()
        mock_rest_client.request.assert_called_once_with(
            "DELETE", assignment_id, params={"api-version": "2022-04-01"}
        )

    def test_delete_forbidden(self, manager, mock_rest_client) -> None:
        mock_rest_client.request.return_value = make_response(
            403, {"error": {"code": "AuthorizationFailed", "message": "denied"}}
        )
        assignment_id = make_assignment("direct")["id"]

        result = manager.delete_role_assignment(assignment_id)

        assert result.error.messages == [
            f"Error deleting the role assignment {assignment_id}. "
            f"Azure response status code: 403. Error code: AuthorizationFailed"
        ]

    def test_remove_deletes_every_assignment(self, manager, mock_rest_client) -> None:
        mock_rest_client.get_json.return_value = {"value": [make_assignment("reader"), make_assignment("owner")]}
        mock_rest_client.request.return_value = make_response(200, {})

        result = manager.remove_permissions(RESOURCE_ID, "oid-alice")

        assert result.is_success()
        deleted = [c.args[1] for c in mock_rest_client.request.call_args_list]
        assert deleted == [make_assignment("reader")["id"], make_assignment("owner")["id"]]

    def test_remove_collects_every_failure(self, manager, mock_rest_client) -> None:
        mock_rest_client.get_json.return_value = {"value": [make_assignment("reader"), make_assignment("owner")]}
        mock_rest_client.request.side_effect = requests.ConnectionError("connection reset")

        result = manager.remove_permissions(RESOURCE_ID, "oid-alice")

        assert len(result.error) == 2
        assert mock_rest_client.request.call_count == 2

    def test_remove_without_assignments(self, manager, mock_rest_client) -> None:
        mock_rest_client.get_json.return_value = {"value": []}

        assert manager.remove_permissions(RESOURCE_ID, "oid-alice").is_success()
        mock_rest_client.request.assert_not_called()
