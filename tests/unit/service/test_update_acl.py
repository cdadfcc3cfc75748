"""
Unit tests for UpdateAclService.
"""

from unittest.mock import ANY, create_autospec

import pytest
from databricks.sdk.service.catalog import ColumnInfo, PermissionsList, Privilege, TableExistsResponse, TableInfo

from brickprovisioner.common import Success, ValidationException, failure
from brickprovisioner.models import ProvisioningStatus, Status
from brickprovisioner.service import (
    OutputPortAclHandler,
    OutputPortValidation,
    UpdateAclService,
    ValidationService,
    WorkspaceHandler,
)
from brickprovisioner.service.outputport_acl import ACL_UPDATED
from brickprovisioner.service.update_acl import (
    ASSIGN_PERMISSIONS_FAILED,
    WORKSPACE_CLIENT_FAILED,
    WORKSPACE_INFO_FAILED,
)
from tests.fixtures import make_job_workload, make_provision_request, make_update_acl_request, make_workspace_info


@pytest.fixture
def validation_service():
    service = create_autospec(ValidationService, instance=True)
    service.validate.return_value = Success(make_provision_request())
    return service


@pytest.fixture
def workspace_handler(mock_workspace_client):
    handler = create_autospec(WorkspaceHandler, instance=True)
    handler.get_workspace_info.return_value = Success(make_workspace_info())
    handler.get_workspace_client.return_value = Success(mock_workspace_client)
    return handler


@pytest.fixture
def acl_handler():
    handler = create_autospec(OutputPortAclHandler, instance=True)
    handler.update_acl.return_value = Success(ProvisioningStatus.completed("Update of Acl completed!"))
    return handler


@pytest.fixture
def service(validation_service, workspace_handler, acl_handler) -> UpdateAclService:
    return UpdateAclService(validation_service, workspace_handler, acl_handler)


class TestUpdateAclService:
    """Tests for UpdateAclService.update_acl."""

    def test_completed(self, service, validation_service, workspace_handler, acl_handler, mock_workspace_client) -> None:
        """The handler's status is returned as is."""
        request = make_update_acl_request()

        status = service.update_acl(request)

        assert status.status == Status.COMPLETED
        assert status.result == "Update of Acl completed!"
        provisioning_request = validation_service.validate.call_args.args[0]
        assert provisioning_request.descriptor == request.provision_info.request
        assert provisioning_request.remove_data is False
        workspace_handler.get_workspace_info.assert_called_once_with("ws-consumer")
        acl_handler.update_acl.assert_called_once_with(ANY, request, mock_workspace_client, ANY)

    def test_workspace_lookup_failure(self, service, workspace_handler, acl_handler) -> None:
        workspace_handler.get_workspace_info.return_value = failure("ARM unreachable")

        status = service.update_acl(make_update_acl_request())

        assert status.status == Status.FAILED
        assert status.result == WORKSPACE_INFO_FAILED == "Update Acl failed while getting workspace info"
        acl_handler.update_acl.assert_not_called()

    def test_workspace_absent(self, service, workspace_handler) -> None:
        workspace_handler.get_workspace_info.return_value = Success(None)

        assert service.update_acl(make_update_acl_request()).result == WORKSPACE_INFO_FAILED

    def test_workspace_client_failure(self, service, workspace_handler, acl_handler) -> None:
        workspace_handler.get_workspace_client.return_value = failure("cannot authenticate")

        status = service.update_acl(make_update_acl_request())

        assert status.status == Status.FAILED
        assert status.result == WORKSPACE_CLIENT_FAILED
        acl_handler.update_acl.assert_not_called()

    def test_assign_failure(self, service, acl_handler) -> None:
        acl_handler.update_acl.return_value = failure("grant rejected")

        status = service.update_acl(make_update_acl_request())

        assert status.status == Status.FAILED
        assert status.result == ASSIGN_PERMISSIONS_FAILED

    def test_workload_is_rejected(self, service, validation_service, workspace_handler) -> None:
        """Only output ports support ACL updates."""
        validation_service.validate.return_value = Success(make_provision_request(component=make_job_workload()))

        with pytest.raises(ValidationException) as exc_info:
            service.update_acl(make_update_acl_request())

        assert exc_info.value.failed_operation.messages == [
            "The kind 'workload' of the component is not supported by this Specific Provisioner"
        ]
        workspace_handler.get_workspace_info.assert_not_called()

    def test_invalid_descriptor(self, service, validation_service) -> None:
        validation_service.validate.return_value = failure("Component with ID x not found in the Descriptor")

        with pytest.raises(ValidationException) as exc_info:
            service.update_acl(make_update_acl_request())

        assert exc_info.value.failed_operation.messages == ["Component with ID x not found in the Descriptor"]


class TestUpdateAclWiredThrough:
    """update_acl with real validation and ACL handling over a mocked workspace client."""

    @pytest.fixture
    def wired_service(self, config, workspace_handler, mock_mapper) -> UpdateAclService:
        mock_mapper.map.side_effect = lambda refs: {ref: Success(ref.split(":", 1)[1]) for ref in refs}
        validation = ValidationService(
            config.use_case_templates.workload,
            OutputPortValidation(config.misc, workspace_handler),
        )
        return UpdateAclService(validation, workspace_handler, OutputPortAclHandler(mock_mapper, config.misc))

    def test_grants_select_to_every_ref(self, wired_service, mock_workspace_client) -> None:
        mock_workspace_client.tables.exists.return_value = TableExistsResponse(table_exists=True)
        mock_workspace_client.tables.get.return_value = TableInfo(
            columns=[ColumnInfo(name="order_id"), ColumnInfo(name="amount")]
        )
        mock_workspace_client.grants.get.return_value = PermissionsList(privilege_assignments=[])

        status = wired_service.update_acl(make_update_acl_request())

        assert status.status == Status.COMPLETED
        assert status.result == ACL_UPDATED
        mock_workspace_client.tables.exists.assert_called_once_with(full_name="sales.raw.orders")
        granted = [
            (c.kwargs["full_name"], c.kwargs["changes"][0].principal)
            for c in mock_workspace_client.grants.update.call_args_list
            if c.kwargs["changes"][0].add == [Privilege.SELECT]
        ]
        assert granted == [
            ("sales_op.public.orders_view", "alice_example.com"),
            ("sales_op.public.orders_view", "analysts"),
        ]

    def test_table_lookup_timeout_is_a_validation_error(self, wired_service, mock_workspace_client) -> None:
        """SDK errors outside the DatabricksError hierarchy do not escape."""
        mock_workspace_client.tables.exists.side_effect = TimeoutError("Timed out after 0:05:00")

        with pytest.raises(ValidationException) as exc_info:
            wired_service.update_acl(make_update_acl_request())

        assert "Timed out after 0:05:00" in exc_info.value.failed_operation.messages[0]
        mock_workspace_client.grants.update.assert_not_called()

    def test_grant_lookup_error_is_a_failed_status(self, wired_service, mock_workspace_client) -> None:
        mock_workspace_client.tables.exists.return_value = TableExistsResponse(table_exists=True)
        mock_workspace_client.tables.get.return_value = TableInfo(
            columns=[ColumnInfo(name="order_id"), ColumnInfo(name="amount")]
        )
        mock_workspace_client.grants.get.side_effect = RuntimeError("connection reset")

        status = wired_service.update_acl(make_update_acl_request())

        assert status.status == Status.FAILED
        assert status.result == ASSIGN_PERMISSIONS_FAILED
