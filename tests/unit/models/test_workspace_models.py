"""
Unit tests for workspace snapshots and Unity Catalog object references.
"""

import pytest
from databricks.sdk.service.catalog import SecurableType

from brickprovisioner.models import ProvisioningState, View, WorkspaceState
from tests.fixtures import make_workspace_info


class TestDatabricksWorkspaceInfo:
    """Tests for DatabricksWorkspaceInfo state derivation."""

    def test_succeeded_is_available(self) -> None:
        info = make_workspace_info(provisioning_state=ProvisioningState.SUCCEEDED)
        assert info.state == WorkspaceState.AVAILABLE
        assert info.is_available()

    @pytest.mark.parametrize("state", [ProvisioningState.ACCEPTED, ProvisioningState.CREATING, ProvisioningState.UPDATING])
    def test_other_states_are_creating(self, state: ProvisioningState) -> None:
        info = make_workspace_info(provisioning_state=state)
        assert info.state == WorkspaceState.CREATING
        assert not info.is_available()

    def test_unmanaged_is_always_available(self) -> None:
        info = make_workspace_info(provisioning_state=None, is_managed=False)
        assert info.is_available()

    def test_provisioning_state_is_case_insensitive(self) -> None:
        assert ProvisioningState("succeeded") is ProvisioningState.SUCCEEDED


class TestView:
    """Tests for View."""

    def test_full_name_and_parents(self) -> None:
        view = View(catalog_name="sales_op", schema_name="public", name="orders_view")

        assert view.full_name == "sales_op.public.orders_view"
        assert view.securable_type == SecurableType.TABLE
        assert view.parent_catalog.full_name == "sales_op"
        assert view.parent_catalog.securable_type == SecurableType.CATALOG
        assert view.parent_schema.full_name == "sales_op.public"
        assert view.parent_schema.securable_type == SecurableType.SCHEMA
