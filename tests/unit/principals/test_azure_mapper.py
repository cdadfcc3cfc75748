"""
Unit tests for AzureMapper.
"""

from brickprovisioner.common import Success
from brickprovisioner.principals import AzureMapper


class TestAzureMapper:
    """Tests for AzureMapper against a mocked Graph client."""

    def test_user_found(self, mock_graph_client) -> None:
        mock_graph_client.find_users_by_mail.return_value = [{"id": "oid-alice", "mail": "alice@example.com"}]

        result = AzureMapper(mock_graph_client).map(["user:alice_example.com"])

        assert result["user:alice_example.com"] == Success("oid-alice")
        mock_graph_client.find_users_by_mail.assert_called_once_with("alice@example.com")

    def test_user_not_found(self, mock_graph_client) -> None:
        mock_graph_client.find_users_by_mail.return_value = []

        result = AzureMapper(mock_graph_client).map_user("alice_example.com")

        assert result.error.messages == ["User alice@example.com not found on the configured Azure tenant"]

    def test_user_ambiguous(self, mock_graph_client) -> None:
        mock_graph_client.find_users_by_mail.return_value = [{"id": "1"}, {"id": "2"}]

        result = AzureMapper(mock_graph_client).map_user("alice_example.com")

        assert result.error.messages == [
            "More than one user with mail alice@example.com found on the configured Azure tenant"
        ]

    def test_group_found(self, mock_graph_client) -> None:
        mock_graph_client.find_groups_by_display_name.return_value = [{"id": "oid-team", "displayName": "team-a"}]

        result = AzureMapper(mock_graph_client).map(["group:team-a"])

        assert result["group:team-a"] == Success("oid-team")

    def test_group_not_found(self, mock_graph_client) -> None:
        mock_graph_client.find_groups_by_display_name.return_value = []

        result = AzureMapper(mock_graph_client).map_group("team-a")

        assert result.error.messages == ["Group team-a not found on the configured Azure tenant"]

    def test_group_ambiguous(self, mock_graph_client) -> None:
        mock_graph_client.find_groups_by_display_name.return_value = [{"id": "1"}, {"id": "2"}]

        result = AzureMapper(mock_graph_client).map_group("team-a")

        assert result.error.messages == ["More than one group named team-a found on the configured Azure tenant"]
