"""
Principal mapping against the Microsoft Entra ID directory.
"""

import logging

from brickprovisioner.clients import AzureRestClient, GraphClient
from brickprovisioner.common import Result, Success, failure
from brickprovisioner.config import ProvisionerConfig

from .mapper import Mapper, register_mapper, user_reference_to_mail

logger = logging.getLogger(__name__)


class AzureMapper(Mapper):
    """Resolves users and groups into Entra ID object ids."""

    identifier = "azure"

    def __init__(self, graph: GraphClient):
        self.graph = graph

    def map_user(self, user_id: str) -> Result[str]:
        mail = user_reference_to_mail(user_id)
        users = self.graph.find_users_by_mail(mail)
        if not users:
            message = f"User {mail} not found on the configured Azure tenant"
            logger.warning(message)
            return failure(message)
        if len(users) > 1:
            message = f"More than one user with mail {mail} found on the configured Azure tenant"
            logger.warning(message)
            return failure(message)
        return Success(users[0]["id"])

    def map_group(self, group_name: str) -> Result[str]:
        groups = self.graph.find_groups_by_display_name(group_name)
        if not groups:
            message = f"Group {group_name} not found on the configured Azure tenant"
            logger.warning(message)
            return failure(message)
        if len(groups) > 1:
            message = f"More than one group named {group_name} found on the configured Azure tenant"
            logger.warning(message)
            return failure(message)
        return Success(groups[0]["id"])


@register_mapper(AzureMapper.identifier)
def build_azure_mapper(config: ProvisionerConfig) -> AzureMapper:
    return AzureMapper(GraphClient(AzureRestClient.for_graph(config.azure.auth)))
