"""
Microsoft Graph lookups for users and groups.
"""

import logging
from typing import Any, Dict, List

from .azure_rest import AzureRestClient

logger = logging.getLogger(__name__)


def _odata_literal(value: str) -> str:
    return value.replace("'", "''")


class GraphClient:
    """Exact-match directory queries against Microsoft Graph."""

    def __init__(self, rest: AzureRestClient):
        self.rest = rest

    def find_users_by_mail(self, mail: str) -> List[Dict[str, Any]]:
        """Return the directory users whose mail equals ``mail``."""
        params = {"$filter": f"mail eq '{_odata_literal(mail)}'", "$select": "id,mail,displayName"}
        logger.debug(f"Querying Graph users with filter {params['$filter']}")
        return self.rest.get_json("users", params=params).get("value", [])

    def find_groups_by_display_name(self, display_name: str) -> List[Dict[str, Any]]:
        """Return the directory groups whose display name equals ``display_name``."""
        params = {
            "$filter": f"displayName eq '{_odata_literal(display_name)}'",
            "$select": "id,displayName",
        }
        logger.debug(f"Querying Graph groups with filter {params['$filter']}")
        return self.rest.get_json("groups", params=params).get("value", [])
