"""
Minimal Azure REST access with service principal credentials.

Tokens are acquired with the OAuth client credentials grant and cached until
shortly before they expire. One ``AzureRestClient`` is bound to one API
(Azure Resource Manager or Microsoft Graph).
"""

import logging
import time
from typing import Any, Dict, Optional

import requests

from brickprovisioner.config import AzureAuthConfig

logger = logging.getLogger(__name__)

RESOURCE_MANAGER_URL = "https://management.azure.com"
RESOURCE_MANAGER_SCOPE = "https://management.azure.com/.default"
GRAPH_URL = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"

DEFAULT_TIMEOUT_SECONDS = 30
TOKEN_EXPIRY_MARGIN_SECONDS = 60


class AzureApiError(Exception):
    """Raised when an Azure REST call returns an error response."""

    def __init__(self, status_code: int, code: Optional[str] = None, message: str = ""):
        self.status_code = status_code
        self.code = code
        self.message = message
        detail = f"{code}: {message}" if code else message
        super().__init__(f"Azure API error ({status_code}): {detail}")

    @classmethod
    def from_response(cls, response: requests.Response) -> "AzureApiError":
        """Build the error from an ARM or Graph error body, falling back to raw text."""
        code = None
        message = response.text
        try:
            error = response.json().get("error", {})
            if isinstance(error, dict):
                code = error.get("code")
                message = error.get("message", message)
        except ValueError:
            pass
        return cls(response.status_code, code, message)


def obtain_service_principal_token(
    tenant_id: str,
    client_id: str,
    client_secret: str,
    scope: str,
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """
    Acquire an Entra ID access token using the client credentials grant.

    Returns:
        The token response, holding at least ``access_token`` and ``expires_in``

    Raises:
        RuntimeError: If the token endpoint rejects the request
    """
    token_endpoint = f"https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
    payload = {
        "grant_type": "client_credentials",
        "client_id": client_id,
        "client_secret": client_secret,
        "scope": scope,
    }

    response = (session or requests).post(token_endpoint, data=payload, timeout=DEFAULT_TIMEOUT_SECONDS)
    if response.status_code != 200:
        try:
            error_payload = response.json()
            error_description = error_payload.get("error_description") or error_payload.get("error")
        except ValueError:
            error_description = response.text
        raise RuntimeError(
            f"Entra ID token request failed ({response.status_code}): {error_description}"
        )

    token = response.json()
    if not token.get("access_token"):
        raise RuntimeError("Entra ID token response did not include access_token")
    return token


class AzureRestClient:
    """Authenticated JSON client for one Azure REST API."""

    def __init__(
        self,
        base_url: str,
        scope: str,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        session: Optional[requests.Session] = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url.rstrip("/")
        self.scope = scope
        self.tenant_id = tenant_id
        self.client_id = client_id
        self._client_secret = client_secret
        self.session = session or requests.Session()
        self.timeout = timeout
        self._token: Optional[str] = None
        self._token_expires_at = 0.0

    @classmethod
    def for_resource_manager(cls, auth: AzureAuthConfig, session: Optional[requests.Session] = None) -> "AzureRestClient":
        return cls(RESOURCE_MANAGER_URL, RESOURCE_MANAGER_SCOPE, auth.tenant_id, auth.client_id, auth.client_secret, session)

    @classmethod
    def for_graph(cls, auth: AzureAuthConfig, session: Optional[requests.Session] = None) -> "AzureRestClient":
        return cls(GRAPH_URL, GRAPH_SCOPE, auth.tenant_id, auth.client_id, auth.client_secret, session)

    def _access_token(self) -> str:
        if self._token is None or time.time() >= self._token_expires_at:
            logger.debug(f"Acquiring access token for scope {self.scope}")
            token = obtain_service_principal_token(
                self.tenant_id, self.client_id, self._client_secret, self.scope, self.session
            )
            self._token = token["access_token"]
            expires_in = int(token.get("expires_in", 3600))
            self._token_expires_at = time.time() + max(expires_in - TOKEN_EXPIRY_MARGIN_SECONDS, 0)
        return self._token

    def _url(self, path: str) -> str:
        if path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """
        Send a request and return the raw response, whatever its status.

        Args:
            method: HTTP method
            path: Path relative to the API base URL, or an absolute URL (e.g. a nextLink)
            params: Query string parameters
            json: JSON body

        Returns:
            The HTTP response
        """
        headers = {"Authorization": f"Bearer {self._access_token()}"}
        return self.session.request(
            method,
            self._url(path),
            headers=headers,
            params=params,
            json=json,
            timeout=self.timeout,
        )

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a JSON document.

        Raises:
            AzureApiError: If the API answers with an error status
        """
        response = self.request("GET", path, params=params)
        if not response.ok:
            raise AzureApiError.from_response(response)
        return response.json()

    def put_json(self, path: str, body: Dict[str, Any], params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        PUT a JSON document and return the JSON answer.

        Raises:
            AzureApiError: If the API answers with an error status
        """
        response = self.request("PUT", path, params=params, json=body)
        if not response.ok:
            raise AzureApiError.from_response(response)
        return response.json() if response.content else {}
