"""Low-level HTTP client for Keycloak Admin API.

Handles service-account authentication, token refresh and read requests.
"""
from __future__ import annotations
import os
from typing import Optional, Dict, Any
from datetime import datetime, timedelta

import requests

from .exceptions import KeycloakAPIError, KeycloakAuthenticationError

REQUEST_TIMEOUT = 5

# Refresh this many seconds before the token actually expires
TOKEN_REFRESH_LEEWAY = 10


class KeycloakClient:
    """Read-only HTTP client for Keycloak Admin API with automatic token management.

    Usage:
        client = KeycloakClient("http://keycloak:8080")
        client.authenticate_service_account("demo", "automation-cli", "secret")
        realms = client.get("/admin/realms").json()
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = REQUEST_TIMEOUT):
        """Initialize Keycloak client.

        Args:
            base_url: Keycloak base URL (defaults to KEYCLOAK_URL env var)
            timeout: Per-request timeout in seconds
        """
        self.base_url = (base_url or os.environ.get("KEYCLOAK_URL", "http://keycloak:8080")).rstrip("/")
        self.timeout = timeout
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None
        self._auth_params: Dict[str, Any] = {}

    def authenticate_service_account(self, auth_realm: str, client_id: str, client_secret: str) -> str:
        """Authenticate as service account and store credentials for auto-refresh.

        Args:
            auth_realm: Realm where service account client exists
            client_id: Service account client ID
            client_secret: Service account client secret

        Returns:
            Access token
        """
        self._auth_params = {
            "auth_realm": auth_realm,
            "client_id": client_id,
            "client_secret": client_secret,
        }
        self._refresh_token()
        return self._token

    def _refresh_token(self) -> None:
        payload = self._request_service_account_token(**self._auth_params)
        self._token = payload["access_token"]
        expires_in = int(payload.get("expires_in") or 60)
        self._token_expires_at = datetime.now() + timedelta(seconds=expires_in)

    def _ensure_authenticated(self) -> None:
        """Ensure we have a valid token, refreshing if necessary."""
        if not self._token or not self._token_expires_at:
            raise KeycloakAuthenticationError(
                "Not authenticated - call authenticate_service_account first"
            )

        if datetime.now() >= self._token_expires_at - timedelta(seconds=TOKEN_REFRESH_LEEWAY):
            if not self._auth_params:
                raise KeycloakAuthenticationError("Access token expired and no credentials are available to refresh it")
            self._refresh_token()

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute GET request with automatic authentication.

        Args:
            path: API endpoint path (e.g., "/admin/realms/demo/users/<id>")
            params: Query parameters
            **kwargs: Additional arguments for requests.get

        Returns:
            Response object

        Raises:
            KeycloakAPIError: On HTTP error or when the request fails in transit
        """
        self._ensure_authenticated()
        url = f"{self.base_url}{path}"
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {self._token}"

        try:
            resp = requests.get(url, params=params, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise KeycloakAPIError(0, str(exc), url) from exc
        self._handle_error(resp)
        return resp

    def _request_service_account_token(self, auth_realm: str, client_id: str, client_secret: str) -> Dict[str, Any]:
        """Fetch a service account token using client credentials flow."""
        url = f"{self.base_url}/realms/{auth_realm}/protocol/openid-connect/token"
        data = {
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": client_secret,
        }
        try:
            resp = requests.post(url, data=data, timeout=self.timeout)
        except requests.RequestException as exc:
            raise KeycloakAuthenticationError(f"Token request to {url} failed: {exc}") from exc
        if resp.status_code != 200:
            raise KeycloakAPIError(resp.status_code, resp.text, url)
        return resp.json()

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Args:
            resp: Response object to check

        Raises:
            KeycloakAPIError: If response status indicates error
        """
        if resp.status_code >= 400:
            raise KeycloakAPIError(resp.status_code, resp.text, resp.url)


def create_client_with_token(kc_url: str, token: str, expires_in: int = 3600) -> KeycloakClient:
    """Create a pre-authenticated KeycloakClient from an existing access token.

    Useful when the caller already holds an admin token (e.g. forwarded from
    an event listener). The client cannot refresh a token it did not obtain.

    Args:
        kc_url: Keycloak base URL
        token: Pre-obtained access token
        expires_in: Token validity in seconds (default: 1 hour)

    Returns:
        KeycloakClient instance with token pre-set
    """
    client = KeycloakClient(kc_url)
    client._token = token
    client._token_expires_at = datetime.now() + timedelta(seconds=expires_in)
    return client
