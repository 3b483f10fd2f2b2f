"""Keycloak Admin API access for the admin event interpreter.

Architecture:
- client.py: HTTP client with service-account authentication and auto-refresh
- directory.py: DirectoryGateway implementation over the Admin REST API
- exceptions.py: Typed exceptions for error handling

Usage:
    from admin_events.core.keycloak import KeycloakClient, KeycloakDirectoryGateway

    client = KeycloakClient("http://keycloak:8080")
    client.authenticate_service_account("demo", "automation-cli", "secret")
    gateway = KeycloakDirectoryGateway(client)
"""
from .client import (
    KeycloakClient,
    create_client_with_token,
    REQUEST_TIMEOUT,
)
from .directory import KeycloakDirectoryGateway
from .exceptions import (
    KeycloakError,
    KeycloakAPIError,
    KeycloakAuthenticationError,
)

__all__ = [
    # Client
    "KeycloakClient",
    "create_client_with_token",
    "REQUEST_TIMEOUT",

    # Gateway
    "KeycloakDirectoryGateway",

    # Exceptions
    "KeycloakError",
    "KeycloakAPIError",
    "KeycloakAuthenticationError",
]
