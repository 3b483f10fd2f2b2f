"""Keycloak admin event representation.

Mirrors the JSON shape Keycloak emits for administrative events (the
``AdminEvent`` model of the admin events API) so events can be consumed from
a webhook payload, a queue message or an exported event list.

Usage:
    event = AdminEvent.from_dict({
        "id": "evt-1",
        "realmId": "demo",
        "resourceType": "GROUP_MEMBERSHIP",
        "operationType": "CREATE",
        "resourcePath": "users/u1/groups/g1",
        "representation": '{"id": "g1", "name": "org-a"}',
        "authDetails": {"realmId": "master", "clientId": "admin-cli",
                        "userId": "admin-id", "ipAddress": "127.0.0.1"},
    })
"""
from __future__ import annotations
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .exceptions import MalformedEventError, UnsupportedResourceTypeError


class ResourceType(str, Enum):
    """Resource types Keycloak attaches to admin events."""
    REALM = "REALM"
    REALM_ROLE = "REALM_ROLE"
    REALM_ROLE_MAPPING = "REALM_ROLE_MAPPING"
    REALM_SCOPE_MAPPING = "REALM_SCOPE_MAPPING"
    AUTH_FLOW = "AUTH_FLOW"
    AUTH_EXECUTION_FLOW = "AUTH_EXECUTION_FLOW"
    AUTH_EXECUTION = "AUTH_EXECUTION"
    AUTHENTICATOR_CONFIG = "AUTHENTICATOR_CONFIG"
    REQUIRED_ACTION = "REQUIRED_ACTION"
    IDENTITY_PROVIDER = "IDENTITY_PROVIDER"
    IDENTITY_PROVIDER_MAPPER = "IDENTITY_PROVIDER_MAPPER"
    PROTOCOL_MAPPER = "PROTOCOL_MAPPER"
    USER = "USER"
    USER_LOGIN_FAILURE = "USER_LOGIN_FAILURE"
    USER_SESSION = "USER_SESSION"
    USER_FEDERATION_PROVIDER = "USER_FEDERATION_PROVIDER"
    USER_FEDERATION_MAPPER = "USER_FEDERATION_MAPPER"
    GROUP = "GROUP"
    GROUP_MEMBERSHIP = "GROUP_MEMBERSHIP"
    CLIENT = "CLIENT"
    CLIENT_INITIAL_ACCESS_MODEL = "CLIENT_INITIAL_ACCESS_MODEL"
    CLIENT_ROLE = "CLIENT_ROLE"
    CLIENT_ROLE_MAPPING = "CLIENT_ROLE_MAPPING"
    CLIENT_SCOPE = "CLIENT_SCOPE"
    CLIENT_SCOPE_MAPPING = "CLIENT_SCOPE_MAPPING"
    CLIENT_SCOPE_CLIENT_MAPPING = "CLIENT_SCOPE_CLIENT_MAPPING"
    CLUSTER_NODE = "CLUSTER_NODE"
    COMPONENT = "COMPONENT"
    AUTHORIZATION_RESOURCE_SERVER = "AUTHORIZATION_RESOURCE_SERVER"
    AUTHORIZATION_RESOURCE = "AUTHORIZATION_RESOURCE"
    AUTHORIZATION_SCOPE = "AUTHORIZATION_SCOPE"
    AUTHORIZATION_POLICY = "AUTHORIZATION_POLICY"
    ORGANIZATION = "ORGANIZATION"
    ORGANIZATION_MEMBERSHIP = "ORGANIZATION_MEMBERSHIP"
    CUSTOM = "CUSTOM"


class OperationType(str, Enum):
    """Operation types Keycloak attaches to admin events."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ACTION = "ACTION"


@dataclass(frozen=True)
class AuthDetails:
    """Who performed the admin operation (diagnostics only)."""
    realm_id: Optional[str] = None
    client_id: Optional[str] = None
    user_id: Optional[str] = None
    ip_address: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "AuthDetails":
        payload = payload or {}
        return cls(
            realm_id=payload.get("realmId"),
            client_id=payload.get("clientId"),
            user_id=payload.get("userId"),
            ip_address=payload.get("ipAddress"),
        )


@dataclass(frozen=True)
class AdminEvent:
    """A single administrative change event, read-only."""
    resource_type: ResourceType
    operation_type: OperationType
    resource_path: str
    representation: Optional[str] = None
    auth_details: AuthDetails = field(default_factory=AuthDetails)
    realm_id: Optional[str] = None
    error: Optional[str] = None
    id: Optional[str] = None
    time: Optional[int] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AdminEvent":
        """Build an event from Keycloak's camelCase JSON representation.

        A representation that arrives already decoded is serialized back to
        JSON text without escaping non-ASCII characters. String values that
        contain a double quote still fail attribute extraction, since the
        extractor strips every backslash before parsing.

        Args:
            payload: Decoded admin event JSON

        Returns:
            AdminEvent instance

        Raises:
            MalformedEventError: Missing required fields or unknown operation type
            UnsupportedResourceTypeError: Unknown resource type tag
        """
        if not isinstance(payload, dict):
            raise MalformedEventError("Admin event payload must be a JSON object")

        event_id = payload.get("id")
        missing = [key for key in ("resourceType", "operationType", "resourcePath") if not payload.get(key)]
        if missing:
            raise MalformedEventError(f"Admin event {event_id} is missing required fields: {', '.join(missing)}")

        raw_resource_type = str(payload["resourceType"])
        try:
            resource_type = ResourceType(raw_resource_type)
        except ValueError:
            raise UnsupportedResourceTypeError(event_id, raw_resource_type)

        raw_operation_type = str(payload["operationType"])
        try:
            operation_type = OperationType(raw_operation_type)
        except ValueError:
            raise MalformedEventError(f"Admin event {event_id} has unknown operationType: {raw_operation_type}")

        # Keycloak sometimes ships the representation already decoded
        representation = payload.get("representation")
        if representation is not None and not isinstance(representation, str):
            representation = json.dumps(representation, ensure_ascii=False)

        auth_details = AuthDetails.from_dict(payload.get("authDetails"))

        return cls(
            resource_type=resource_type,
            operation_type=operation_type,
            resource_path=str(payload["resourcePath"]),
            representation=representation,
            auth_details=auth_details,
            realm_id=payload.get("realmId"),
            error=payload.get("error"),
            id=event_id,
            time=payload.get("time"),
        )

    def summary(self) -> str:
        """Single-line diagnostic summary, field order is log-compatible."""
        parts = [
            f"AdminEvent resourceType={self.resource_type.value}",
            f"operationType={self.operation_type.value}",
            f"realmId={self.auth_details.realm_id}",
            f"clientId={self.auth_details.client_id}",
            f"userId={self.auth_details.user_id}",
            f"ipAddress={self.auth_details.ip_address}",
            f"resourcePath={self.resource_path}",
        ]
        if self.error is not None:
            parts.append(f"error={self.error}")
        return ", ".join(parts)
