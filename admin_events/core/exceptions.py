"""Typed exceptions raised while interpreting Keycloak admin events."""
from __future__ import annotations
from typing import Optional


class AdminEventError(Exception):
    """Base exception for all admin-event interpretation failures."""
    pass


class MalformedEventError(AdminEventError):
    """Event payload is missing required fields or carries unknown tags."""
    pass


class UnsupportedResourceTypeError(AdminEventError):
    """Resource type has no object-type mapping.

    Attributes:
        event_id: Identifier of the offending event (may be None)
        resource_type: Resource type tag that was not handled
    """

    def __init__(self, event_id: Optional[str], resource_type: str):
        self.event_id = event_id
        self.resource_type = resource_type
        super().__init__(f"Event is not handled, id:{event_id} resource: {resource_type}")


class UnsupportedResourceNameError(AdminEventError):
    """First resource path segment has no object-type mapping."""

    def __init__(self, resource_name: str):
        self.resource_name = resource_name
        super().__init__(f"Resource type is not handled: {resource_name}")


class MalformedResourcePathError(AdminEventError):
    """Resource path has fewer than two segments."""

    def __init__(self, resource_path: Optional[str]):
        self.resource_path = resource_path
        super().__init__(f"Resource path must be '<resourceName>/<id>[/...]', got: {resource_path!r}")


class AttributeParseError(AdminEventError):
    """Event representation could not be parsed as JSON."""

    def __init__(self, attribute_name: str, cause: Optional[Exception] = None):
        self.attribute_name = attribute_name
        self.cause = cause
        detail = f": {cause}" if cause else ": representation is empty"
        super().__init__(f"Unable to parse representation while reading '{attribute_name}'{detail}")


class AttributeMissingError(AdminEventError):
    """Requested attribute is absent or not a string."""

    def __init__(self, attribute_name: str):
        self.attribute_name = attribute_name
        super().__init__(f"Attribute '{attribute_name}' not found in representation")


class RoleNotFoundError(AdminEventError):
    """Role id could not be resolved in the realm."""

    def __init__(self, role_id: str, realm_id: Optional[str] = None):
        self.role_id = role_id
        self.realm_id = realm_id
        where = f" in realm '{realm_id}'" if realm_id else ""
        super().__init__(f"Role '{role_id}' not found{where}")


class DirectoryLookupError(AdminEventError):
    """Directory gateway lookup failed."""
    pass
