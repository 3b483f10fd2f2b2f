"""Admin event classification.

Keycloak encodes "what changed" two different ways: role and group mapping
changes carry a meaningful resource type, while direct user/group/role CRUD
is only distinguishable by the first segment of the resource path. Both
lookups live here as closed tables; anything unmapped raises a typed error.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from .events import AdminEvent, OperationType, ResourceType
from .exceptions import (
    MalformedResourcePathError,
    RoleNotFoundError,
    UnsupportedResourceNameError,
    UnsupportedResourceTypeError,
)

EVT_RESOURCE_USERS = "users"
EVT_RESOURCE_GROUPS = "groups"
EVT_RESOURCE_ROLES_BY_ID = "roles-by-id"


class ObjectType(str, Enum):
    USER = "user"
    ROLE = "role"
    GROUP = "group"


class OperationKind(str, Enum):
    WRITE = "write"
    DELETE = "delete"
    OTHER = "other"


RESOURCE_TYPE_OBJECTS = {
    ResourceType.REALM_ROLE_MAPPING: ObjectType.ROLE,
    ResourceType.REALM_ROLE: ObjectType.ROLE,
    ResourceType.CLIENT_ROLE_MAPPING: ObjectType.ROLE,
    ResourceType.GROUP_MEMBERSHIP: ObjectType.GROUP,
}

RESOURCE_NAME_OBJECTS = {
    EVT_RESOURCE_USERS: ObjectType.USER,
    EVT_RESOURCE_GROUPS: ObjectType.GROUP,
    EVT_RESOURCE_ROLES_BY_ID: ObjectType.ROLE,
}

# Direct CRUD events are classified from the resource path instead
PATH_CLASSIFIED_TYPES = {ResourceType.USER, ResourceType.GROUP}

RoleNameResolver = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class ParsedEvent:
    """Classification of a single admin event."""
    object_type: ObjectType
    operation_kind: OperationKind
    resource_name: str
    resource_id: str

    @property
    def is_write(self) -> bool:
        return self.operation_kind is OperationKind.WRITE

    @property
    def is_delete(self) -> bool:
        return self.operation_kind is OperationKind.DELETE

    def to_dict(self) -> dict:
        return {
            "objectType": self.object_type.value,
            "operationKind": self.operation_kind.value,
            "resourceName": self.resource_name,
            "resourceId": self.resource_id,
        }


def _path_segments(resource_path: Optional[str]) -> list[str]:
    segments = (resource_path or "").split("/")
    if len(segments) < 2 or not segments[0] or not segments[1]:
        raise MalformedResourcePathError(resource_path)
    return segments


def resource_name(resource_path: str) -> str:
    """Return the first path segment (e.g. 'users')."""
    return _path_segments(resource_path)[0]


def target_id(resource_path: str) -> str:
    """Return the second path segment, the id of the affected resource."""
    return _path_segments(resource_path)[1]


def classify_object_type(resource_type: Union[ResourceType, str], event_id: Optional[str] = None) -> ObjectType:
    """Map a role/group mapping resource type to its object type.

    Args:
        resource_type: Resource type tag (enum member or raw string)
        event_id: Event id, only used for diagnostics

    Returns:
        ObjectType.ROLE or ObjectType.GROUP

    Raises:
        UnsupportedResourceTypeError: Resource type is not a mapping type
    """
    tag = resource_type.value if isinstance(resource_type, ResourceType) else str(resource_type)
    try:
        return RESOURCE_TYPE_OBJECTS[ResourceType(tag)]
    except (KeyError, ValueError):
        raise UnsupportedResourceTypeError(event_id, tag)


def classify_user_type(resource_path: str) -> ObjectType:
    """Map the first resource path segment to its object type.

    Raises:
        MalformedResourcePathError: Fewer than two path segments
        UnsupportedResourceNameError: Segment is not users/groups/roles-by-id
    """
    name = resource_name(resource_path)
    try:
        return RESOURCE_NAME_OBJECTS[name]
    except KeyError:
        raise UnsupportedResourceNameError(name)


def operation_kind(operation_type: Union[OperationType, str]) -> OperationKind:
    """CREATE is a write, DELETE is a delete, everything else is other."""
    tag = operation_type.value if isinstance(operation_type, OperationType) else str(operation_type)
    if tag == OperationType.CREATE.value:
        return OperationKind.WRITE
    if tag == OperationType.DELETE.value:
        return OperationKind.DELETE
    return OperationKind.OTHER


def is_user_event(resource_path: str) -> bool:
    return resource_name(resource_path).lower() == EVT_RESOURCE_USERS


def is_role_event(resource_path: str) -> bool:
    return resource_name(resource_path).lower() == EVT_RESOURCE_ROLES_BY_ID


def is_group_event(resource_path: str) -> bool:
    return resource_name(resource_path).lower() == EVT_RESOURCE_GROUPS


def translate_subject_id(
    resource_path: str,
    role_name_resolver: RoleNameResolver,
    realm_id: Optional[str] = None,
) -> str:
    """Return the subject id, swapping role ids for role names.

    Args:
        resource_path: Event resource path
        role_name_resolver: Callable mapping a role id to its name (None if absent)
        realm_id: Realm used for the lookup, only used for diagnostics

    Returns:
        Role name for roles-by-id paths, the raw target id otherwise

    Raises:
        RoleNotFoundError: Resolver could not find the role id
    """
    subject_id = target_id(resource_path)
    if classify_user_type(resource_path) is not ObjectType.ROLE:
        return subject_id

    role_name = role_name_resolver(subject_id)
    if not role_name:
        raise RoleNotFoundError(subject_id, realm_id)
    return role_name


def classify(event: AdminEvent) -> ParsedEvent:
    """Classify an event into object type, operation kind and path parts.

    Mapping resource types use the resource-type table; direct USER and
    GROUP CRUD events fall back to path inspection.
    """
    if event.resource_type in PATH_CLASSIFIED_TYPES:
        object_type = classify_user_type(event.resource_path)
    else:
        object_type = classify_object_type(event.resource_type, event.id)

    return ParsedEvent(
        object_type=object_type,
        operation_kind=operation_kind(event.operation_type),
        resource_name=resource_name(event.resource_path),
        resource_id=target_id(event.resource_path),
    )
