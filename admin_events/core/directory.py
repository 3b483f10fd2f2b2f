"""Directory gateway contract and read-only entity snapshots.

The org-role validator never talks to Keycloak directly; it goes through a
``DirectoryGateway``. ``admin_events.core.keycloak.KeycloakDirectoryGateway``
implements it over the Admin REST API, tests use an in-memory fake.

Lookups return ``None`` when an entity does not exist and raise
``DirectoryLookupError`` when the directory itself fails.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Protocol

from .exceptions import DirectoryLookupError


@dataclass(frozen=True)
class Realm:
    id: str
    name: str


@dataclass(frozen=True)
class User:
    id: str
    username: Optional[str] = None


@dataclass(frozen=True)
class Group:
    """Group snapshot; org groups are the top-level (parent-less) ones."""
    id: str
    name: str
    parent_id: Optional[str] = None
    path: Optional[str] = None

    @property
    def is_top_level(self) -> bool:
        if self.parent_id is not None:
            return False
        # Older Keycloak versions omit parentId, fall back to path depth
        if self.path:
            return self.path.strip("/").count("/") == 0
        return True


@dataclass(frozen=True)
class Client:
    id: str
    client_id: str
    name: Optional[str] = None


@dataclass(frozen=True)
class Role:
    id: str
    name: str


class DirectoryGateway(Protocol):
    """Read-only lookups against the identity provider's live data."""

    def get_realm(self, realm_id: str) -> Optional[Realm]:
        ...

    def get_user_by_id(self, realm: Realm, user_id: str) -> Optional[User]:
        ...

    def get_user_groups(self, realm: Realm, user: User) -> List[Group]:
        ...

    def get_client_by_client_id(self, realm: Realm, client_id: str) -> Optional[Client]:
        ...

    def get_client_by_id(self, realm: Realm, client_uuid: str) -> Optional[Client]:
        ...

    def get_client_roles(self, realm: Realm, client: Client) -> List[Role]:
        ...

    def get_role_by_id(self, realm: Realm, role_id: str) -> Optional[Role]:
        ...


def resolve_realm(gateway: DirectoryGateway, realm_id: str) -> Realm:
    """Look up a realm that must exist.

    Raises:
        DirectoryLookupError: Realm unknown to the directory
    """
    realm = gateway.get_realm(realm_id)
    if realm is None:
        raise DirectoryLookupError(f"Realm '{realm_id}' not found")
    return realm
