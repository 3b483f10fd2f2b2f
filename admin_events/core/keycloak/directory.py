"""DirectoryGateway implementation over the Keycloak Admin REST API."""
from __future__ import annotations
import logging
from typing import List, Optional
from urllib.parse import quote

from ..directory import Client, Group, Realm, Role, User
from ..exceptions import DirectoryLookupError
from .client import KeycloakClient
from .exceptions import KeycloakAPIError, KeycloakError

logger = logging.getLogger(__name__)


class KeycloakDirectoryGateway:
    """Read-only directory lookups backed by an authenticated ``KeycloakClient``.

    Every call is a single GET with no caching and no retries. A 404 maps to
    ``None``; any other failure raises ``DirectoryLookupError``.
    """

    def __init__(self, client: KeycloakClient):
        """Initialize gateway.

        Args:
            client: Authenticated Keycloak client
        """
        self.client = client

    def _get_json(self, path: str, params: Optional[dict] = None, *, allow_missing: bool = False):
        try:
            return self.client.get(path, params=params).json()
        except KeycloakAPIError as exc:
            if allow_missing and exc.is_not_found:
                return None
            raise DirectoryLookupError(f"Keycloak lookup {path} failed: {exc}") from exc
        except (KeycloakError, ValueError) as exc:
            raise DirectoryLookupError(f"Keycloak lookup {path} failed: {exc}") from exc

    @staticmethod
    def _realm_path(realm: Realm) -> str:
        return f"/admin/realms/{quote(realm.name, safe='')}"

    def get_realm(self, realm_id: str) -> Optional[Realm]:
        """Find a realm by id, falling back to its name.

        Admin events carry the realm id, while the REST API addresses realms by
        name, so the realm list is scanned for either.
        """
        for realm in self._get_json("/admin/realms") or []:
            if realm_id in (realm.get("id"), realm.get("realm")):
                return Realm(id=realm.get("id") or realm_id, name=realm["realm"])
        logger.debug("Realm %s not found", realm_id)
        return None

    def get_user_by_id(self, realm: Realm, user_id: str) -> Optional[User]:
        user = self._get_json(
            f"{self._realm_path(realm)}/users/{quote(user_id, safe='')}", allow_missing=True
        )
        if not user:
            return None
        return User(id=user["id"], username=user.get("username"))

    def get_user_groups(self, realm: Realm, user: User) -> List[Group]:
        groups = self._get_json(
            f"{self._realm_path(realm)}/users/{quote(user.id, safe='')}/groups",
            params={"briefRepresentation": "false"},
        ) or []
        return [
            Group(
                id=group["id"],
                name=group.get("name", ""),
                parent_id=group.get("parentId"),
                path=group.get("path"),
            )
            for group in groups
        ]

    def get_client_by_client_id(self, realm: Realm, client_id: str) -> Optional[Client]:
        clients = self._get_json(f"{self._realm_path(realm)}/clients", params={"clientId": client_id}) or []
        # Exact match on clientId, the search parameter may be fuzzy
        for client in clients:
            if client.get("clientId") == client_id:
                return self._to_client(client)
        return None

    def get_client_by_id(self, realm: Realm, client_uuid: str) -> Optional[Client]:
        client = self._get_json(
            f"{self._realm_path(realm)}/clients/{quote(client_uuid, safe='')}", allow_missing=True
        )
        return self._to_client(client) if client else None

    def get_client_roles(self, realm: Realm, client: Client) -> List[Role]:
        roles = self._get_json(f"{self._realm_path(realm)}/clients/{quote(client.id, safe='')}/roles") or []
        return [Role(id=role["id"], name=role["name"]) for role in roles]

    def get_role_by_id(self, realm: Realm, role_id: str) -> Optional[Role]:
        role = self._get_json(
            f"{self._realm_path(realm)}/roles-by-id/{quote(role_id, safe='')}", allow_missing=True
        )
        if not role:
            return None
        return Role(id=role["id"], name=role["name"])

    @staticmethod
    def _to_client(client: dict) -> Client:
        return Client(id=client["id"], client_id=client["clientId"], name=client.get("name"))
