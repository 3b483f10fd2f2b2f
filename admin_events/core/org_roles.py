"""Organization role validation.

An organization is a top-level group. Each organization is associated with
the client whose clientId equals the group name; that association is a naming
convention, not a stored reference, and is isolated in
``org_name_to_client_id`` so it can be swapped later.

Usage:
    validator = OrgRoleValidator(gateway)
    result = validator.validate_role_in_user_org_clients("demo", user_id, "viewer")
    if result.granted:
        print(result.matches)   # ["org-a-viewer"]
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .directory import Client, DirectoryGateway, Group, Realm, Role, resolve_realm

OrgNameResolver = Callable[[Group], str]


def org_name_to_client_id(group: Group) -> str:
    """Client id associated with an organization group (same name)."""
    return group.name


def fixed_org_name(org_name: str) -> OrgNameResolver:
    """Resolver that ignores the group and always returns ``org_name``.

    Reproduces the legacy listener, which looked up a hard-coded organization
    for every group. Only useful for parity with existing deployments.
    """
    def _resolve(group: Group) -> str:
        return org_name
    return _resolve


@dataclass
class ValidationResult:
    """Outcome of an org-role check; one ``<org>-<role>`` entry per match."""
    role_name: str
    matches: List[str] = field(default_factory=list)

    @property
    def granted(self) -> bool:
        return bool(self.matches)

    def to_dict(self) -> dict:
        return {"roleName": self.role_name, "matches": list(self.matches), "granted": self.granted}


class OrgRoleValidator:
    """Check whether a user's organizations grant a role on their clients."""

    def __init__(
        self,
        gateway: DirectoryGateway,
        *,
        org_name_resolver: OrgNameResolver = org_name_to_client_id,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize validator.

        Args:
            gateway: Directory lookups (Keycloak REST, in-memory fake, ...)
            org_name_resolver: Maps an organization group to a client id
            logger: Logger to use (defaults to the module logger)
        """
        self.gateway = gateway
        self.org_name_resolver = org_name_resolver
        self.logger = logger or logging.getLogger(__name__)

    def _realm(self, realm_id: str) -> Realm:
        return resolve_realm(self.gateway, realm_id)

    def users_organizations(self, realm_id: str, user_id: str) -> List[Group]:
        """Return the user's top-level groups, empty if the user does not exist."""
        realm = self._realm(realm_id)
        user = self.gateway.get_user_by_id(realm, user_id)
        if user is None:
            self.logger.debug("User %s not found in realm %s; no organizations", user_id, realm_id)
            return []
        return [group for group in self.gateway.get_user_groups(realm, user) if group.is_top_level]

    def find_client_by_org_name(self, realm_id: str, org_name: str) -> Optional[Client]:
        realm = self._realm(realm_id)
        return self.gateway.get_client_by_client_id(realm, org_name)

    def find_client_role(self, realm_id: str, client_uuid: str, role_name: str) -> Optional[Role]:
        """Return the client's role named ``role_name``, or None.

        Lookup failures are logged and reported as "no role"; this is the one
        place where directory errors do not fail the validation.
        """
        try:
            realm = self._realm(realm_id)
            client = self.gateway.get_client_by_id(realm, client_uuid)
            if client is None:
                return None
            for role in self.gateway.get_client_roles(realm, client):
                if role.name == role_name:
                    return role
            return None
        except Exception as exc:
            self.logger.warning(
                "Role lookup for '%s' on client %s failed, treating as absent: %s",
                role_name, client_uuid, exc,
            )
            return None

    def validate_role_in_user_org_clients(self, realm_id: str, user_id: str, role_name: str) -> ValidationResult:
        """Collect every organization whose client defines ``role_name``.

        Args:
            realm_id: Realm holding the user
            user_id: User to check
            role_name: Client role name to look for

        Returns:
            ValidationResult with one "<org>-<role>" match per hit
        """
        organizations = self.users_organizations(realm_id, user_id)
        for group in organizations:
            self.logger.debug("User %s organization: id=%s name=%s", user_id, group.id, group.name)

        result = ValidationResult(role_name=role_name)
        for group in organizations:
            org_name = self.org_name_resolver(group)
            client = self.find_client_by_org_name(realm_id, org_name)
            if client is None:
                continue
            role = self.find_client_role(realm_id, client.id, role_name)
            if role is None:
                continue
            self.logger.debug("Client %s grants role %s", client.client_id, role.name)
            result.matches.append(f"{org_name}-{role.name}")

        self.logger.info(
            "Role '%s' for user %s matched %d organization(s): %s",
            role_name, user_id, len(result.matches), result.matches,
        )
        return result
