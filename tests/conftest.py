"""Pytest shared fixtures for admin event tests."""
import json
import pathlib
import sys
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from admin_events.core.directory import Client, Group, Realm, Role, User
from admin_events.core.events import AdminEvent, AuthDetails, OperationType, ResourceType
from admin_events.core.exceptions import DirectoryLookupError


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """
    Prevent unit tests from hitting a live Keycloak.

    Tests that need HTTP install their own stubs on top of this one;
    integration tests (@pytest.mark.integration) skip it.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _unexpected(method):
        def _stub(url, *args, **kwargs):
            raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")
        return _stub

    monkeypatch.setattr(requests, "post", _unexpected("POST"))
    monkeypatch.setattr(requests, "get", _unexpected("GET"))


class StubResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload, status_code: int = 200, url: str = ""):
        self._payload = payload
        self.status_code = status_code
        self.url = url
        self.text = json.dumps(payload)

    def json(self):
        return self._payload


@pytest.fixture()
def stub_response():
    return StubResponse


# ─────────────────────────────────────────────────────────────────────────────
# Events
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def make_event():
    """Factory for AdminEvent instances with sensible defaults."""

    def _make(**overrides) -> AdminEvent:
        base = dict(
            id="evt-1",
            realm_id="realm-1",
            resource_type=ResourceType.GROUP_MEMBERSHIP,
            operation_type=OperationType.CREATE,
            resource_path="users/u1/groups/g1",
            representation='{"id": "g1", "name": "org-a", "path": "/org-a"}',
            auth_details=AuthDetails(
                realm_id="master",
                client_id="security-admin-console",
                user_id="admin-1",
                ip_address="10.0.0.7",
            ),
        )
        base.update(overrides)
        return AdminEvent(**base)

    return _make


# ─────────────────────────────────────────────────────────────────────────────
# In-memory directory
# ─────────────────────────────────────────────────────────────────────────────
class InMemoryDirectory:
    """DirectoryGateway fake backed by plain dicts.

    Set ``fail_on`` to a method name to make that lookup raise
    DirectoryLookupError, and inspect ``calls`` to assert on lookups.
    """

    def __init__(self):
        self.realms: dict[str, Realm] = {}
        self.users: dict[tuple[str, str], User] = {}
        self.memberships: dict[str, list[Group]] = {}
        self.clients: dict[tuple[str, str], Client] = {}
        self.client_roles: dict[str, list[Role]] = {}
        self.realm_roles: dict[tuple[str, str], Role] = {}
        self.fail_on: Optional[str] = None
        self.calls: list[tuple] = []

    # Builders
    def add_realm(self, realm_id: str, name: Optional[str] = None) -> Realm:
        realm = Realm(id=realm_id, name=name or realm_id)
        self.realms[realm_id] = realm
        return realm

    def add_user(self, realm_id: str, user_id: str, groups=()) -> User:
        user = User(id=user_id, username=user_id)
        self.users[(realm_id, user_id)] = user
        self.memberships[user_id] = list(groups)
        return user

    def add_client(self, realm_id: str, client_uuid: str, client_id: str, roles=()) -> Client:
        client = Client(id=client_uuid, client_id=client_id, name=client_id)
        self.clients[(realm_id, client_uuid)] = client
        self.client_roles[client_uuid] = [Role(id=f"{client_uuid}-{name}", name=name) for name in roles]
        return client

    def add_realm_role(self, realm_id: str, role_id: str, name: str) -> Role:
        role = Role(id=role_id, name=name)
        self.realm_roles[(realm_id, role_id)] = role
        return role

    def _record(self, method: str, *args):
        self.calls.append((method,) + args)
        if self.fail_on == method:
            raise DirectoryLookupError(f"{method} unavailable")

    # DirectoryGateway
    def get_realm(self, realm_id):
        self._record("get_realm", realm_id)
        return self.realms.get(realm_id)

    def get_user_by_id(self, realm, user_id):
        self._record("get_user_by_id", realm.id, user_id)
        return self.users.get((realm.id, user_id))

    def get_user_groups(self, realm, user):
        self._record("get_user_groups", realm.id, user.id)
        return list(self.memberships.get(user.id, []))

    def get_client_by_client_id(self, realm, client_id):
        self._record("get_client_by_client_id", realm.id, client_id)
        for (realm_id, _), client in self.clients.items():
            if realm_id == realm.id and client.client_id == client_id:
                return client
        return None

    def get_client_by_id(self, realm, client_uuid):
        self._record("get_client_by_id", realm.id, client_uuid)
        return self.clients.get((realm.id, client_uuid))

    def get_client_roles(self, realm, client):
        self._record("get_client_roles", realm.id, client.id)
        return list(self.client_roles.get(client.id, []))

    def get_role_by_id(self, realm, role_id):
        self._record("get_role_by_id", realm.id, role_id)
        return self.realm_roles.get((realm.id, role_id))


@pytest.fixture()
def directory():
    """In-memory directory with one realm and an org-a/org-b setup.

    - user u1 belongs to org-a, org-b (top level) and org-a/team (nested)
    - client org-a defines roles viewer and editor
    - client org-b defines role editor
    """
    d = InMemoryDirectory()
    d.add_realm("realm-1", "demo")
    d.add_user(
        "realm-1",
        "u1",
        groups=[
            Group(id="g-a", name="org-a", path="/org-a"),
            Group(id="g-b", name="org-b", path="/org-b"),
            Group(id="g-team", name="team", parent_id="g-a", path="/org-a/team"),
        ],
    )
    d.add_client("realm-1", "c-a", "org-a", roles=["viewer", "editor"])
    d.add_client("realm-1", "c-b", "org-b", roles=["editor"])
    d.add_realm_role("realm-1", "r-1", "auditor")
    return d
