"""Per-event facade over classification, extraction and org-role checks.

Binds one ``AdminEvent`` (and optionally a ``DirectoryGateway``) so callers
such as event listeners can ask questions about "this event" without passing
the resource path and realm around.
"""
from __future__ import annotations
import logging
from typing import List, Optional

from . import classifier
from .classifier import ObjectType, OperationKind, ParsedEvent
from .directory import DirectoryGateway, Group, resolve_realm
from .events import AdminEvent
from .exceptions import DirectoryLookupError, MalformedEventError
from .extractor import AttributeExtractor
from .org_roles import OrgNameResolver, OrgRoleValidator, ValidationResult, org_name_to_client_id


class EventParser:
    """Interpret a single admin event."""

    def __init__(
        self,
        event: AdminEvent,
        gateway: Optional[DirectoryGateway] = None,
        *,
        org_name_resolver: OrgNameResolver = org_name_to_client_id,
        logger: Optional[logging.Logger] = None,
    ):
        self.event = event
        self.gateway = gateway
        self.org_name_resolver = org_name_resolver
        self.logger = logger or logging.getLogger(__name__)
        self._extractor = AttributeExtractor()

    # ── Classification ──────────────────────────────────────────────────────
    def parse(self) -> ParsedEvent:
        return classifier.classify(self.event)

    @property
    def object_type(self) -> ObjectType:
        return classifier.classify_object_type(self.event.resource_type, self.event.id)

    @property
    def subject_type(self) -> ObjectType:
        return classifier.classify_user_type(self.event.resource_path)

    @property
    def operation_kind(self) -> OperationKind:
        return classifier.operation_kind(self.event.operation_type)

    def is_write_operation(self) -> bool:
        return self.operation_kind is OperationKind.WRITE

    def is_delete_operation(self) -> bool:
        return self.operation_kind is OperationKind.DELETE

    @property
    def resource_name(self) -> str:
        return classifier.resource_name(self.event.resource_path)

    @property
    def target_id(self) -> str:
        return classifier.target_id(self.event.resource_path)

    def is_user_event(self) -> bool:
        return classifier.is_user_event(self.event.resource_path)

    def is_role_event(self) -> bool:
        return classifier.is_role_event(self.event.resource_path)

    def is_group_event(self) -> bool:
        return classifier.is_group_event(self.event.resource_path)

    @property
    def authenticated_user_id(self) -> Optional[str]:
        return self.event.auth_details.user_id

    # ── Representation ──────────────────────────────────────────────────────
    @property
    def object_id(self) -> str:
        return self._extractor.extract_id(self.event.representation)

    @property
    def object_name(self) -> str:
        return self._extractor.extract_name(self.event.representation)

    # ── Directory-backed lookups ────────────────────────────────────────────
    def _require_gateway(self) -> DirectoryGateway:
        if self.gateway is None:
            raise DirectoryLookupError("No directory gateway configured for this event")
        return self.gateway

    def _require_realm_id(self) -> str:
        if not self.event.realm_id:
            raise MalformedEventError(f"Admin event {self.event.id} has no realmId")
        return self.event.realm_id

    def find_role_name_in_realm(self, role_id: str) -> Optional[str]:
        """Resolve a role id to its name in the event's realm (None if absent)."""
        gateway = self._require_gateway()
        realm_id = self._require_realm_id()
        realm = resolve_realm(gateway, realm_id)
        role = gateway.get_role_by_id(realm, role_id)
        return role.name if role else None

    def translate_subject_id(self) -> str:
        """Target id, or the role name when the event targets roles-by-id.

        Raises:
            RoleNotFoundError: Role id unknown in the event's realm
        """
        return classifier.translate_subject_id(
            self.event.resource_path,
            self.find_role_name_in_realm,
            realm_id=self.event.realm_id,
        )

    def _validator(self) -> OrgRoleValidator:
        return OrgRoleValidator(
            self._require_gateway(),
            org_name_resolver=self.org_name_resolver,
            logger=self.logger,
        )

    def users_organizations(self) -> List[Group]:
        """Top-level groups of the user targeted by this event."""
        return self._validator().users_organizations(self._require_realm_id(), self.target_id)

    def validate_role_in_user_org_clients(self, role_name: str) -> ValidationResult:
        """Org-role check for the user targeted by this event."""
        return self._validator().validate_role_in_user_org_clients(
            self._require_realm_id(), self.target_id, role_name
        )

    # ── Diagnostics ─────────────────────────────────────────────────────────
    def summary(self) -> str:
        return self.event.summary()

    def __str__(self) -> str:
        return self.summary()
