import pytest

from admin_events.core import classifier
from admin_events.core.classifier import ObjectType, OperationKind
from admin_events.core.events import OperationType, ResourceType
from admin_events.core.exceptions import (
    MalformedResourcePathError,
    RoleNotFoundError,
    UnsupportedResourceNameError,
    UnsupportedResourceTypeError,
)


@pytest.mark.parametrize(
    "resource_type, expected",
    [
        (ResourceType.REALM_ROLE_MAPPING, ObjectType.ROLE),
        (ResourceType.REALM_ROLE, ObjectType.ROLE),
        (ResourceType.CLIENT_ROLE_MAPPING, ObjectType.ROLE),
        (ResourceType.GROUP_MEMBERSHIP, ObjectType.GROUP),
        ("GROUP_MEMBERSHIP", ObjectType.GROUP),
    ],
)
def test_classify_object_type_mapping(resource_type, expected):
    assert classifier.classify_object_type(resource_type) is expected


@pytest.mark.parametrize(
    "resource_type",
    [rt for rt in ResourceType if rt not in classifier.RESOURCE_TYPE_OBJECTS],
)
def test_classify_object_type_rejects_unmapped_types(resource_type):
    with pytest.raises(UnsupportedResourceTypeError) as excinfo:
        classifier.classify_object_type(resource_type, event_id="evt-9")
    assert excinfo.value.event_id == "evt-9"
    assert excinfo.value.resource_type == resource_type.value


def test_classify_object_type_rejects_unknown_tag():
    with pytest.raises(UnsupportedResourceTypeError, match="resource: NOT_A_TYPE"):
        classifier.classify_object_type("NOT_A_TYPE")


@pytest.mark.parametrize(
    "path, expected",
    [
        ("users/u1", ObjectType.USER),
        ("users/u1/role-mappings/realm", ObjectType.USER),
        ("groups/g1/members", ObjectType.GROUP),
        ("roles-by-id/r1", ObjectType.ROLE),
    ],
)
def test_classify_user_type(path, expected):
    assert classifier.classify_user_type(path) is expected


def test_classify_user_type_rejects_unknown_resource_name():
    with pytest.raises(UnsupportedResourceNameError) as excinfo:
        classifier.classify_user_type("clients/c1")
    assert excinfo.value.resource_name == "clients"


@pytest.mark.parametrize("operation", list(OperationType))
def test_operation_kind_is_total_and_exclusive(operation):
    kind = classifier.operation_kind(operation)
    expected = {
        OperationType.CREATE: OperationKind.WRITE,
        OperationType.DELETE: OperationKind.DELETE,
    }.get(operation, OperationKind.OTHER)
    assert kind is expected
    assert not (kind is OperationKind.WRITE and kind is OperationKind.DELETE)


def test_operation_kind_accepts_raw_tags():
    assert classifier.operation_kind("CREATE") is OperationKind.WRITE
    assert classifier.operation_kind("whatever") is OperationKind.OTHER


def test_resource_name_and_target_id():
    assert classifier.resource_name("users/u1/groups/g1") == "users"
    assert classifier.target_id("users/u1/groups/g1") == "u1"


@pytest.mark.parametrize("path", ["", "users", "users/", "/u1", None])
def test_path_operations_reject_malformed_paths(path):
    for operation in (
        classifier.resource_name,
        classifier.target_id,
        classifier.classify_user_type,
        classifier.is_user_event,
    ):
        with pytest.raises(MalformedResourcePathError):
            operation(path)


def test_resource_name_predicates_ignore_case():
    assert classifier.is_user_event("Users/u1") is True
    assert classifier.is_role_event("ROLES-BY-ID/r1") is True
    assert classifier.is_group_event("groups/g1") is True
    assert classifier.is_group_event("users/u1") is False


def test_translate_subject_id_resolves_role_names():
    calls = []

    def resolver(role_id):
        calls.append(role_id)
        return "auditor"

    assert classifier.translate_subject_id("roles-by-id/r1", resolver) == "auditor"
    assert calls == ["r1"]


def test_translate_subject_id_passes_through_non_roles():
    def resolver(role_id):
        raise AssertionError("resolver must not be called for user paths")

    assert classifier.translate_subject_id("users/u1", resolver) == "u1"


def test_translate_subject_id_unknown_role():
    with pytest.raises(RoleNotFoundError) as excinfo:
        classifier.translate_subject_id("roles-by-id/missing", lambda role_id: None, realm_id="realm-1")
    assert excinfo.value.role_id == "missing"
    assert excinfo.value.realm_id == "realm-1"


class TestClassify:
    def test_group_membership_create(self, make_event):
        parsed = classifier.classify(make_event())
        assert parsed.object_type is ObjectType.GROUP
        assert parsed.operation_kind is OperationKind.WRITE
        assert parsed.resource_name == "users"
        assert parsed.resource_id == "u1"
        assert parsed.is_write and not parsed.is_delete

    def test_direct_user_crud_is_classified_by_path(self, make_event):
        event = make_event(
            resource_type=ResourceType.USER,
            operation_type=OperationType.DELETE,
            resource_path="users/u2",
        )
        parsed = classifier.classify(event)
        assert parsed.object_type is ObjectType.USER
        assert parsed.is_delete

    def test_unhandled_resource_type(self, make_event):
        event = make_event(resource_type=ResourceType.CLIENT, resource_path="clients/c1")
        with pytest.raises(UnsupportedResourceTypeError):
            classifier.classify(event)

    def test_to_dict(self, make_event):
        parsed = classifier.classify(make_event(operation_type=OperationType.UPDATE))
        assert parsed.to_dict() == {
            "objectType": "group",
            "operationKind": "other",
            "resourceName": "users",
            "resourceId": "u1",
        }
