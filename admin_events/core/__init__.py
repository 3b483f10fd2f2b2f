"""Core admin-event interpretation logic.

Pure Python, independent of how events are delivered (listener SPI, webhook,
queue) and of the identity provider runtime.

Module Structure:
    - events.py        : AdminEvent model and Keycloak resource/operation enums
    - classifier.py    : Object type, operation kind and resource path parsing
    - extractor.py     : Attribute extraction from event representations
    - directory.py     : DirectoryGateway protocol and entity snapshots
    - org_roles.py     : Organization -> client role validation
    - event_parser.py  : Per-event facade combining the above
    - exceptions.py    : Typed errors (AdminEventError hierarchy)
    - keycloak/        : DirectoryGateway over the Keycloak Admin REST API

Usage Pattern:
    from admin_events.core.events import AdminEvent
    from admin_events.core.event_parser import EventParser

    parser = EventParser(AdminEvent.from_dict(payload), gateway)
    parsed = parser.parse()
    if parsed.is_write and parser.is_user_event():
        result = parser.validate_role_in_user_org_clients("viewer")
"""
