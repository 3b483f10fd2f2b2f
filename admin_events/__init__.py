"""Keycloak admin event interpreter.

To interpret an event:
    from admin_events.core.events import AdminEvent
    from admin_events.core.event_parser import EventParser

To look up directory data in a live Keycloak:
    from admin_events.core.keycloak import KeycloakClient, KeycloakDirectoryGateway
"""
