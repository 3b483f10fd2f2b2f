"""Command-line helper for interpreting Keycloak admin events.

This module serves as a CLI wrapper around admin_events.core.

Examples:
    # Classify an exported event (or a list of events) without touching Keycloak
    python scripts/admin_event.py classify --event event.json

    # Resolve roles-by-id subjects to role names against a live Keycloak
    python scripts/admin_event.py translate-subject --event event.json

    # Check whether a user's organizations grant a client role
    python scripts/admin_event.py validate-role --realm demo --user-id <uuid> --role viewer
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from admin_events.config.settings import AppConfig, load_settings
from admin_events.core.directory import DirectoryGateway
from admin_events.core.event_parser import EventParser
from admin_events.core.events import AdminEvent
from admin_events.core.exceptions import AdminEventError
from admin_events.core.keycloak import (
    KeycloakClient,
    KeycloakDirectoryGateway,
    KeycloakError,
    create_client_with_token,
)
from admin_events.core.org_roles import OrgRoleValidator, fixed_org_name, org_name_to_client_id

logger = logging.getLogger("admin_events.cli")


def load_events(source: str) -> list[AdminEvent]:
    """Read one event or a JSON array of events from a file ('-' for stdin)."""
    if source == "-":
        payload = json.load(sys.stdin)
    else:
        with open(source, encoding="utf-8") as f:
            payload = json.load(f)
    if isinstance(payload, list):
        return [AdminEvent.from_dict(item) for item in payload]
    return [AdminEvent.from_dict(payload)]


def interpret_event(parser: EventParser) -> dict[str, Any]:
    """Classification plus best-effort id/name extraction for one event."""
    result: dict[str, Any] = {"id": parser.event.id, "summary": parser.summary()}
    try:
        result.update(parser.parse().to_dict())
    except AdminEventError as e:
        result["error"] = str(e)
        return result

    for key, getter in (("objectId", lambda: parser.object_id), ("objectName", lambda: parser.object_name)):
        try:
            result[key] = getter()
        except AdminEventError as e:
            logger.debug("Event %s: %s", parser.event.id, e)
            result[key] = None
    return result


def build_gateway(args: argparse.Namespace, cfg: AppConfig) -> DirectoryGateway:
    """Authenticated Keycloak gateway from CLI flags, falling back to settings."""
    kc_url = args.kc_url or cfg.keycloak_url
    if args.token:
        client = create_client_with_token(kc_url, args.token)
        client.timeout = cfg.request_timeout
    else:
        client = KeycloakClient(kc_url, timeout=cfg.request_timeout)
        client.authenticate_service_account(
            args.auth_realm or cfg.keycloak_service_realm,
            args.svc_client_id or cfg.keycloak_service_client_id,
            args.svc_client_secret or cfg.service_client_secret_resolved,
        )
    return KeycloakDirectoryGateway(client)


def _org_name_resolver(args: argparse.Namespace, cfg: AppConfig):
    override = args.org_name_override or cfg.org_name_override
    return fixed_org_name(override) if override else org_name_to_client_id


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def main() -> None:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Keycloak admin event interpreter")
    parser.add_argument("--kc-url", default=os.environ.get("KEYCLOAK_URL"))
    parser.add_argument("--auth-realm", default=os.environ.get("KEYCLOAK_SERVICE_REALM"))
    parser.add_argument("--svc-client-id", default=os.environ.get("KEYCLOAK_SERVICE_CLIENT_ID"))
    parser.add_argument("--svc-client-secret", default=os.environ.get("KEYCLOAK_SERVICE_CLIENT_SECRET"))
    parser.add_argument("--token", default=os.environ.get("KEYCLOAK_ACCESS_TOKEN"),
                        help="Pre-obtained admin access token (skips service account login)")
    parser.add_argument("--log-level", default=os.environ.get("LOG_LEVEL", "WARNING"))

    sub = parser.add_subparsers(dest="cmd")

    sc = sub.add_parser("classify", help="Classify events without contacting Keycloak")
    sc.add_argument("--event", required=True, help="Event JSON file, or '-' for stdin")

    st = sub.add_parser("translate-subject", help="Resolve the event subject (role ids become names)")
    st.add_argument("--event", required=True, help="Event JSON file, or '-' for stdin")

    sv = sub.add_parser("validate-role", help="Check a role against the user's organization clients")
    sv.add_argument("--realm", default=None, help="Defaults to KEYCLOAK_REALM")
    sv.add_argument("--user-id", required=True)
    sv.add_argument("--role", required=True)
    sv.add_argument("--org-name-override", default=None,
                    help="Look up this client for every organization (legacy behaviour)")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.cmd:
        parser.print_help()
        return

    if args.cmd == "classify":
        try:
            events = load_events(args.event)
        except (OSError, ValueError, AdminEventError) as e:
            print(f"[classify] Error: {e}", file=sys.stderr)
            sys.exit(1)
        results = [interpret_event(EventParser(event)) for event in events]
        _emit(results[0] if len(results) == 1 else results)
        if any("error" in result for result in results):
            sys.exit(1)
        return

    try:
        cfg = load_settings()
    except (RuntimeError, ValueError) as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        gateway = build_gateway(args, cfg)
    except (KeycloakError, ValueError) as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.cmd == "translate-subject":
        try:
            events = load_events(args.event)
            results = []
            for event in events:
                event_parser = EventParser(event, gateway)
                results.append({
                    "id": event.id,
                    "summary": event_parser.summary(),
                    "subjectId": event_parser.translate_subject_id(),
                })
        except (OSError, ValueError, AdminEventError) as e:
            print(f"[translate-subject] Error: {e}", file=sys.stderr)
            sys.exit(1)
        _emit(results[0] if len(results) == 1 else results)
    elif args.cmd == "validate-role":
        validator = OrgRoleValidator(gateway, org_name_resolver=_org_name_resolver(args, cfg))
        try:
            result = validator.validate_role_in_user_org_clients(
                args.realm or cfg.keycloak_realm, args.user_id, args.role
            )
        except AdminEventError as e:
            print(f"[validate-role] Error: {e}", file=sys.stderr)
            sys.exit(1)
        _emit(result.to_dict())
        if not result.granted:
            sys.exit(1)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
