"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEMO_SERVICE_CLIENT_SECRET = "demo-service-secret"


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.info("Loaded %s from environment (fallback)", env_var)
            return secret_value

    return None


@dataclass
class AppConfig:
    """Application configuration container."""
    demo_mode: bool

    # Keycloak
    keycloak_url: str = ""
    keycloak_realm: str = "demo"
    keycloak_service_realm: str = "demo"
    request_timeout: float = 5.0

    # Service Account
    keycloak_service_client_id: str = "automation-cli"
    keycloak_service_client_secret: str = ""

    # Org-role validation: empty means "use the organization group name"
    org_name_override: str = ""

    @property
    def service_client_secret_resolved(self) -> str:
        """Get Keycloak service account client secret.

        Priority:
        1. Demo mode: hardcoded "demo-service-secret"
        2. Configured value in keycloak_service_client_secret

        Raises:
            ValueError: If secret not found in production mode
        """
        if self.demo_mode:
            return DEMO_SERVICE_CLIENT_SECRET
        if self.keycloak_service_client_secret:
            return self.keycloak_service_client_secret
        raise ValueError(
            "KEYCLOAK_SERVICE_CLIENT_SECRET not found. "
            "Set DEMO_MODE=true or provide secret via Docker secrets or environment variable."
        )


def _env_flag(var_name: str, default: str = "false") -> bool:
    return os.environ.get(var_name, default).strip().lower() == "true"


def load_settings() -> AppConfig:
    """Load settings from environment variables and /run/secrets.

    Raises:
        RuntimeError: Required setting missing outside demo mode
        ValueError: Malformed numeric setting
    """
    demo_mode = _env_flag("DEMO_MODE")

    keycloak_url = os.environ.get("KEYCLOAK_URL", "http://127.0.0.1:8080" if demo_mode else "").rstrip("/")
    if not keycloak_url:
        raise RuntimeError("Environment variable KEYCLOAK_URL is required in production mode.")

    keycloak_realm = os.environ.get("KEYCLOAK_REALM", "demo")
    keycloak_service_realm = os.environ.get("KEYCLOAK_SERVICE_REALM", keycloak_realm)
    keycloak_service_client_id = os.environ.get("KEYCLOAK_SERVICE_CLIENT_ID", "automation-cli")

    keycloak_service_client_secret = _load_secret_from_file(
        "keycloak_service_client_secret",
        "KEYCLOAK_SERVICE_CLIENT_SECRET",
    ) or ""

    raw_timeout = os.environ.get("KEYCLOAK_REQUEST_TIMEOUT", "5")
    try:
        request_timeout = float(raw_timeout)
    except ValueError:
        raise ValueError(f"KEYCLOAK_REQUEST_TIMEOUT must be a number, got {raw_timeout!r}")
    if request_timeout <= 0:
        raise ValueError("KEYCLOAK_REQUEST_TIMEOUT must be positive")

    org_name_override = os.environ.get("ORG_NAME_OVERRIDE", "").strip()

    mode_label = "DEMO" if demo_mode else "PRODUCTION"
    logger.info("Mode=%s; realm=%s; client_id=%s", mode_label, keycloak_realm, keycloak_service_client_id)
    if org_name_override:
        logger.warning(
            "ORG_NAME_OVERRIDE=%s: every organization resolves to this client (legacy behaviour)",
            org_name_override,
        )

    return AppConfig(
        demo_mode=demo_mode,
        keycloak_url=keycloak_url,
        keycloak_realm=keycloak_realm,
        keycloak_service_realm=keycloak_service_realm,
        request_timeout=request_timeout,
        keycloak_service_client_id=keycloak_service_client_id,
        keycloak_service_client_secret=keycloak_service_client_secret,
        org_name_override=org_name_override,
    )
