"""Process configuration, decoded once at startup."""

from __future__ import annotations

import base64
import binascii
import json
import os
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigurationError

CREDENTIALS_ENV_VAR = "FIREBASE_BASE64_KEY"
REQUIRED_SERVICE_ACCOUNT_FIELDS = ("project_id", "client_email", "private_key")


def decode_service_account(encoded: str | None) -> dict[str, Any]:
    """Decode a base64 encoded service-account JSON blob.

    Raises:
        ConfigurationError: If the blob is missing, not base64, not JSON or
            lacks one of the fields needed to sign credential exchanges.
    """
    if not encoded:
        raise ConfigurationError(
            f"{CREDENTIALS_ENV_VAR} environment variable is missing."
        )

    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        info = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise ConfigurationError(
            f"Failed to decode and parse {CREDENTIALS_ENV_VAR}. "
            "Ensure it's correctly base64-encoded."
        ) from e

    if not isinstance(info, dict):
        raise ConfigurationError(
            f"Decoded {CREDENTIALS_ENV_VAR} does not contain a JSON object."
        )

    missing = [key for key in REQUIRED_SERVICE_ACCOUNT_FIELDS if not info.get(key)]
    if missing:
        raise ConfigurationError(
            f"Decoded {CREDENTIALS_ENV_VAR} is missing: {', '.join(missing)}."
        )
    return info


@dataclass(frozen=True)
class Settings:
    """Explicit configuration handed to the app factory and its extensions."""

    service_account: dict[str, Any] = field(repr=False)
    secret_key: str = "dev"
    log_level: str = "INFO"
    app_version: str = "dev"

    @property
    def project_id(self) -> str:
        """The Google Cloud project owning the Firestore database."""
        return self.service_account["project_id"]

    @classmethod
    def from_env(cls, environ: Any = None) -> Settings:
        """Build settings from the process environment, failing fast."""
        if environ is None:
            environ = os.environ
        return cls(
            service_account=decode_service_account(environ.get(CREDENTIALS_ENV_VAR)),
            secret_key=environ.get("SECRET_KEY") or "dev",
            log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
            app_version=environ.get("APP_VERSION", "dev"),
        )
