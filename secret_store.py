"""API credential storage in the OS keychain via keyring."""

from __future__ import annotations

import logging
from typing import Optional

from errors import ConfigurationError

try:
    import keyring
    import keyring.errors
except Exception:  # pragma: no cover
    keyring = None  # type: ignore

logger = logging.getLogger(__name__)

SERVICE_NAME = "cc-ai"
ACCOUNT_NAME = "api-key"


class KeyringSecretStore:
    def get(self, service: str, account: str) -> Optional[str]:
        if keyring is None:
            logger.warning("keyring is not installed; no credential available")
            return None
        try:
            return keyring.get_password(service, account) or None
        except keyring.errors.KeyringError as exc:
            logger.error("Error retrieving credential: %s", exc)
            return None

    def set(self, service: str, account: str, secret: str) -> None:
        if keyring is None:
            raise ConfigurationError("keyring is not installed")
        try:
            keyring.set_password(service, account, secret)
        except keyring.errors.KeyringError as exc:
            logger.error("Error saving credential: %s", exc)
            raise ConfigurationError(f"could not save credential: {exc}") from exc

    def delete(self, service: str, account: str) -> None:
        if keyring is None:
            return
        try:
            keyring.delete_password(service, account)
        except keyring.errors.PasswordDeleteError:
            logger.debug("No stored credential for %s/%s", service, account)
        except keyring.errors.KeyringError as exc:
            logger.error("Error deleting credential: %s", exc)
            raise ConfigurationError(f"could not delete credential: {exc}") from exc
