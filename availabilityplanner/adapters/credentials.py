"""
Storage for the backend bearer token (OS keyring with a plaintext file fallback).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)


KEYRING_SERVICE_NAME = "availabilityplanner"
TOKEN_ENV_VAR = "AVAILABILITY_API_TOKEN"


class CredentialStore:
    """
    Keeps the API access token between runs.

    The OS keyring is preferred. When it is unavailable the token is written
    to a file readable only by the owner, and ``insecure_storage_warning``
    explains why.
    """

    def __init__(self, account: str = "default", token_file: Path | None = None):
        """
        Args:
            account: Keyring user name the token is stored under
            token_file: Optional path of the plaintext fallback file
        """
        self.account = account
        self.token_file = token_file or Path.home() / ".availabilityplanner_token"
        self._keyring_supported = True
        self._insecure_storage_warning: Optional[str] = None

    @property
    def backend(self) -> str:
        """Return the active storage backend (keyring or file)."""
        return "keyring" if self._keyring_supported else "file"

    @property
    def insecure_storage_warning(self) -> Optional[str]:
        return self._insecure_storage_warning

    def get_token(self) -> Optional[str]:
        """Return the token from the environment, the keyring or the file, in that order."""
        from_env = os.environ.get(TOKEN_ENV_VAR)
        if from_env:
            return from_env

        token = self._load_from_keyring()
        if token is None:
            token = self._load_from_file()
        return token

    def set_token(self, token: str) -> None:
        if self._keyring_supported and self._save_to_keyring(token):
            return
        self._save_to_file(token)

    def clear(self) -> None:
        """Forget the stored token everywhere."""
        if self.token_file.exists():
            self.token_file.unlink()
        try:
            keyring.delete_password(KEYRING_SERVICE_NAME, self.account)
        except PasswordDeleteError:
            logger.debug("No token stored in keyring for %s", self.account)
        except KeyringError as exc:  # pragma: no cover - environment dependent
            logger.warning("Could not remove token from keyring: %s", exc)

    def _load_from_keyring(self) -> Optional[str]:
        if not self._keyring_supported:
            return None
        try:
            return keyring.get_password(KEYRING_SERVICE_NAME, self.account)
        except KeyringError as exc:
            self._handle_keyring_failure(f"reading credentials failed: {exc}")
            return None

    def _load_from_file(self) -> Optional[str]:
        if self.token_file.exists():
            try:
                return self.token_file.read_text(encoding="utf-8").strip() or None
            except OSError as exc:
                logger.warning("Could not read token file %s: %s", self.token_file, exc)
        return None

    def _save_to_keyring(self, token: str) -> bool:
        try:
            keyring.set_password(KEYRING_SERVICE_NAME, self.account, token)
            return True
        except KeyringError as exc:
            self._handle_keyring_failure(f"writing credentials failed: {exc}")
            return False

    def _save_to_file(self, token: str) -> None:
        try:
            self.token_file.parent.mkdir(parents=True, exist_ok=True)
            self.token_file.write_text(token, encoding="utf-8")
            self.token_file.chmod(0o600)
        except OSError as exc:
            logger.warning("Could not save token to %s: %s", self.token_file, exc)

    def _handle_keyring_failure(self, reason: str) -> None:
        if self._keyring_supported:
            logger.warning(
                "Secure credential storage unavailable (%s). Falling back to plaintext file.",
                reason,
            )
        self._keyring_supported = False
        if not self._insecure_storage_warning:
            self._insecure_storage_warning = (
                f"Secure credential storage unavailable ({reason}). "
                f"Falling back to plaintext file at {self.token_file}."
            )
