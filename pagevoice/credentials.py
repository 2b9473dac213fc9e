"""OS keyring storage for the speech service API key.

The stored key is the `secure` runtime source: it is read on every convert run
and outranks environment and config-file values, but never a key passed on the
command line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import keyring
from keyring.backend import KeyringBackend
from keyring.backends import fail
from keyring.errors import PasswordDeleteError

from .parsing import normalize_optional_string

SPEECH_KEY_SERVICE = "pagevoice"
SPEECH_KEY_ACCOUNT = "speech_api_key"


class CredentialStore(Protocol):
    """Storage operations the CLI needs for the speech API key."""

    def is_available(self) -> bool:
        """Return whether a secure backend can hold the key."""

    def get_api_key(self) -> str | None:
        """Return the stored key, or `None` when nothing usable is stored."""

    def set_api_key(self, api_key: str) -> None:
        """Persist a new key, replacing any previous one."""

    def clear_api_key(self) -> bool:
        """Delete the stored key and report whether one existed."""


@dataclass(frozen=True, slots=True)
class SpeechKeyKeyring:
    """Speech API key held under one keyring service/account entry."""

    service: str = SPEECH_KEY_SERVICE
    account: str = SPEECH_KEY_ACCOUNT

    def _backend(self) -> KeyringBackend | None:
        backend = keyring.get_keyring()
        # The fail backend raises on every call; treat it as "no backend".
        if isinstance(backend, fail.Keyring):
            return None
        return backend

    def is_available(self) -> bool:
        return self._backend() is not None

    def get_api_key(self) -> str | None:
        backend = self._backend()
        if backend is None:
            return None
        return normalize_optional_string(backend.get_password(self.service, self.account))

    def set_api_key(self, api_key: str) -> None:
        """Store a trimmed key.

        Raises:
            RuntimeError: When no keyring backend is configured.
            ValueError: When the key is blank.
        """

        backend = self._backend()
        if backend is None:
            raise RuntimeError(
                "Secure credential storage is unavailable because no keyring backend "
                "is configured."
            )
        normalized = normalize_optional_string(api_key)
        if normalized is None:
            raise ValueError("API key must be a non-empty string.")
        backend.set_password(self.service, self.account, normalized)

    def clear_api_key(self) -> bool:
        backend = self._backend()
        if backend is None:
            return False
        try:
            backend.delete_password(self.service, self.account)
        except PasswordDeleteError:
            return False
        return True


def create_credential_store() -> CredentialStore:
    """Return the keyring-backed store for the speech API key."""

    return SpeechKeyKeyring()
