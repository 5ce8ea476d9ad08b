"""Portal password hashing.

Records are produced by passlib and carry scheme, cost parameters, salt and
digest in a single string, e.g. ``$scrypt$ln=16,r=8,p=1$<salt>$<digest>``.
"""

from __future__ import annotations

import secrets

from passlib.context import CryptContext

from jobportal.core.logging_setup import logger

# Readable alphabet: no 0/O, 1/l/I.
PASSWORD_ALPHABET = "abcdefghijkmnpqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ23456789"


class CredentialStore:
    def __init__(self, context: CryptContext | None = None) -> None:
        self.context = context or CryptContext(
            schemes=["scrypt", "pbkdf2_sha256"],
            deprecated=["pbkdf2_sha256"],
        )

    def hash(self, plaintext: str) -> str:
        return self.context.hash(plaintext)

    def verify(self, plaintext: str, hashed_record: str | None) -> bool:
        verified, _ = self.verify_and_update(plaintext, hashed_record)
        return verified

    def verify_and_update(self, plaintext: str, hashed_record: str | None) -> tuple[bool, str | None]:
        """Verify and, when the record uses a deprecated scheme, return a replacement hash."""
        if not hashed_record:
            return False, None
        try:
            return self.context.verify_and_update(plaintext, hashed_record)
        except (ValueError, TypeError) as exc:
            logger.warning("Unusable portal password record: %s", exc.__class__.__name__)
            return False, None


def generate_portal_password(length: int = 12) -> str:
    if length < 8:
        raise ValueError("Password length must be at least 8 characters")
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


credential_store = CredentialStore()
