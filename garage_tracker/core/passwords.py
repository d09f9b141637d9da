"""
Password Hashing

One-way, salted password transform built on bcrypt.

Design Decisions:
- bcrypt generates a fresh random salt per hash, so hashing the same
  password twice yields two different digests
- The cost factor is a fixed constant, not a setting: high enough to make
  offline brute force impractical, low enough to keep login interactive
- bcrypt only reads the first 72 bytes of its input; longer passwords are
  rejected instead of being silently truncated
"""

from functools import cached_property

import bcrypt

from garage_tracker.core.exceptions import ValidationFailedError

BCRYPT_ROUNDS = 10
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Hashes and verifies account passwords."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext password.

        Args:
            plaintext: The password as typed by the user

        Returns:
            bcrypt digest string (salt and cost embedded)

        Raises:
            ValidationFailedError: If the password is longer than 72 bytes
        """
        password = plaintext.encode("utf-8")
        if len(password) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationFailedError(
                f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes"
            )
        return bcrypt.hashpw(password, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Check a plaintext password against a stored digest.

        Returns:
            True iff digest was produced from plaintext; False for a
            mismatch, an over-long password or a malformed digest
        """
        password = plaintext.encode("utf-8")
        if len(password) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(password, digest.encode("utf-8"))
        except ValueError:
            return False

    @cached_property
    def dummy_digest(self) -> str:
        """Digest to verify against when no account exists, to equalize timing."""
        return self.hash("garage-tracker-dummy-password")
