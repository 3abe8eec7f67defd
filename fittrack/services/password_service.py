"""Password hashing service using bcrypt."""

from __future__ import annotations

import secrets

import bcrypt

from ..errors import ValidationError


class PasswordService:
    """Salted one-way hashing and verification of account passwords.

    ``bcrypt.checkpw`` compares digests in constant time. Plaintext passwords
    are never stored, logged or returned by this class.

    Examples
    --------
    >>> service = PasswordService(rounds=4)
    >>> digest = service.hash("password123")
    >>> service.verify("password123", digest)
    True
    >>> service.verify("wrong", digest)
    False
    """

    # bcrypt only looks at the first 72 bytes of its input.
    MAX_BYTES = 72

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Return the bcrypt digest of ``password``.

        Raises
        ------
        ValidationError
            If the password is longer than bcrypt can hash.
        """
        encoded = password.encode("utf-8")
        if len(encoded) > self.MAX_BYTES:
            raise ValidationError(f"Password cannot exceed {self.MAX_BYTES} bytes")
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(encoded, salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            # Malformed hash or over-long password.
            return False

    def verify_dummy(self, password: str) -> bool:
        """Burn one comparison for an unknown account and return ``False``.

        Keeps the response time of a login for an unknown e-mail close to
        that of a wrong password.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_urlsafe(16))
        self.verify(password, self._dummy_hash)
        return False
