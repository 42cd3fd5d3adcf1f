"""
Password policy and hashing.

Policy mirrors the account store's creation rules: a password must be at
least 6 characters and mix digits, lowercase, uppercase and
non-alphanumeric characters. Every violated rule is reported at once.
"""

from typing import List, Optional

import bcrypt

from authcore.libs.result import Error, ErrorDetail, Result, Return

MIN_PASSWORD_LENGTH = 6

# bcrypt only considers the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def validate_password(password: str) -> Result[None]:
    """
    Validate password strength.

    Returns:
        Result with None if valid, or WEAK_PASSWORD error listing every
        violated rule in its details
    """
    details: List[ErrorDetail] = []

    if len(password) < MIN_PASSWORD_LENGTH:
        details.append(
            ErrorDetail(
                "PasswordTooShort",
                f"Passwords must be at least {MIN_PASSWORD_LENGTH} characters.",
            )
        )
    if not any(not c.isalnum() for c in password):
        details.append(
            ErrorDetail(
                "PasswordRequiresNonAlphanumeric",
                "Passwords must have at least one non alphanumeric character.",
            )
        )
    if not any(c.isdigit() for c in password):
        details.append(
            ErrorDetail("PasswordRequiresDigit", "Passwords must have at least one digit ('0'-'9').")
        )
    if not any(c.islower() for c in password):
        details.append(
            ErrorDetail("PasswordRequiresLower", "Passwords must have at least one lowercase ('a'-'z').")
        )
    if not any(c.isupper() for c in password):
        details.append(
            ErrorDetail("PasswordRequiresUpper", "Passwords must have at least one uppercase ('A'-'Z').")
        )

    if details:
        return Return.err(
            Error("WEAK_PASSWORD", "Password does not meet the requirements", details)
        )
    return Return.ok(None)


class PasswordHasher:
    """bcrypt hashing with a fixed cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash: Optional[bytes] = None

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(self._encode(password), bcrypt.gensalt(self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(self._encode(password), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False

    def burn(self, password: str) -> None:
        """Spend one verification's worth of work for an unknown account."""
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(self.rounds))
        bcrypt.checkpw(self._encode(password), self._dummy_hash)
