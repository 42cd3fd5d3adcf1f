"""
Reset Token Service

Issues and verifies one-time numeric reset codes.

A code is never stored. Each issued token keeps a random nonce, and the
code is the RFC 4226 HOTP value (pyotp) of a key derived from
(secret, account_id, nonce) at the current time-step counter. Verification
recomputes the codes for the previous, current and next counters.

The validity window may not exceed one time step. A code always matches
for at least one full step after issue, so expires_at alone decides its
lifetime.
"""

import base64
import hashlib
import hmac
import secrets
from datetime import UTC, datetime, timedelta
from typing import Callable, Optional
from uuid import UUID, uuid4

import pyotp

from authcore.app.services.unit_of_work import UnitOfWork
from authcore.domain.base import utcnow
from authcore.domain.entities import ResetToken

DEFAULT_DIGITS = 6
DEFAULT_STEP_SECONDS = 300
DEFAULT_TTL = timedelta(minutes=5)

# Accept codes from +/- this many time steps
DRIFT_STEPS = 1


class ResetTokenService:
    """
    Business Rules:
    - Codes are fixed-length numeric strings (6 digits by default)
    - Issuing a code supersedes every earlier unconsumed code of the account
    - A code verifies only while its token is unconsumed, unexpired and the
      current counter is within DRIFT_STEPS of the issuing counter
    - ttl <= step_seconds, so the issuing counter is still accepted when the
      token expires
    - Verifying for an unknown account does the same work as a wrong code

    Must be used inside the caller's unit of work; nothing is committed here.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        secret: str,
        digits: int = DEFAULT_DIGITS,
        step_seconds: int = DEFAULT_STEP_SECONDS,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        if ttl.total_seconds() > step_seconds:
            raise ValueError("ttl must not exceed step_seconds")
        self.uow = uow
        self.secret = secret.encode("utf-8")
        self.digits = digits
        self.step_seconds = step_seconds
        self.ttl = ttl
        self.clock = clock

    def _counter(self, now: datetime) -> int:
        return int(now.replace(tzinfo=UTC).timestamp()) // self.step_seconds

    def _key(self, account_id: UUID, nonce: str) -> bytes:
        message = f"{account_id}|{nonce}".encode("utf-8")
        return hmac.new(self.secret, message, hashlib.sha256).digest()

    def _hotp(self, key: bytes, counter: int) -> str:
        secret = base64.b32encode(key).decode("ascii")
        return pyotp.HOTP(secret, digits=self.digits).at(counter)

    def _matches(self, account_id: UUID, nonce: str, code: str, now: datetime) -> bool:
        key = self._key(account_id, nonce)
        submitted = code.encode("utf-8")
        counter = self._counter(now)
        matched = False
        # No early exit: every candidate is compared
        for step in range(-DRIFT_STEPS, DRIFT_STEPS + 1):
            expected = self._hotp(key, counter + step).encode("ascii")
            matched |= hmac.compare_digest(expected, submitted)
        return matched

    async def issue(self, account_id: UUID) -> str:
        """
        Issue a new reset code for an account.

        Returns:
            The plain code; only its derivation parameters are persisted
        """
        now = self.clock()
        await self.uow.reset_tokens.consume_all_by_account_id(account_id)

        token = ResetToken(
            account_id=account_id,
            nonce=secrets.token_hex(16),
            consumed=False,
            issued_at=now,
            expires_at=now + self.ttl,
        )
        await self.uow.reset_tokens.create(token)

        return self._hotp(self._key(account_id, token.nonce), self._counter(now))

    async def verify(self, account_id: Optional[UUID], code: str) -> bool:
        """
        Check a submitted code against the account's live token.

        Args:
            account_id: Account to verify for, or None when the lookup missed
            code: Code as typed by the user
        """
        now = self.clock()
        token = None
        if account_id is not None:
            token = await self.uow.reset_tokens.get_latest_unconsumed(account_id)

        if token is None:
            # Throwaway derivation keeps the work identical to a wrong code
            self._matches(account_id or uuid4(), secrets.token_hex(16), code, now)
            return False

        matched = self._matches(account_id, token.nonce, code, now)
        return matched and token.is_live(now)

    async def consume(self, account_id: UUID) -> int:
        """Mark the account's outstanding tokens consumed. Returns count."""
        return await self.uow.reset_tokens.consume_all_by_account_id(account_id)
