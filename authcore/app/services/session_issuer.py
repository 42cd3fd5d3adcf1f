"""
Session Issuer

Session tokens are an HS256 JWT (account id, security stamp, iat, exp)
wrapped in a direct-key A256GCM JWE, so clients can neither read nor
forge them. Validation is stateless.
"""

import hashlib
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from jose import jwe, jwt
from jose.exceptions import JOSEError

from authcore.domain.base import utcnow

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(days=7)


def _timestamp(value: datetime) -> int:
    return int(value.replace(tzinfo=UTC).timestamp())


@dataclass(frozen=True)
class SessionClaims:
    account_id: UUID
    security_stamp: str
    issued_at: datetime
    expires_at: datetime


class SessionIssuer:
    def __init__(
        self,
        signing_secret: str,
        encryption_key: str,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.signing_secret = signing_secret
        # A256GCM with "dir" needs exactly 32 bytes
        self.encryption_key = hashlib.sha256(encryption_key.encode("utf-8")).digest()
        self.ttl = ttl
        self.clock = clock

    def issue(self, account_id: UUID, security_stamp: str) -> str:
        """
        Issue a session token

        Args:
            account_id: Authenticated account
            security_stamp: Account's current security stamp

        Returns:
            Compact JWE string, valid for the configured TTL (7 days)
        """
        now = self.clock()
        payload = {
            "sub": str(account_id),
            "stamp": security_stamp,
            "iat": _timestamp(now),
            "exp": _timestamp(now + self.ttl),
        }
        signed = jwt.encode(payload, self.signing_secret, algorithm="HS256")
        token = jwe.encrypt(
            signed.encode("utf-8"), self.encryption_key, algorithm="dir", encryption="A256GCM"
        )
        return token.decode("ascii") if isinstance(token, bytes) else token

    def validate(self, token: str) -> Optional[SessionClaims]:
        """
        Validate a session token

        Returns:
            SessionClaims, or None if the token is malformed, tampered with
            or expired
        """
        try:
            signed = jwe.decrypt(token, self.encryption_key)
            payload = jwt.decode(
                signed.decode("ascii"),
                self.signing_secret,
                algorithms=["HS256"],
                options={"verify_exp": False},
            )
            claims = SessionClaims(
                account_id=UUID(payload["sub"]),
                security_stamp=payload["stamp"],
                issued_at=datetime.fromtimestamp(payload["iat"], UTC).replace(tzinfo=None),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC).replace(tzinfo=None),
            )
        except (JOSEError, KeyError, TypeError, ValueError, AttributeError):
            logger.info("Rejected malformed or tampered session token")
            return None

        if self.clock() >= claims.expires_at:
            return None
        return claims
