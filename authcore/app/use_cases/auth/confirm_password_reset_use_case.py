"""
Confirm Password Reset Use Case

Replaces the password of an account that proves control of its address
with a valid reset code.
"""

import logging

from authcore.app.services.passwords import PasswordHasher, validate_password
from authcore.app.services.rate_limiter import RateLimiter
from authcore.app.services.reset_token_service import ResetTokenService
from authcore.app.services.unit_of_work import UnitOfWork
from authcore.domain.base import utcnow
from authcore.domain.entities import AdmissionResult, AuditEvent
from authcore.domain.entities.account import new_security_stamp
from authcore.libs.result import Error, Result, Return
from .dtos import ConfirmPasswordResetResponse
from .request_password_reset_use_case import rate_limited_error

logger = logging.getLogger(__name__)


def invalid_token_error() -> Error:
    return Error("INVALID_TOKEN", "Invalid or expired code")


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming a password reset.

    Flow: RateLimitCheck -> LookupAccount -> VerifyCode -> ReplacePassword
          -> ConsumeToken

    Business Rules:
    - The rate limit is enforced before any account lookup
    - Unknown account, wrong code, expired, superseded and consumed codes
      all yield the same INVALID_TOKEN error
    - New password must satisfy the password policy
    - Password replacement, token consumption and the audit event commit
      together or not at all
    - Replacing the password rotates the security stamp, which revokes
      every existing session
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        reset_tokens: ResetTokenService,
        hasher: PasswordHasher,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.reset_tokens = reset_tokens
        self.hasher = hasher

    async def execute(
        self, email: str, code: str, new_password: str, partition_key: str
    ) -> Result[ConfirmPasswordResetResponse]:
        """
        Execute confirm password reset use case.

        Errors:
            - RATE_LIMITED: Partition exhausted its window
            - WEAK_PASSWORD: New password violates the policy
            - INVALID_TOKEN: No such account, or code not valid for it
        """
        if await self.rate_limiter.admit(partition_key) == AdmissionResult.denied:
            logger.warning(f"Password reset confirmation rate limited for partition {partition_key}")
            return Return.err(rate_limited_error())

        password_validation = validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            account = await self.uow.accounts.get_by_email(email)

            valid = await self.reset_tokens.verify(account.id if account else None, code)
            if account is None or not valid:
                logger.warning(
                    f"Rejected password reset code for {email}: "
                    f"{'unknown account' if account is None else 'code not valid'}"
                )
                return Return.err(invalid_token_error())

            account.password_hash = self.hasher.hash(new_password)
            account.security_stamp = new_security_stamp()
            account.updated_at = utcnow()
            await self.uow.accounts.update(account)

            consumed = await self.reset_tokens.consume(account.id)
            if consumed == 0:
                # A concurrent confirmation consumed the token first
                logger.warning(f"Reset code for account {account.id} was consumed concurrently")
                return Return.err(invalid_token_error())

            await self.uow.audit_events.create(
                AuditEvent(
                    account_id=account.id,
                    action="password_reset_confirmed",
                    event_metadata={"tokens_consumed": consumed},
                )
            )

            await self.uow.commit()

        logger.info(f"Password reset for account {account.id}")

        return Return.ok(
            ConfirmPasswordResetResponse(
                status="success",
                message="Password has been reset successfully",
            )
        )
