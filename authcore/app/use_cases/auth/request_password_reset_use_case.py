"""
Request Password Reset Use Case

Issues a one-time reset code and mails it to the account's address.
"""

import asyncio
import html
import logging
from typing import Any, Callable, Optional, Set

from authcore.app.services.notifier import NotificationError, Notifier
from authcore.app.services.rate_limiter import RateLimiter
from authcore.app.services.reset_token_service import ResetTokenService
from authcore.app.services.unit_of_work import UnitOfWork
from authcore.domain.entities import AdmissionResult, AuditEvent
from authcore.libs.result import Error, Result, Return
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Reset your password"

RESET_EMAIL_TEMPLATE = """
<h3>Your password reset code</h3>
<h4>{code}</h4>
<p>Enter this code to reset your password. It expires in a few minutes.</p>
<p>If you did not request a reset, you can ignore this email.</p>
"""


def rate_limited_error() -> Error:
    return Error("RATE_LIMITED", "Too many requests, try again later")


# Takes a coroutine function and its arguments, like BackgroundTasks.add_task
Scheduler = Callable[..., Any]

# Sends started without a scheduler, referenced until they finish
_pending_notifications: Set[asyncio.Task] = set()


def spawn_notification(func, *args) -> None:
    task = asyncio.create_task(func(*args))
    _pending_notifications.add(task)
    task.add_done_callback(_pending_notifications.discard)


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Flow: RateLimitCheck -> LookupAccount -> [found] IssueToken -> Notify

    Business Rules:
    - The rate limit is enforced before any account lookup
    - No email enumeration: the same response whether or not the account
      exists; only the logs tell the two paths apart
    - The token is committed before notifying, so a delivery failure never
      rolls it back; a new request re-issues (resend)
    - The send is handed to a scheduler and never awaited here, so the
      response time does not depend on whether the account exists
    - Notification failures and timeouts are logged and swallowed
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        reset_tokens: ResetTokenService,
        notifier: Notifier,
        notifier_timeout: float = 10.0,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.reset_tokens = reset_tokens
        self.notifier = notifier
        self.notifier_timeout = notifier_timeout

    @staticmethod
    def _response() -> RequestPasswordResetResponse:
        return RequestPasswordResetResponse(
            status="sent",
            message="If the email exists, a password reset code has been sent",
        )

    async def execute(
        self, email: str, partition_key: str, schedule: Optional[Scheduler] = None
    ) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            email: Address the user typed
            partition_key: Rate limit partition of the caller
            schedule: Runs the notification after the response (FastAPI
                BackgroundTasks.add_task); defaults to a detached task

        Returns:
            Result with the uniform "sent" response, or RATE_LIMITED
        """
        if await self.rate_limiter.admit(partition_key) == AdmissionResult.denied:
            logger.warning(f"Password reset request rate limited for partition {partition_key}")
            return Return.err(rate_limited_error())

        async with self.uow:
            account = await self.uow.accounts.get_by_email(email)

            if account is None:
                logger.info(f"Password reset requested for unknown email {email}")
                return Return.ok(self._response())

            code = await self.reset_tokens.issue(account.id)

            await self.uow.audit_events.create(
                AuditEvent(
                    account_id=account.id,
                    action="password_reset_requested",
                    event_metadata={"email": account.email},
                )
            )

            await self.uow.commit()
            address = account.email

        logger.info(f"Password reset code issued for account {account.id}")
        (schedule or spawn_notification)(self._notify, address, code)

        return Return.ok(self._response())

    async def _notify(self, address: str, code: str) -> None:
        body = RESET_EMAIL_TEMPLATE.format(code=html.escape(code))
        try:
            await asyncio.wait_for(
                self.notifier.send(address, RESET_EMAIL_SUBJECT, body),
                timeout=self.notifier_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Password reset email to {address} timed out after {self.notifier_timeout}s")
        except NotificationError as exc:
            logger.error(f"Password reset email to {address} failed: {exc}")
