"""
Login Use Case

Authenticates with email and password and issues a session.
"""

from authcore.app.services.passwords import PasswordHasher
from authcore.app.services.session_issuer import SessionIssuer
from authcore.app.services.unit_of_work import UnitOfWork
from authcore.domain.entities import AuditEvent
from authcore.libs.result import Error, Result, Return
from .dtos import LoginResult


class LoginUseCase:
    """
    Use case for password login.

    Business Rules:
    - Unknown email and wrong password return the same INVALID_CREDENTIALS
    - An unknown email still costs one bcrypt verification
    - A login audit event is recorded
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher, sessions: SessionIssuer):
        self.uow = uow
        self.hasher = hasher
        self.sessions = sessions

    async def execute(self, email: str, password: str) -> Result[LoginResult]:
        async with self.uow:
            account = await self.uow.accounts.get_by_email(email)

            if account is None:
                self.hasher.burn(password)
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            if not self.hasher.verify(password, account.password_hash):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            await self.uow.audit_events.create(
                AuditEvent(account_id=account.id, action="login", event_metadata={"email": account.email})
            )
            await self.uow.commit()

        return Return.ok(
            LoginResult(
                account_id=str(account.id),
                session_token=self.sessions.issue(account.id, account.security_stamp),
            )
        )
