import logging

from sqlalchemy.exc import IntegrityError

from authcore.app.services.passwords import PasswordHasher, validate_password
from authcore.app.services.session_issuer import SessionIssuer
from authcore.app.services.unit_of_work import UnitOfWork
from authcore.domain.base import normalize_email
from authcore.domain.entities import Account, AccountClaim, AuditEvent, ClaimType
from authcore.libs.result import Error, ErrorDetail, Result, Return
from .dtos import AccountInfo, RegisterCommand, RegisterResult

logger = logging.getLogger(__name__)


def duplicate_email_error(email: str) -> Error:
    return Error(
        "DUPLICATE_EMAIL",
        "Email already registered",
        [ErrorDetail("DuplicateEmail", f"Email '{email}' is already taken.")],
    )


class RegisterUseCase:
    """
    Register Use Case

    Flow: ValidateInput -> CreateAccount -> AttachNameClaim -> IssueSession

    Business Logic:
    1. Reject weak passwords (WEAK_PASSWORD, every violated rule listed)
    2. Reject an email that is already registered (DUPLICATE_EMAIL),
       compared case-insensitively
    3. Create the account with a bcrypt password hash
    4. Store the display name as a "name" claim
    5. Record an account_registered audit event and commit atomically
    6. Issue a session (auto-login after registration)

    No claim is attached and no session is issued when creation fails.
    """

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher, sessions: SessionIssuer):
        self.uow = uow
        self.hasher = hasher
        self.sessions = sessions

    async def execute(self, command: RegisterCommand) -> Result[RegisterResult]:
        password_validation = validate_password(command.password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        email = command.email.strip()

        async with self.uow:
            existing = await self.uow.accounts.get_by_email(email)
            if existing is not None:
                return Return.err(duplicate_email_error(email))

            account = Account(
                email=email,
                normalized_email=normalize_email(email),
                password_hash=self.hasher.hash(command.password),
                phone=command.phone or None,
            )
            try:
                account = await self.uow.accounts.create(account)
            except IntegrityError:
                # Lost a race with a concurrent registration of the same email
                return Return.err(duplicate_email_error(email))

            await self.uow.claims.create(
                AccountClaim(
                    account_id=account.id,
                    claim_type=ClaimType.name.value,
                    claim_value=command.display_name,
                )
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    account_id=account.id,
                    action="account_registered",
                    event_metadata={"email": email},
                )
            )

            await self.uow.commit()

        logger.info(f"Registered account {account.id}")

        session_token = self.sessions.issue(account.id, account.security_stamp)

        return Return.ok(
            RegisterResult(
                account=AccountInfo(
                    id=str(account.id),
                    email=account.email,
                    display_name=command.display_name,
                    phone=account.phone,
                ),
                session_token=session_token,
            )
        )
