from authcore.app.services.session_issuer import SessionIssuer
from authcore.app.services.unit_of_work import UnitOfWork
from authcore.domain.entities import ClaimType
from authcore.libs.result import Error, Result, Return
from .dtos import AccountInfo


class GetAccountInfoUseCase:
    """
    Resolves a session token to the account profile.

    Sessions issued before the last password reset carry a stale security
    stamp and are rejected.
    """

    def __init__(self, uow: UnitOfWork, sessions: SessionIssuer):
        self.uow = uow
        self.sessions = sessions

    async def execute(self, session_token: str) -> Result[AccountInfo]:
        claims = self.sessions.validate(session_token)
        if claims is None:
            return Return.err(Error("SESSION_INVALID", "Session is invalid or expired"))

        async with self.uow:
            account = await self.uow.accounts.get_by_id(claims.account_id)
            if account is None or account.security_stamp != claims.security_stamp:
                return Return.err(Error("SESSION_INVALID", "Session is invalid or expired"))

            account_claims = await self.uow.claims.get_by_account_id(account.id)
            display_name = next(
                (c.claim_value for c in account_claims if c.claim_type == ClaimType.name.value),
                None,
            )

            # Read everything before leaving the unit of work; its rollback
            # expires loaded rows
            info = AccountInfo(
                id=str(account.id),
                email=account.email,
                display_name=display_name,
                phone=account.phone,
            )

        return Return.ok(info)
