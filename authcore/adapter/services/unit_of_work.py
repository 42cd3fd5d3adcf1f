from sqlmodel.ext.asyncio.session import AsyncSession

from authcore.adapter.repositories.account_repository import AccountRepository
from authcore.adapter.repositories.audit_event_repository import AuditEventRepository
from authcore.adapter.repositories.claim_repository import ClaimRepository
from authcore.adapter.repositories.reset_token_repository import ResetTokenRepository
from authcore.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.accounts = AccountRepository(self.session)
        self.claims = ClaimRepository(self.session)
        self.reset_tokens = ResetTokenRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed is discarded
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
