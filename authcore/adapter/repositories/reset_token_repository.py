from typing import Optional
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from authcore.app.repositories.reset_token_repository import IResetTokenRepository
from authcore.domain.base import utcnow
from authcore.domain.entities import ResetToken


class ResetTokenRepository(IResetTokenRepository):
    """ResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: ResetToken) -> ResetToken:
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_latest_unconsumed(self, account_id: UUID) -> Optional[ResetToken]:
        stmt = (
            select(ResetToken)
            .where(ResetToken.account_id == account_id, ResetToken.consumed == False)  # noqa: E712
            .order_by(ResetToken.issued_at.desc())
            .limit(1)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def consume_all_by_account_id(self, account_id: UUID) -> int:
        stmt = (
            update(ResetToken)
            .where(ResetToken.account_id == account_id, ResetToken.consumed == False)  # noqa: E712
            .values(consumed=True, consumed_at=utcnow())
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
