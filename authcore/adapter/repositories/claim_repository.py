from typing import List
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from authcore.app.repositories.claim_repository import IClaimRepository
from authcore.domain.entities import AccountClaim


class ClaimRepository(IClaimRepository):
    """AccountClaim repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, claim: AccountClaim) -> AccountClaim:
        self.session.add(claim)
        await self.session.flush()
        await self.session.refresh(claim)
        return claim

    async def get_by_account_id(self, account_id: UUID) -> List[AccountClaim]:
        stmt = select(AccountClaim).where(AccountClaim.account_id == account_id)
        result = await self.session.exec(stmt)
        return list(result.all())
