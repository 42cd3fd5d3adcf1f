from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from authcore.domain.entities import AccountClaim


class IClaimRepository(ABC):
    """AccountClaim repository interface - application layer"""

    @abstractmethod
    async def create(self, claim: AccountClaim) -> AccountClaim:
        """Attach a claim to an account"""
        pass

    @abstractmethod
    async def get_by_account_id(self, account_id: UUID) -> List[AccountClaim]:
        """Get all claims of an account"""
        pass
