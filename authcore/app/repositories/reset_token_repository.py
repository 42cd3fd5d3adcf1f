from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from authcore.domain.entities import ResetToken


class IResetTokenRepository(ABC):
    """ResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: ResetToken) -> ResetToken:
        """Create a new reset token"""
        pass

    @abstractmethod
    async def get_latest_unconsumed(self, account_id: UUID) -> Optional[ResetToken]:
        """Get the most recently issued unconsumed token of an account"""
        pass

    @abstractmethod
    async def consume_all_by_account_id(self, account_id: UUID) -> int:
        """Mark every unconsumed token of an account consumed. Returns count."""
        pass
