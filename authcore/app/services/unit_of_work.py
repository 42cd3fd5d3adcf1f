from abc import ABC, abstractmethod

from authcore.app.repositories.account_repository import IAccountRepository
from authcore.app.repositories.audit_event_repository import IAuditEventRepository
from authcore.app.repositories.claim_repository import IClaimRepository
from authcore.app.repositories.reset_token_repository import IResetTokenRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    accounts: IAccountRepository
    claims: IClaimRepository
    reset_tokens: IResetTokenRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
