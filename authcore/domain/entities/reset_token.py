"""
ResetToken Entity

Single-use proof that the requester controls the account's address.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from authcore.domain.base import utcnow


class ResetToken(SQLModel, table=True):
    """
    ResetToken entity - derivation parameters of a one-time reset code.

    Business Rules:
    - The code itself is never stored; it is derived from the nonce,
      the account id and the current time step
    - At most one unconsumed, unexpired token per account: issuing a new
      one marks older unconsumed tokens consumed
    - Expiry is enforced at verification time, tokens are never swept
    """

    __tablename__ = "reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    account_id: UUID = Field(foreign_key="accounts.id", index=True)
    nonce: str = Field(max_length=64)

    consumed: bool = Field(default=False)
    consumed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    issued_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_reset_token_account_consumed", "account_id", "consumed"),
    )

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def is_live(self, now: datetime) -> bool:
        return not self.consumed and not self.is_expired(now)
