"""
AccountClaim Entity

Queryable profile attributes attached to an account.
"""

from uuid import UUID, uuid4

from sqlmodel import Field, Index, SQLModel


class AccountClaim(SQLModel, table=True):
    """
    AccountClaim entity - a (type, value) profile attribute.

    Business Rules:
    - The display name given at registration is stored as a "name" claim
    """

    __tablename__ = "account_claims"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    account_id: UUID = Field(foreign_key="accounts.id", index=True)
    claim_type: str = Field(max_length=100)
    claim_value: str = Field(max_length=255)

    __table_args__ = (Index("idx_claim_account_type", "account_id", "claim_type"),)
