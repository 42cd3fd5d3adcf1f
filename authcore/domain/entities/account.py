"""
Account Entity

Identity of a registered user.
"""

import secrets
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from authcore.domain.base import utcnow


def new_security_stamp() -> str:
    return secrets.token_hex(16)


class Account(SQLModel, table=True):
    """
    Account entity - identity of a registered user.

    Business Rules:
    - normalized_email is unique; it is the case-insensitive lookup key
    - Password stored as bcrypt hash
    - security_stamp rotates whenever the password is replaced, which
      invalidates sessions issued before the change
    - Never physically deleted
    """

    __tablename__ = "accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255)
    normalized_email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    phone: Optional[str] = Field(default=None, max_length=32)

    security_stamp: str = Field(default_factory=new_security_stamp, max_length=32)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
