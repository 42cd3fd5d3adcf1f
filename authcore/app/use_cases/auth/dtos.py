"""
Authentication Use Case DTOs (Data Transfer Objects)

Command and Response classes for the account flows.
"""

from typing import Optional
from pydantic import BaseModel


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    """

    email: str
    password: str
    display_name: str
    phone: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class AccountInfo(BaseModel):
    """Public account profile"""

    id: str
    email: str
    display_name: Optional[str] = None
    phone: Optional[str] = None


class RegisterResult(BaseModel):
    """
    Register result - account profile plus the issued session token

    The token is handed to the transport layer for the session cookie and
    is never part of a response body.
    """

    account: AccountInfo
    session_token: str


class LoginResult(BaseModel):
    """Login result - carries the session token for the cookie"""

    account_id: str
    session_token: str


class RequestPasswordResetResponse(BaseModel):
    """Response for request password reset use case"""

    status: str
    message: str


class ConfirmPasswordResetResponse(BaseModel):
    """Response for confirm password reset use case"""

    status: str
    message: str
