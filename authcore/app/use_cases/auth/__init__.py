"""
Authentication Use Cases

Account registration, login and password reset flows.
"""

from .gateway import AuthGateway
from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .get_account_info_use_case import GetAccountInfoUseCase
from .dtos import (
    AccountInfo,
    ConfirmPasswordResetResponse,
    LoginResult,
    RegisterCommand,
    RegisterResult,
    RequestPasswordResetResponse,
)

__all__ = [
    # Gateway
    "AuthGateway",
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "GetAccountInfoUseCase",
    # DTOs - Commands
    "RegisterCommand",
    # DTOs - Responses
    "AccountInfo",
    "RegisterResult",
    "LoginResult",
    "RequestPasswordResetResponse",
    "ConfirmPasswordResetResponse",
]
