"""
Auth Gateway

Single entry point the transport layer talks to. Each call builds the
use case for one flow from the shared collaborators.
"""

from typing import Optional

from authcore.app.services.notifier import Notifier
from authcore.app.services.passwords import PasswordHasher
from authcore.app.services.rate_limiter import RateLimiter
from authcore.app.services.reset_token_service import ResetTokenService
from authcore.app.services.session_issuer import SessionIssuer
from authcore.app.services.unit_of_work import UnitOfWork
from authcore.libs.result import Result
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .dtos import (
    AccountInfo,
    ConfirmPasswordResetResponse,
    LoginResult,
    RegisterCommand,
    RegisterResult,
    RequestPasswordResetResponse,
)
from .get_account_info_use_case import GetAccountInfoUseCase
from .login_use_case import LoginUseCase
from .register_use_case import RegisterUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase, Scheduler


class AuthGateway:
    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        reset_tokens: ResetTokenService,
        sessions: SessionIssuer,
        hasher: PasswordHasher,
        notifier: Notifier,
        notifier_timeout: float = 10.0,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.reset_tokens = reset_tokens
        self.sessions = sessions
        self.hasher = hasher
        self.notifier = notifier
        self.notifier_timeout = notifier_timeout

    async def register(self, command: RegisterCommand) -> Result[RegisterResult]:
        return await RegisterUseCase(self.uow, self.hasher, self.sessions).execute(command)

    async def login(self, email: str, password: str) -> Result[LoginResult]:
        return await LoginUseCase(self.uow, self.hasher, self.sessions).execute(email, password)

    async def request_password_reset(
        self, email: str, partition_key: str, schedule: Optional[Scheduler] = None
    ) -> Result[RequestPasswordResetResponse]:
        use_case = RequestPasswordResetUseCase(
            self.uow,
            self.rate_limiter,
            self.reset_tokens,
            self.notifier,
            self.notifier_timeout,
        )
        return await use_case.execute(email, partition_key, schedule)

    async def confirm_password_reset(
        self, email: str, code: str, new_password: str, partition_key: str
    ) -> Result[ConfirmPasswordResetResponse]:
        use_case = ConfirmPasswordResetUseCase(
            self.uow, self.rate_limiter, self.reset_tokens, self.hasher
        )
        return await use_case.execute(email, code, new_password, partition_key)

    async def current_account(self, session_token: str) -> Result[AccountInfo]:
        return await GetAccountInfoUseCase(self.uow, self.sessions).execute(session_token)
