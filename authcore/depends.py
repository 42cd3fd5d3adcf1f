from datetime import timedelta
from typing import Optional

from fastapi import Depends, Request
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from authcore.adapter.services.notifiers import LoggingNotifier, SendGridNotifier
from authcore.adapter.services.rate_window_store import (
    InMemoryRateWindowStore,
    RedisRateWindowStore,
)
from authcore.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from authcore.app.services.notifier import Notifier
from authcore.app.services.passwords import PasswordHasher
from authcore.app.services.rate_limiter import RateLimiter
from authcore.app.services.reset_token_service import ResetTokenService
from authcore.app.services.session_issuer import SessionIssuer
from authcore.app.services.unit_of_work import UnitOfWork
from authcore.app.use_cases.auth import AuthGateway

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Process-wide collaborators, created on first use
_rate_limiter: Optional[RateLimiter] = None
_notifier: Optional[Notifier] = None
_password_hasher: Optional[PasswordHasher] = None


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_rate_limiter() -> RateLimiter:
    global _rate_limiter
    if _rate_limiter is None:
        if ApplicationConfig.RATE_LIMIT_BACKEND == "redis":
            store = RedisRateWindowStore(Redis.from_url(ApplicationConfig.REDIS_URL))
        else:
            store = InMemoryRateWindowStore()
        _rate_limiter = RateLimiter(
            store,
            permit_limit=ApplicationConfig.RATE_LIMIT_PERMITS,
            window_seconds=ApplicationConfig.RATE_LIMIT_WINDOW_SECONDS,
            fallback_key=ApplicationConfig.RATE_LIMIT_FALLBACK_KEY,
        )
    return _rate_limiter


def get_notifier() -> Notifier:
    global _notifier
    if _notifier is None:
        if ApplicationConfig.NOTIFIER_BACKEND == "sendgrid":
            _notifier = SendGridNotifier(
                api_key=ApplicationConfig.SENDGRID_API_KEY,
                sender_email=ApplicationConfig.SENDER_EMAIL,
                sender_name=ApplicationConfig.SENDER_NAME,
                timeout=ApplicationConfig.NOTIFIER_TIMEOUT_SECONDS,
            )
        else:
            _notifier = LoggingNotifier()
    return _notifier


def get_password_hasher() -> PasswordHasher:
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = PasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)
    return _password_hasher


def get_session_issuer() -> SessionIssuer:
    return SessionIssuer(
        signing_secret=ApplicationConfig.SESSION_SECRET,
        encryption_key=ApplicationConfig.SESSION_ENCRYPTION_KEY,
        ttl=timedelta(days=ApplicationConfig.SESSION_TTL_DAYS),
    )


def get_auth_gateway(
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    notifier: Notifier = Depends(get_notifier),
    hasher: PasswordHasher = Depends(get_password_hasher),
    sessions: SessionIssuer = Depends(get_session_issuer),
) -> AuthGateway:
    reset_tokens = ResetTokenService(
        uow,
        secret=ApplicationConfig.RESET_CODE_SECRET,
        digits=ApplicationConfig.RESET_CODE_DIGITS,
        step_seconds=ApplicationConfig.RESET_CODE_STEP_SECONDS,
        ttl=timedelta(minutes=ApplicationConfig.RESET_CODE_TTL_MINUTES),
    )
    return AuthGateway(
        uow,
        rate_limiter=rate_limiter,
        reset_tokens=reset_tokens,
        sessions=sessions,
        hasher=hasher,
        notifier=notifier,
        notifier_timeout=ApplicationConfig.NOTIFIER_TIMEOUT_SECONDS,
    )


def get_partition_key(
    request: Request, rate_limiter: RateLimiter = Depends(get_rate_limiter)
) -> str:
    """Rate limit partition: client address, or the fallback key when unknown"""
    client_address = request.client.host if request.client else None
    return rate_limiter.partition_key_for(client_address)
