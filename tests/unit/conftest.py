from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from authcore.app.services.passwords import PasswordHasher
from authcore.app.services.session_issuer import SessionIssuer
from authcore.domain.entities import AdmissionResult


class FrozenClock:
    """Callable clock whose time only moves when a test moves it"""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def frozen_now():
    return datetime(2026, 1, 1, 12, 0, 0)


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.accounts = MagicMock()
    uow.accounts.get_by_email = AsyncMock(return_value=None)
    uow.accounts.get_by_id = AsyncMock(return_value=None)
    uow.accounts.create = AsyncMock(side_effect=lambda account: account)
    uow.accounts.update = AsyncMock(side_effect=lambda account: account)

    uow.claims = MagicMock()
    uow.claims.create = AsyncMock(side_effect=lambda claim: claim)
    uow.claims.get_by_account_id = AsyncMock(return_value=[])

    uow.reset_tokens = MagicMock()
    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock(side_effect=lambda event: event)

    return uow


@pytest.fixture
def hasher():
    # Low cost factor keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def sessions():
    return SessionIssuer(signing_secret="test-signing-secret", encryption_key="test-encryption-key")


@pytest.fixture
def allow_all_limiter():
    limiter = MagicMock()
    limiter.admit = AsyncMock(return_value=AdmissionResult.allowed)
    return limiter


@pytest.fixture
def deny_all_limiter():
    limiter = MagicMock()
    limiter.admit = AsyncMock(return_value=AdmissionResult.denied)
    return limiter


@pytest.fixture
def clock(frozen_now):
    return FrozenClock(frozen_now)
