"""
Unit tests for ConfirmPasswordResetUseCase

Tests all business logic with mocked dependencies.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from authcore.app.use_cases.auth import ConfirmPasswordResetUseCase
from authcore.domain.entities import Account


@pytest.fixture
def alice(hasher):
    return Account(
        email="alice@example.com",
        normalized_email="alice@example.com",
        password_hash=hasher.hash("S3cure!"),
    )


@pytest.fixture
def reset_tokens():
    service = MagicMock()
    service.verify = AsyncMock(return_value=True)
    service.consume = AsyncMock(return_value=1)
    return service


@pytest.mark.asyncio
async def test_successful_password_reset_confirmation(
    mock_uow, allow_all_limiter, reset_tokens, hasher, alice
):
    mock_uow.accounts.get_by_email.return_value = alice
    old_stamp = alice.security_stamp
    use_case = ConfirmPasswordResetUseCase(mock_uow, allow_all_limiter, reset_tokens, hasher)

    result = await use_case.execute("alice@example.com", "123456", "N3wPass!", "10.0.0.1")

    assert result.is_ok()
    assert result.value.status == "success"

    reset_tokens.verify.assert_called_once_with(alice.id, "123456")
    reset_tokens.consume.assert_called_once_with(alice.id)

    updated: Account = mock_uow.accounts.update.call_args.args[0]
    assert hasher.verify("N3wPass!", updated.password_hash)
    assert updated.security_stamp != old_stamp

    event = mock_uow.audit_events.create.call_args.args[0]
    assert event.action == "password_reset_confirmed"

    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_wrong_code(mock_uow, allow_all_limiter, reset_tokens, hasher, alice):
    mock_uow.accounts.get_by_email.return_value = alice
    reset_tokens.verify.return_value = False
    use_case = ConfirmPasswordResetUseCase(mock_uow, allow_all_limiter, reset_tokens, hasher)

    result = await use_case.execute("alice@example.com", "000000", "N3wPass!", "10.0.0.1")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    mock_uow.accounts.update.assert_not_called()
    reset_tokens.consume.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_account_indistinguishable_from_wrong_code(
    mock_uow, allow_all_limiter, reset_tokens, hasher, alice
):
    use_case = ConfirmPasswordResetUseCase(mock_uow, allow_all_limiter, reset_tokens, hasher)

    missing = await use_case.execute("nobody@example.com", "123456", "N3wPass!", "10.0.0.1")

    mock_uow.accounts.get_by_email.return_value = alice
    reset_tokens.verify.return_value = False
    wrong = await use_case.execute("alice@example.com", "000000", "N3wPass!", "10.0.0.1")

    assert missing.error == wrong.error
    # The unknown account still went through code verification
    assert reset_tokens.verify.call_args_list[0].args == (None, "123456")
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_weak_new_password(mock_uow, allow_all_limiter, reset_tokens, hasher):
    use_case = ConfirmPasswordResetUseCase(mock_uow, allow_all_limiter, reset_tokens, hasher)

    result = await use_case.execute("alice@example.com", "123456", "short", "10.0.0.1")

    assert result.is_err()
    assert result.error.code == "WEAK_PASSWORD"
    reset_tokens.verify.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_rate_limited_before_lookup(mock_uow, deny_all_limiter, reset_tokens, hasher):
    use_case = ConfirmPasswordResetUseCase(mock_uow, deny_all_limiter, reset_tokens, hasher)

    result = await use_case.execute("alice@example.com", "123456", "N3wPass!", "10.0.0.1")

    assert result.is_err()
    assert result.error.code == "RATE_LIMITED"
    mock_uow.accounts.get_by_email.assert_not_called()
    reset_tokens.verify.assert_not_called()


@pytest.mark.asyncio
async def test_concurrently_consumed_token_rolls_back(
    mock_uow, allow_all_limiter, reset_tokens, hasher, alice
):
    mock_uow.accounts.get_by_email.return_value = alice
    reset_tokens.consume.return_value = 0
    use_case = ConfirmPasswordResetUseCase(mock_uow, allow_all_limiter, reset_tokens, hasher)

    result = await use_case.execute("alice@example.com", "123456", "N3wPass!", "10.0.0.1")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    mock_uow.commit.assert_not_called()
    mock_uow.audit_events.create.assert_not_called()


@pytest.mark.asyncio
async def test_store_failure_on_commit_propagates(
    mock_uow, allow_all_limiter, reset_tokens, hasher, alice
):
    from sqlalchemy.exc import OperationalError

    mock_uow.accounts.get_by_email.return_value = alice
    mock_uow.commit.side_effect = OperationalError("COMMIT", {}, Exception("disk I/O error"))
    use_case = ConfirmPasswordResetUseCase(mock_uow, allow_all_limiter, reset_tokens, hasher)

    with pytest.raises(OperationalError):
        await use_case.execute("alice@example.com", "123456", "N3wPass!", "10.0.0.1")

    mock_uow.__aexit__.assert_called_once()
