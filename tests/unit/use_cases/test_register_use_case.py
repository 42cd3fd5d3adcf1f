"""
Unit tests for RegisterUseCase

Tests all business logic with mocked dependencies.
"""
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from authcore.app.use_cases.auth import RegisterCommand, RegisterUseCase
from authcore.domain.entities import Account


def alice_command(**overrides) -> RegisterCommand:
    data = {
        "email": "Alice@Example.com",
        "password": "S3cure!",
        "display_name": "Alice",
        "phone": None,
    }
    data.update(overrides)
    return RegisterCommand(**data)


@pytest.mark.asyncio
async def test_successful_registration(mock_uow, hasher, sessions):
    use_case = RegisterUseCase(mock_uow, hasher, sessions)

    result = await use_case.execute(alice_command(phone="+886912345678"))

    assert result.is_ok()
    data = result.value
    assert data.account.email == "Alice@Example.com"
    assert data.account.display_name == "Alice"
    assert data.account.phone == "+886912345678"

    created: Account = mock_uow.accounts.create.call_args.args[0]
    assert created.normalized_email == "alice@example.com"
    assert hasher.verify("S3cure!", created.password_hash)

    claim = mock_uow.claims.create.call_args.args[0]
    assert claim.account_id == created.id
    assert claim.claim_type == "name"
    assert claim.claim_value == "Alice"

    event = mock_uow.audit_events.create.call_args.args[0]
    assert event.action == "account_registered"

    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_issued_session_resolves_to_new_account(mock_uow, hasher, sessions):
    use_case = RegisterUseCase(mock_uow, hasher, sessions)

    result = await use_case.execute(alice_command())

    claims = sessions.validate(result.value.session_token)
    created: Account = mock_uow.accounts.create.call_args.args[0]
    assert claims is not None
    assert claims.account_id == created.id
    assert claims.security_stamp == created.security_stamp


@pytest.mark.asyncio
async def test_duplicate_email(mock_uow, hasher, sessions):
    mock_uow.accounts.get_by_email.return_value = Account(
        email="alice@example.com", normalized_email="alice@example.com", password_hash="x"
    )
    use_case = RegisterUseCase(mock_uow, hasher, sessions)

    result = await use_case.execute(alice_command())

    assert result.is_err()
    assert result.error.code == "DUPLICATE_EMAIL"
    assert result.error.details[0].code == "DuplicateEmail"
    mock_uow.accounts.create.assert_not_called()
    mock_uow.claims.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_duplicate_email_lost_race(mock_uow, hasher, sessions):
    mock_uow.accounts.create = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("unique")))
    use_case = RegisterUseCase(mock_uow, hasher, sessions)

    result = await use_case.execute(alice_command())

    assert result.is_err()
    assert result.error.code == "DUPLICATE_EMAIL"
    mock_uow.claims.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_weak_password(mock_uow, hasher, sessions):
    use_case = RegisterUseCase(mock_uow, hasher, sessions)

    result = await use_case.execute(alice_command(password="password"))

    assert result.is_err()
    assert result.error.code == "WEAK_PASSWORD"
    assert result.error.details
    mock_uow.accounts.get_by_email.assert_not_called()
    mock_uow.accounts.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_empty_phone_stored_as_none(mock_uow, hasher, sessions):
    use_case = RegisterUseCase(mock_uow, hasher, sessions)

    result = await use_case.execute(alice_command(phone=""))

    assert result.is_ok()
    created: Account = mock_uow.accounts.create.call_args.args[0]
    assert created.phone is None
