"""
Unit tests for ResetPasswordUseCase
"""

import hashlib
from datetime import datetime

import pytest

from tipsy.app.services.password_hasher import verify_password
from tipsy.app.use_cases.auth import ResetPasswordUseCase

NOW = datetime(2026, 1, 1, 12, 0, 0)


@pytest.mark.asyncio
async def test_successful_reset(mock_uow, alice):
    mock_uow.users.get_by_reset_token.return_value = alice
    mock_uow.users.redeem_reset_token.side_effect = lambda user, digest, now, h: user

    result = await ResetPasswordUseCase(mock_uow, clock=lambda: NOW).execute(
        "plain-token", "newpassword1"
    )

    assert result.is_ok()
    mock_uow.users.get_by_reset_token.assert_called_once_with(
        hashlib.sha256(b"plain-token").hexdigest(), NOW
    )
    user, digest, now, new_hash = mock_uow.users.redeem_reset_token.call_args.args
    assert user is alice
    assert digest == hashlib.sha256(b"plain-token").hexdigest()
    assert now == NOW
    assert verify_password("newpassword1", new_hash)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_unknown_or_expired_token(mock_uow):
    mock_uow.users.get_by_reset_token.return_value = None

    result = await ResetPasswordUseCase(mock_uow).execute("plain-token", "newpassword1")

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"
    mock_uow.users.redeem_reset_token.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_short_password_is_checked_before_token(mock_uow):
    result = await ResetPasswordUseCase(mock_uow).execute("plain-token", "short12")

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.users.get_by_reset_token.assert_not_called()


@pytest.mark.asyncio
async def test_missing_token(mock_uow):
    result = await ResetPasswordUseCase(mock_uow).execute(None, "newpassword1")

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_token_redeemed_between_lookup_and_update(mock_uow, alice):
    """
    Given the lookup still found alice's token
    When another request redeemed it before this one's update
    Then this request gets the invalid-token error and commits nothing
    """
    mock_uow.users.get_by_reset_token.return_value = alice
    mock_uow.users.redeem_reset_token.return_value = None

    result = await ResetPasswordUseCase(mock_uow).execute("plain-token", "newpassword1")

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"
    mock_uow.commit.assert_not_called()
