"""
Unit tests for ForgotPasswordUseCase
"""

import hashlib
import re
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from tipsy.app.services.email_sender import EmailDeliveryError
from tipsy.app.use_cases.auth import ForgotPasswordUseCase
from tipsy.app.use_cases.auth.forgot_password_use_case import GENERIC_MESSAGE

NOW = datetime(2026, 1, 1, 12, 0, 0)
FRONTEND_URL = "https://bar.example.com"


@pytest.fixture
def email_sender():
    sender = AsyncMock()
    sender.send = AsyncMock()
    return sender


def make_use_case(uow, email_sender):
    return ForgotPasswordUseCase(uow, email_sender, FRONTEND_URL, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_unknown_email_gets_generic_message_and_no_email(mock_uow, email_sender):
    mock_uow.users.get_by_email.return_value = None

    result = await make_use_case(mock_uow, email_sender).execute("ghost@x.com")

    assert result.is_ok()
    assert result.value.message == GENERIC_MESSAGE
    mock_uow.users.update_reset_token.assert_not_called()
    email_sender.send.assert_not_called()


@pytest.mark.asyncio
async def test_known_email_stores_digest_and_mails_plaintext(mock_uow, email_sender, alice):
    mock_uow.users.get_by_email.return_value = alice

    result = await make_use_case(mock_uow, email_sender).execute("ALICE@x.com")

    assert result.is_ok()
    assert result.value.message == GENERIC_MESSAGE

    to, subject, body = email_sender.send.call_args.args
    assert to == "alice@x.com"
    match = re.search(r"https://bar\.example\.com/reset-password\?token=([0-9a-f]{64})", body)
    assert match is not None
    plaintext = match.group(1)

    user, token_hash, expires_at = mock_uow.users.update_reset_token.call_args.args
    assert user is alice
    assert token_hash == hashlib.sha256(plaintext.encode()).hexdigest()
    assert token_hash != plaintext
    assert expires_at == NOW + timedelta(hours=1)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_each_request_issues_a_new_token(mock_uow, email_sender, alice):
    mock_uow.users.get_by_email.return_value = alice
    use_case = make_use_case(mock_uow, email_sender)

    await use_case.execute("alice@x.com")
    await use_case.execute("alice@x.com")

    first, second = [c.args[1] for c in mock_uow.users.update_reset_token.call_args_list]
    assert first != second


@pytest.mark.asyncio
async def test_delivery_failure_does_not_change_response(mock_uow, email_sender, alice):
    mock_uow.users.get_by_email.return_value = alice
    email_sender.send.side_effect = EmailDeliveryError("connection refused")

    result = await make_use_case(mock_uow, email_sender).execute("alice@x.com")

    assert result.is_ok()
    assert result.value.message == GENERIC_MESSAGE


@pytest.mark.asyncio
async def test_missing_email_is_a_validation_error(mock_uow, email_sender):
    result = await make_use_case(mock_uow, email_sender).execute(None)

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
