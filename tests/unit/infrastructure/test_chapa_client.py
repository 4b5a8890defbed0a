"""Unit tests for the Chapa adapter."""
import hashlib
import hmac
from unittest.mock import AsyncMock, patch

import pytest

from core.domain.exceptions import PaymentGatewayError
from core.infrastructure.adapters.chapa import ChapaClient, compute_signature
from core.settings.sections.chapa import ChapaSettings


BODY = b'{"tx_ref":"ord-1234abcd-1700000000000","status":"success"}'


@pytest.fixture
def settings():
    return ChapaSettings(
        CHAPA_SECRET_KEY="CHASECK_TEST-secret",
        CHAPA_WEBHOOK_SECRET="whsec",
        CHAPA_BASE_URL="https://api.chapa.test/v1/",
    )


@pytest.fixture
def client(settings):
    return ChapaClient(settings, retries=0)


def test_compute_signature_is_hex_hmac_sha256():
    expected = hmac.new(b"whsec", BODY, hashlib.sha256).hexdigest()
    assert compute_signature("whsec", BODY) == expected


def test_verify_webhook_signature(client):
    assert client.verify_webhook_signature(BODY, compute_signature("whsec", BODY))
    assert not client.verify_webhook_signature(BODY, compute_signature("other", BODY))
    assert not client.verify_webhook_signature(BODY, None)
    assert not client.verify_webhook_signature(BODY + b" ", compute_signature("whsec", BODY))


def test_unsigned_webhooks_accepted_without_secret():
    client = ChapaClient(ChapaSettings(CHAPA_WEBHOOK_SECRET=""))
    assert client.verify_webhook_signature(BODY, None)


def test_base_url_trailing_slash_is_dropped(client):
    assert client.base_url == "https://api.chapa.test/v1"


@pytest.mark.asyncio
async def test_initialize_transaction_returns_checkout(client):
    response = {"status": "success", "data": {"checkout_url": "https://checkout.chapa.co/abc"}}

    with patch.object(client, "_request", AsyncMock(return_value=response)) as request:
        data = await client.initialize_transaction({"tx_ref": "ord-1", "amount": "100"})

    assert data["data"]["checkout_url"] == "https://checkout.chapa.co/abc"
    request.assert_awaited_once_with(
        "POST", "/transaction/initialize", json={"tx_ref": "ord-1", "amount": "100"}
    )


@pytest.mark.asyncio
async def test_initialize_transaction_rejects_failed_status(client):
    response = {"status": "failed", "message": "Invalid currency"}

    with patch.object(client, "_request", AsyncMock(return_value=response)):
        with pytest.raises(PaymentGatewayError, match="Invalid currency"):
            await client.initialize_transaction({"tx_ref": "ord-1"})


@pytest.mark.asyncio
async def test_initialize_transaction_requires_checkout_url(client):
    with patch.object(client, "_request", AsyncMock(return_value={"status": "success", "data": {}})):
        with pytest.raises(PaymentGatewayError):
            await client.initialize_transaction({"tx_ref": "ord-1"})


@pytest.mark.asyncio
async def test_verify_transaction_path(client):
    with patch.object(client, "_request", AsyncMock(return_value={"status": "success"})) as request:
        await client.verify_transaction("ord-1")

    request.assert_awaited_once_with("GET", "/transaction/verify/ord-1")
