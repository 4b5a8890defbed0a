"""
Chapa REST adapter.

Hosted checkout initialisation, transaction verification and webhook
signature checks over aiohttp.
"""
import asyncio
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import aiohttp

from core.application.interfaces import IPaymentGateway
from core.domain.exceptions import PaymentGatewayError
from core.settings.sections.chapa import ChapaSettings


logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-chapa-signature"


def compute_signature(secret: str, raw_body: bytes) -> str:
    """Hex HMAC-SHA256 of the raw callback body."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


class ChapaClient(IPaymentGateway):
    """
    Chapa implementation of the payment gateway.

    Every call authenticates with the secret key as a bearer token.
    Timeouts and connection errors are retried; API errors are not.
    """

    def __init__(self, settings: ChapaSettings, retries: int = 2):
        """
        Initialize Chapa client.

        Args:
            settings: Chapa settings (keys, base url, timeout)
            retries: Extra attempts on timeout/connection errors
        """
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.retries = retries
        logger.info(f"ChapaClient initialized ({self.base_url})")

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.secret_key}",
            "Content-Type": "application/json",
        }

    async def initialize_transaction(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST /transaction/initialize.

        Raises:
            PaymentGatewayError: If Chapa does not answer with status "success"
        """
        data = await self._request("POST", "/transaction/initialize", json=payload)
        if data.get("status") != "success":
            raise PaymentGatewayError(f"Chapa API error: {data.get('message', data)}")
        checkout_url = (data.get("data") or {}).get("checkout_url")
        if not checkout_url:
            raise PaymentGatewayError("Chapa response has no checkout_url")
        logger.info(f"✅ Chapa checkout created for {payload.get('tx_ref')}")
        return data

    async def verify_transaction(self, tx_ref: str) -> Dict[str, Any]:
        """GET /transaction/verify/{tx_ref}."""
        return await self._request("GET", f"/transaction/verify/{tx_ref}")

    def verify_webhook_signature(self, raw_body: bytes, signature: Optional[str]) -> bool:
        """
        Compare the callback signature with our own HMAC.

        Without a configured webhook secret every callback is accepted.
        """
        secret = self.settings.webhook_secret
        if not secret:
            return True
        if not signature:
            return False
        return hmac.compare_digest(compute_signature(secret, raw_body), signature)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout_seconds)
        last_error: Optional[Exception] = None

        for attempt in range(self.retries + 1):
            try:
                async with aiohttp.ClientSession(timeout=timeout) as session:
                    async with session.request(method, url, headers=self._headers, **kwargs) as response:
                        try:
                            data = await response.json(content_type=None)
                        except ValueError:
                            data = {"message": await response.text()}
                        if response.status >= 400:
                            logger.error(f"Chapa API error: {response.status} - {data}")
                            raise PaymentGatewayError(
                                f"Chapa API error {response.status}: {data.get('message', data)}"
                            )
                        return data
            except (asyncio.TimeoutError, aiohttp.ClientConnectionError) as e:
                last_error = e
                if attempt < self.retries:
                    wait_time = attempt + 1
                    logger.warning(
                        f"Chapa {method} {path} failed (attempt {attempt + 1}/{self.retries + 1}): "
                        f"{e}. Retrying in {wait_time}s..."
                    )
                    await asyncio.sleep(wait_time)

        logger.error(f"Chapa {method} {path} failed after {self.retries + 1} attempts: {last_error}")
        raise PaymentGatewayError(f"Chapa unreachable: {last_error}")
