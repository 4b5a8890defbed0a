"""Application layer interfaces."""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class INotificationService(ABC):
    """
    Interface for operational alert delivery.

    Implementations push short messages to an ops channel (Telegram,
    console) and must never raise into the caller.
    """

    @abstractmethod
    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic notification message.

        Args:
            message: Notification message
            severity: Severity level (0-100, higher = more critical)
        """
        pass


class IPaymentGateway(ABC):
    """
    Interface for the hosted-checkout payment provider.

    The application layer talks to the provider only through this contract.
    """

    @abstractmethod
    async def initialize_transaction(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Start a hosted checkout.

        Args:
            payload: Provider request body (amount, currency, tx_ref, customer, urls)

        Returns:
            Provider response; `data.checkout_url` holds the redirect URL

        Raises:
            PaymentGatewayError: If the provider rejects the request
        """
        pass

    @abstractmethod
    async def verify_transaction(self, tx_ref: str) -> Dict[str, Any]:
        """
        Look up a transaction by reference.

        Returns:
            Provider response; `data.status` and `data.amount` describe the payment
        """
        pass

    @abstractmethod
    def verify_webhook_signature(self, raw_body: bytes, signature: Optional[str]) -> bool:
        """Check the callback signature against the raw request body."""
        pass
