"""
Domain exceptions.

Raised by domain rules and application services; the API layer maps each
class to an HTTP status code.
"""


class MarketplaceError(Exception):
    """Base class for all marketplace errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MarketplaceError):
    """Input failed a business validation rule."""

    status_code = 400


class AccessDeniedError(MarketplaceError):
    """Caller is not allowed to touch the resource."""

    status_code = 403


class NotFoundError(MarketplaceError):
    """Requested resource does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class BusinessRuleError(MarketplaceError):
    """Operation conflicts with the current state of the ledger."""

    status_code = 409


class InvalidTransitionError(BusinessRuleError):
    """Status change is not allowed from the current status."""

    def __init__(self, entity: str, current: str, target: str, detail: str = ""):
        message = f"Invalid {entity} status transition from {current} to {target}"
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
        self.current = current
        self.target = target


class InsufficientStockError(BusinessRuleError):
    """Product does not have enough quantity available."""

    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient quantity for {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )


class AuthenticationError(MarketplaceError):
    """Credentials or token are invalid."""

    status_code = 401


class PaymentGatewayError(MarketplaceError):
    """Payment provider rejected or failed the request."""

    status_code = 502
