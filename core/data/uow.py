"""Unit of Work pattern for atomic transactions."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.value_objects import ExecutionID

from .repositories import (
    SqlAlchemyAuditRepository,
    SqlAlchemyBankAccountRepository,
    SqlAlchemyDisputeRepository,
    SqlAlchemyNotificationRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyPayoutRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyReviewRepository,
    SqlAlchemyUserRepository,
)

_NOT_INITIALIZED = "UnitOfWork not initialized. Use async context manager."


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions.

    Responsibilities:
    1. Manage SQLAlchemy session lifecycle
    2. Propagate ExecutionID across all operations
    3. Atomic commit/rollback of all repository operations
    4. Lazy initialization of repositories
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._execution_id: Optional[ExecutionID] = None
        self._repositories: dict = {}

    async def __aenter__(self) -> "UnitOfWork":
        """Start transaction scope."""
        self._session = self._session_factory()
        self._execution_id = ExecutionID.generate()
        self._repositories = {}
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Rollback on exception, then release the session."""
        if exc_type is not None:
            await self._session.rollback()
        await self._session.close()

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError(_NOT_INITIALIZED)
        return self._session

    @property
    def execution_id(self) -> ExecutionID:
        """Get current execution ID for tracing.

        Returns:
            ExecutionID value object
        """
        if self._execution_id is None:
            raise RuntimeError(_NOT_INITIALIZED)
        return self._execution_id

    def _repository(self, name: str, repository_class):
        if self._session is None:
            raise RuntimeError(_NOT_INITIALIZED)
        if name not in self._repositories:
            self._repositories[name] = repository_class(self._session)
        return self._repositories[name]

    @property
    def users(self) -> SqlAlchemyUserRepository:
        return self._repository("users", SqlAlchemyUserRepository)

    @property
    def products(self) -> SqlAlchemyProductRepository:
        return self._repository("products", SqlAlchemyProductRepository)

    @property
    def reviews(self) -> SqlAlchemyReviewRepository:
        return self._repository("reviews", SqlAlchemyReviewRepository)

    @property
    def orders(self) -> SqlAlchemyOrderRepository:
        """Lazy-load order repository."""
        return self._repository("orders", SqlAlchemyOrderRepository)

    @property
    def payments(self) -> SqlAlchemyPaymentRepository:
        return self._repository("payments", SqlAlchemyPaymentRepository)

    @property
    def payouts(self) -> SqlAlchemyPayoutRepository:
        """Lazy-load payout ledger repository."""
        return self._repository("payouts", SqlAlchemyPayoutRepository)

    @property
    def bank_accounts(self) -> SqlAlchemyBankAccountRepository:
        return self._repository("bank_accounts", SqlAlchemyBankAccountRepository)

    @property
    def disputes(self) -> SqlAlchemyDisputeRepository:
        return self._repository("disputes", SqlAlchemyDisputeRepository)

    @property
    def notifications(self) -> SqlAlchemyNotificationRepository:
        return self._repository("notifications", SqlAlchemyNotificationRepository)

    @property
    def audit(self) -> SqlAlchemyAuditRepository:
        return self._repository("audit", SqlAlchemyAuditRepository)

    async def commit(self) -> None:
        """Commit all pending changes."""
        if self._session is None:
            raise RuntimeError(_NOT_INITIALIZED)
        await self._session.commit()

    async def rollback(self) -> None:
        """Rollback all pending changes."""
        if self._session is None:
            raise RuntimeError(_NOT_INITIALIZED)
        await self._session.rollback()


def create_uow(session_factory: async_sessionmaker) -> UnitOfWork:
    """Create a new Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory)
