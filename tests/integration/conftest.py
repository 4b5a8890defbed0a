"""Pytest configuration and fixtures for integration tests."""

from dataclasses import dataclass
from decimal import Decimal

import email_validator
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from core.application.dtos import CreateOrderRequest, OrderItemRequest, UserContext
from core.application.services import (
    DisputeApplicationService,
    OrderApplicationService,
    PayoutApplicationService,
)
from core.application.services.payment_service import confirm_order_payment
from core.data.models import (
    Base,
    BuyerModel,
    ProducerModel,
    ProductModel,
    ProductProducerModel,
    UserModel,
)
from core.data.uow import create_uow
from core.domain.enums import UserRole
from core.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from core.infrastructure.database.config import create_session_factory
from core.settings.sections.marketplace import MarketplaceSettings


# Accept reserved "@*.test" addresses used by the test accounts
email_validator.TEST_ENVIRONMENT = True

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@dataclass
class Actors:
    admin: UserContext
    buyer: UserContext
    other_buyer: UserContext
    producer_a: UserContext
    producer_b: UserContext
    producer_a_id: str
    producer_b_id: str


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
def marketplace_settings():
    return MarketplaceSettings(MARKETPLACE_COMMISSION_RATE=Decimal("0.10"), MARKETPLACE_CURRENCY="ETB")


@pytest.fixture
def alerts():
    return MockNotificationService()


@pytest.fixture
def payout_service(session_factory, marketplace_settings, alerts):
    return PayoutApplicationService(session_factory, marketplace_settings, alerts)


@pytest.fixture
def order_service(session_factory, marketplace_settings, payout_service):
    return OrderApplicationService(session_factory, marketplace_settings, payout_service)


@pytest.fixture
def dispute_service(session_factory, payout_service):
    return DisputeApplicationService(session_factory, payout_service)


@pytest_asyncio.fixture
async def actors(session_factory) -> Actors:
    """Admin, two buyers and two producers, inserted directly."""
    async with create_uow(session_factory) as uow:
        users = {}
        for key, role in [
            ("admin", UserRole.ADMIN),
            ("buyer", UserRole.BUYER),
            ("other_buyer", UserRole.BUYER),
            ("producer_a", UserRole.PRODUCER),
            ("producer_b", UserRole.PRODUCER),
        ]:
            users[key] = await uow.users.add(
                UserModel(
                    email=f"{key}@mesob.test",
                    password_hash="not-used",
                    name=key.replace("_", " ").title(),
                    role=role.value,
                )
            )

        await uow.users.add_buyer(BuyerModel(user_id=users["buyer"].id))
        await uow.users.add_buyer(BuyerModel(user_id=users["other_buyer"].id))
        producer_a = await uow.users.add_producer(
            ProducerModel(user_id=users["producer_a"].id, business_name="Sidama Honey")
        )
        producer_b = await uow.users.add_producer(
            ProducerModel(user_id=users["producer_b"].id, business_name="Yirga Beans")
        )
        await uow.commit()

    def ctx(key):
        user = users[key]
        return UserContext(id=user.id, email=user.email, name=user.name, role=user.role)

    return Actors(
        admin=ctx("admin"),
        buyer=ctx("buyer"),
        other_buyer=ctx("other_buyer"),
        producer_a=ctx("producer_a"),
        producer_b=ctx("producer_b"),
        producer_a_id=producer_a.id,
        producer_b_id=producer_b.id,
    )


@pytest_asyncio.fixture
async def products(session_factory, actors) -> dict:
    """
    honey: 100.00, 10 in stock, owned by producer A
    coffee: 250.00, 5 in stock, 60% producer A / 40% producer B
    """
    async with create_uow(session_factory) as uow:
        honey = ProductModel(
            producer_id=actors.producer_a_id,
            name="White Honey 1kg",
            category="honey",
            price=Decimal("100.00"),
            quantity_available=10,
        )
        honey.shares = [
            ProductProducerModel(producer_id=actors.producer_a_id, share_percentage=Decimal("100"))
        ]
        coffee = ProductModel(
            producer_id=actors.producer_a_id,
            name="Yirgacheffe Coffee 500g",
            category="coffee",
            price=Decimal("250.00"),
            quantity_available=5,
        )
        coffee.shares = [
            ProductProducerModel(
                producer_id=actors.producer_a_id, share_percentage=Decimal("60"), position=0
            ),
            ProductProducerModel(
                producer_id=actors.producer_b_id,
                share_percentage=Decimal("40"),
                role="GROWER",
                position=1,
            ),
        ]
        await uow.products.add(honey)
        await uow.products.add(coffee)
        await uow.commit()
        return {"honey": honey.id, "coffee": coffee.id}


@pytest.fixture
def place_order(order_service, actors, products):
    """Place an order for the default buyer: `await place_order(honey=2, coffee=1)`."""

    async def _place(buyer=None, **quantities):
        request = CreateOrderRequest(
            items=[
                OrderItemRequest(product_id=products[name], quantity=qty)
                for name, qty in quantities.items()
            ],
            shipping_address={"city": "Addis Ababa"},
        )
        return await order_service.create_order(buyer or actors.buyer, request)

    return _place


@pytest.fixture
def confirm_payment(session_factory, payout_service):
    """Confirm an order's payment the way the webhook does."""

    async def _confirm(order_id, transaction_id="chapa-tx-1"):
        async with create_uow(session_factory) as uow:
            order = await uow.orders.get(order_id)
            payout_ids = await confirm_order_payment(
                uow, order, payout_service, method="CHAPA", transaction_id=transaction_id
            )
            await uow.commit()
        return payout_ids

    return _confirm
