"""
Pytest configuration and shared fixtures.

Provides an in-memory SQLite order store, a mocked Snap client, a mocked
Firebase app and an httpx client bound to the FastAPI app with its
dependencies overridden.
"""
from typing import AsyncGenerator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from midtransclient.error_midtrans import MidtransAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from database import Base
from db_models import Order
from deps import get_identity_service, get_order_store, get_payment_gateway
from main import app
from services.identity_service import IdentityService
from services.order_store import SqlOrderStore
from services.payment_service import PaymentGateway


KNOWN_TRANSACTION_ID = "9aed5972-5b6a-401e-894b-a32c91ed1a3a"


def settlement_status(order_id: str = "order-id-42", **overrides) -> dict:
    """Status object as returned by the Snap notification/status call."""
    status = {
        "status_code": "200",
        "status_message": "Success, transaction is found",
        "transaction_id": KNOWN_TRANSACTION_ID,
        "order_id": order_id,
        "gross_amount": "2500.00",
        "payment_type": "bank_transfer",
        "transaction_status": "settlement",
        "fraud_status": "accept",
    }
    status.update(overrides)
    return status


# ── Database Fixtures ────────────────────────────────────────────────


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create an in-memory SQLite database session for each test.

    Uses StaticPool to allow in-memory SQLite with async SQLAlchemy.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def sample_order(db_session: AsyncSession) -> Order:
    """A pending order as recorded at checkout."""
    order = Order(
        order_id="order-id-42",
        status="pending",
        gross_amount=2500,
        customer_email="buyer@example.com",
        callback_url="https://shop.example.com/finish",
    )
    db_session.add(order)
    await db_session.commit()
    await db_session.refresh(order)
    return order


# ── Mock Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def mock_snap():
    """Mock Midtrans Snap client; knows one transaction id."""
    snap = MagicMock()
    snap.create_transaction_token.return_value = "snap-token-123"

    def notification(payload):
        if isinstance(payload, dict) and payload.get("transaction_id") == KNOWN_TRANSACTION_ID:
            return settlement_status()
        if not isinstance(payload, dict) or "transaction_id" not in payload:
            raise KeyError("transaction_id")
        raise MidtransAPIError(
            "Midtrans API is returning API error. HTTP status code: 404. "
            "API response: {\"status_code\":\"404\",\"status_message\":\"Transaction doesn't exist.\"}",
            http_status_code=404,
        )

    snap.transactions.notification.side_effect = notification
    return snap


@pytest.fixture
def gateway(mock_snap) -> PaymentGateway:
    return PaymentGateway(mock_snap)


@pytest.fixture
def firebase_app():
    """Stand-in for a firebase_admin.App; auth.get_user is patched per test."""
    return MagicMock(name="firebase_app")


# ── HTTP Client ──────────────────────────────────────────────────────


@pytest_asyncio.fixture(scope="function")
async def client(db_session, gateway, firebase_app) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx client bound to the app with SDK-backed dependencies overridden.

    The lifespan does not run under ASGITransport, so no real Firebase app
    or Snap client is created.
    """
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_identity_service] = lambda: IdentityService(firebase_app)
    app.dependency_overrides[get_order_store] = lambda: SqlOrderStore(db_session)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
