"""
Shared FastAPI dependencies.

Long-lived clients are built once in the lifespan (main.py) and stored on
``app.state``; these dependencies hand them to routers. Tests replace them
through ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from domain.enums import OrderStoreBackend
from domain.errors import IdentityLookupError
from services.identity_service import IdentityService
from services.notification_service import NotificationDispatcher
from services.order_store import FirestoreOrderStore, OrderStore, SqlOrderStore
from services.payment_service import PaymentGateway


def get_identity_service(request: Request) -> IdentityService:
    """Identity service; 404 when Firebase was not configured at startup."""
    firebase = getattr(request.app.state, "firebase", None)
    if firebase is None:
        raise IdentityLookupError("Identity provider is not configured")
    return IdentityService(
        firebase.app,
        timeout=settings.upstream_timeout_seconds,
    )


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway


async def get_order_store(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> OrderStore:
    """Order store selected by ORDER_STORE_BACKEND."""
    if settings.order_store_backend == OrderStoreBackend.FIRESTORE.value:
        return FirestoreOrderStore(
            request.app.state.firebase.firestore(),
            collection=settings.orders_collection,
            timeout=settings.upstream_timeout_seconds,
        )
    return SqlOrderStore(db)


def get_notification_dispatcher(
    gateway: PaymentGateway = Depends(get_payment_gateway),
    store: OrderStore = Depends(get_order_store),
) -> NotificationDispatcher:
    return NotificationDispatcher(verifier=gateway, store=store)
