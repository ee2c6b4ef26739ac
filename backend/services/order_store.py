"""
Order store adapters.

Two backends behind the same interface:
    SqlOrderStore       — orders table via SQLAlchemy (default)
    FirestoreOrderStore — ``orders`` collection in Firestore

Both look an order up by its business ``order_id`` and update its status by
the internal key (row id / document id) returned from that lookup.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Order
from domain.enums import OrderStatus
from services.async_executor import run_blocking

logger = logging.getLogger(__name__)


@dataclass
class StoredOrder:
    key: Any           # row id (sql) or document id (firestore)
    order_id: str
    status: Optional[str]


class OrderStore(Protocol):
    async def find_by_order_id(self, order_id: str) -> StoredOrder | None: ...

    async def update_status(self, key: Any, status: OrderStatus) -> None: ...

    async def create(
        self,
        *,
        order_id: str,
        status: OrderStatus,
        gross_amount: int,
        items: list[dict],
        customer: dict,
        callback_url: str | None,
    ) -> StoredOrder: ...


def _customer_name(customer: dict) -> str | None:
    name = customer.get("name")
    if name:
        return name
    parts = [customer.get("first_name"), customer.get("last_name")]
    return " ".join(p for p in parts if p) or None


# ════════════════════════════════════════════════════════════════════
# SQL
# ════════════════════════════════════════════════════════════════════


class SqlOrderStore:
    """Orders table. Each write commits its own unit of work."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def find_by_order_id(self, order_id: str) -> StoredOrder | None:
        q = await self._db.execute(select(Order).where(Order.order_id == order_id))
        order = q.scalar_one_or_none()
        if order is None:
            return None
        return StoredOrder(key=order.id, order_id=order.order_id, status=order.status)

    async def update_status(self, key: Any, status: OrderStatus) -> None:
        order = await self._db.get(Order, key)
        if order is None:
            raise LookupError(f"Order row {key} disappeared before update")
        order.status = OrderStatus(status).value
        await self._db.commit()

    async def create(
        self,
        *,
        order_id: str,
        status: OrderStatus,
        gross_amount: int,
        items: list[dict],
        customer: dict,
        callback_url: str | None,
    ) -> StoredOrder:
        order = Order(
            order_id=order_id,
            status=OrderStatus(status).value,
            gross_amount=gross_amount,
            items=items,
            customer_email=customer.get("email"),
            customer_name=_customer_name(customer),
            customer_phone=customer.get("phone"),
            callback_url=callback_url,
        )
        self._db.add(order)
        await self._db.commit()
        await self._db.refresh(order)
        return StoredOrder(key=order.id, order_id=order.order_id, status=order.status)


# ════════════════════════════════════════════════════════════════════
# Firestore
# ════════════════════════════════════════════════════════════════════


class FirestoreOrderStore:
    """Orders collection in Firestore; the document id is the internal key."""

    def __init__(self, client, collection: str = "orders", timeout: Optional[float] = None):
        self._collection = client.collection(collection)
        self._timeout = timeout

    def _find(self, order_id: str) -> StoredOrder | None:
        docs = self._collection.where(filter=FieldFilter("order_id", "==", order_id)).limit(1).get()
        for doc in docs:
            data = doc.to_dict() or {}
            return StoredOrder(key=doc.id, order_id=order_id, status=data.get("status"))
        return None

    def _update(self, key: Any, status: OrderStatus) -> None:
        self._collection.document(key).update({
            "status": OrderStatus(status).value,
            "updated_at": firestore.SERVER_TIMESTAMP,
        })

    def _create(self, data: dict) -> str:
        ref = self._collection.document()
        ref.set(data)
        return ref.id

    async def find_by_order_id(self, order_id: str) -> StoredOrder | None:
        return await run_blocking(self._find, order_id, timeout=self._timeout)

    async def update_status(self, key: Any, status: OrderStatus) -> None:
        await run_blocking(self._update, key, status, timeout=self._timeout)

    async def create(
        self,
        *,
        order_id: str,
        status: OrderStatus,
        gross_amount: int,
        items: list[dict],
        customer: dict,
        callback_url: str | None,
    ) -> StoredOrder:
        data = {
            "order_id": order_id,
            "status": OrderStatus(status).value,
            "gross_amount": gross_amount,
            "items": items,
            "customer": customer,
            "url": callback_url,
            "created_at": firestore.SERVER_TIMESTAMP,
        }
        key = await run_blocking(self._create, data, timeout=self._timeout)
        return StoredOrder(key=key, order_id=order_id, status=data["status"])
