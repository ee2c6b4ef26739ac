"""
Payment notification dispatch.

Handles:
    1. Verification of the raw webhook payload (delegated to a NotificationVerifier)
    2. Mapping the gateway transaction status onto an order status
    3. Writing that status back to the order store

Decisions:
    - A notification for an unknown order is logged and ignored.
    - A failed store write is logged; the caller still gets the status object.
    - Writes for one order id are serialized in-process and skipped when the
      stored status already matches, so a replayed notification is a no-op.
"""
import asyncio
import logging
import weakref
from typing import Any, Mapping, Optional, Protocol

from domain.enums import FraudStatus, OrderStatus, TransactionStatus
from services.order_store import OrderStore

logger = logging.getLogger(__name__)


class NotificationVerifier(Protocol):
    async def verify(self, payload: Mapping[str, Any] | str) -> dict:
        """Return the authoritative status object or raise TransactionNotFoundError."""
        ...


_STATUS_MAP = {
    TransactionStatus.SETTLEMENT.value: OrderStatus.SETTLEMENT,
    TransactionStatus.CANCEL.value: OrderStatus.FAILURE,
    TransactionStatus.DENY.value: OrderStatus.FAILURE,
    TransactionStatus.EXPIRE.value: OrderStatus.FAILURE,
    TransactionStatus.PENDING.value: OrderStatus.PENDING,
    TransactionStatus.REFUND.value: OrderStatus.REFUND,
}

_FRAUD_MAP = {
    FraudStatus.CHALLENGE.value: OrderStatus.CHALLENGE,
    FraudStatus.ACCEPT.value: OrderStatus.ACCEPT,
}


def map_transaction_status(
    transaction_status: Optional[str],
    fraud_status: Optional[str] = None,
) -> Optional[OrderStatus]:
    """
    Order status for a gateway transaction status, or None for no update.

    ``capture`` resolves through the fraud status; a capture without a
    recognised fraud status is not mapped.
    """
    if transaction_status == TransactionStatus.CAPTURE.value:
        return _FRAUD_MAP.get(fraud_status)
    return _STATUS_MAP.get(transaction_status)


class NotificationDispatcher:
    """Applies gateway notifications to the order store."""

    # Shared across dispatchers; entries vanish once no request holds them
    _locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def __init__(self, verifier: NotificationVerifier, store: OrderStore):
        self._verifier = verifier
        self._store = store

    def _lock_for(self, order_id: str) -> asyncio.Lock:
        lock = self._locks.get(order_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[order_id] = lock
        return lock

    async def handle(self, payload: Mapping[str, Any] | str) -> dict:
        """
        Verify ``payload``, write the mapped order status, return the status object.

        Raises:
            TransactionNotFoundError: the payload failed verification
        """
        status_obj = await self._verifier.verify(payload)

        order_id = status_obj.get("order_id")
        transaction_status = status_obj.get("transaction_status")
        fraud_status = status_obj.get("fraud_status")

        logger.info(
            f"Notification received. Order ID: {order_id}. "
            f"Transaction status: {transaction_status}. Fraud status: {fraud_status}"
        )

        target = map_transaction_status(transaction_status, fraud_status)
        if target is None:
            logger.warning(
                f"No order status for transaction_status={transaction_status!r} "
                f"fraud_status={fraud_status!r}; order {order_id} left unchanged"
            )
            return status_obj

        if not order_id:
            logger.warning("Notification without order_id; nothing to update")
            return status_obj

        try:
            await self._apply(str(order_id), target)
        except Exception as e:
            logger.error(f"Failed to write status '{target.value}' for order {order_id}: {e}", exc_info=True)

        return status_obj

    async def _apply(self, order_id: str, target: OrderStatus) -> None:
        async with self._lock_for(order_id):
            order = await self._store.find_by_order_id(order_id)
            if order is None:
                logger.warning(f"Notification for unknown order {order_id}; ignored")
                return

            if order.status == target.value:
                logger.info(f"Order {order_id} already '{target.value}'; skipping write")
                return

            await self._store.update_status(order.key, target)
            logger.info(f"Order {order_id}: {order.status} → {target.value}")
