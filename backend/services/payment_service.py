"""
Payment service: thin wrapper around the Midtrans Snap SDK.

Keeps gateway payload shaping and error translation out of routes:
    1. Transaction token creation (gross amount + composite order id)
    2. Transaction inquiry by id
    3. Notification verification (the SDK re-fetches the status from the
       gateway, which is what authenticates the webhook)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Mapping, Optional

import midtransclient
from midtransclient.error_midtrans import MidtransAPIError

from domain.constants import ORDER_ID_PREFIX
from domain.errors import GatewayError, TransactionNotFoundError
from services.async_executor import run_blocking

logger = logging.getLogger(__name__)


def gateway_order_id(order_id: str) -> str:
    """Composite order id sent to the gateway: ``"42"`` -> ``"order-id-42"``."""
    return f"{ORDER_ID_PREFIX}{order_id}"


def compute_gross_amount(items: Iterable[Mapping[str, Any]]) -> int:
    """Exact integer sum of ``price * quantity`` over the line items."""
    return sum(int(item["price"]) * int(item["quantity"]) for item in items)


def build_transaction_params(
    *,
    order_id: str,
    items: list[dict],
    customer: dict,
    callback_url: str | None = None,
) -> dict:
    params = {
        "transaction_details": {
            "order_id": gateway_order_id(order_id),
            "gross_amount": compute_gross_amount(items),
        },
        "customer_details": customer,
        "item_details": items,
    }
    if callback_url:
        params["callbacks"] = {"finish": callback_url}
    return params


class PaymentGateway:
    """
    Snap-backed gateway adapter.

    Also serves as the ``NotificationVerifier`` of the notification dispatcher.
    """

    def __init__(self, snap: midtransclient.Snap, timeout: Optional[float] = None):
        self._snap = snap
        self._timeout = timeout

    async def create_transaction_token(
        self,
        *,
        order_id: str,
        items: list[dict],
        customer: dict,
        callback_url: str | None = None,
    ) -> str:
        """
        Mint a Snap transaction token for the order.

        Raises:
            GatewayError: the gateway rejected the request or could not be reached
        """
        params = build_transaction_params(
            order_id=order_id, items=items, customer=customer, callback_url=callback_url,
        )
        details = params["transaction_details"]
        try:
            token = await run_blocking(
                self._snap.create_transaction_token, params, timeout=self._timeout,
            )
        except MidtransAPIError as e:
            logger.warning(f"Snap rejected order {details['order_id']}: {e.message}")
            raise GatewayError(e.message, details={"http_status_code": e.http_status_code})
        except asyncio.TimeoutError:
            logger.error(f"Snap token request timed out for order {details['order_id']}")
            raise GatewayError("Payment gateway timed out")
        except Exception as e:
            logger.error(f"Snap token request failed for order {details['order_id']}: {e}", exc_info=True)
            raise GatewayError(str(e))

        logger.info(f"Snap token created for {details['order_id']} (gross_amount={details['gross_amount']})")
        return token

    async def get_transaction_detail(self, transaction_id: str) -> dict:
        """Look up a transaction through the notification/inquiry call."""
        return await self.verify({"transaction_id": transaction_id})

    async def verify(self, payload: Mapping[str, Any] | str) -> dict:
        """
        Verify a notification payload and return the gateway's status object.

        Raises:
            TransactionNotFoundError: unknown transaction id, malformed payload,
                gateway failure or timeout
        """
        if isinstance(payload, Mapping):
            payload = dict(payload)
        try:
            return await run_blocking(
                self._snap.transactions.notification, payload, timeout=self._timeout,
            )
        except MidtransAPIError as e:
            logger.info(f"Gateway did not resolve transaction: {e.message}")
            raise TransactionNotFoundError()
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed notification payload: {e!r}")
            raise TransactionNotFoundError()
        except asyncio.TimeoutError:
            logger.error("Transaction inquiry timed out")
            raise TransactionNotFoundError()
        except Exception as e:
            logger.error(f"Transaction inquiry failed: {e}", exc_info=True)
            raise TransactionNotFoundError()
