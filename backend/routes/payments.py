"""
Payment endpoints.

Endpoints:
    POST /charge                — Mint a Snap transaction token for a checkout
    GET  /det/{transaction_id}  — Gateway status of one transaction
    POST /notification_handler  — Gateway webhook; writes order status back
    POST /status                — Old path of the webhook (deprecated)
"""
import logging

from fastapi import APIRouter, Depends, Request

from config import settings
from deps import get_notification_dispatcher, get_order_store, get_payment_gateway
from domain.enums import OrderStatus
from domain.errors import TransactionNotFoundError
from models import ChargeRequest, ChargeResponse, ErrorResponse
from services.notification_service import NotificationDispatcher
from services.order_store import OrderStore
from services.payment_service import PaymentGateway, compute_gross_amount, gateway_order_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])


@router.post(
    "/charge",
    response_model=ChargeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def charge(
    req: ChargeRequest,
    gateway: PaymentGateway = Depends(get_payment_gateway),
    store: OrderStore = Depends(get_order_store),
):
    """Create a Snap transaction token for the order's line items."""
    items = [item.model_dump(exclude_none=True) for item in req.items]
    customer = req.customers.model_dump(exclude_none=True)

    token = await gateway.create_transaction_token(
        order_id=req.order_id,
        items=items,
        customer=customer,
        callback_url=req.url,
    )

    if settings.records_orders_on_charge:
        try:
            await store.create(
                order_id=gateway_order_id(req.order_id),
                status=OrderStatus.PENDING,
                gross_amount=compute_gross_amount(items),
                items=items,
                customer=customer,
                callback_url=req.url,
            )
        except Exception as e:
            # The token is already minted; the client can still pay.
            logger.error(f"Could not record order {req.order_id}: {e}")

    return ChargeResponse(token=token)


@router.get("/det/{transaction_id}", responses={404: {"model": ErrorResponse}})
async def get_transaction_detail(
    transaction_id: str,
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Raw gateway status object for a transaction id."""
    return await gateway.get_transaction_detail(transaction_id)


async def _read_payload(request: Request):
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return dict(form)
    try:
        return await request.json()
    except ValueError:
        logger.warning("Notification body is not valid JSON")
        raise TransactionNotFoundError()


@router.post("/notification_handler", responses={404: {"model": ErrorResponse}})
@router.post("/status", responses={404: {"model": ErrorResponse}}, deprecated=True)
async def notification_handler(
    request: Request,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """
    Gateway payment notification.

    Returns the verified status object; the mapped order status is written
    back as a side effect.
    """
    payload = await _read_payload(request)
    return await dispatcher.handle(payload)
