"""
Health check endpoints.
"""
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Request, status

from config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def root():
    """Liveness check kept from the first deployment."""
    return {"project_id": settings.firebase_project_id, "status": "ok"}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Report which upstream clients were initialized at startup."""
    state = request.app.state
    return {
        "status": "healthy",
        "environment": settings.environment,
        "firebase_initialized": getattr(state, "firebase", None) is not None,
        "gateway_initialized": getattr(state, "payment_gateway", None) is not None,
        "gateway_mode": "production" if settings.midtrans_is_production else "sandbox",
        "order_store": settings.order_store_backend,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
