"""
Midtrans Snap client factory.
"""
import logging

import midtransclient

from config import Settings

logger = logging.getLogger(__name__)


def create_snap(settings: Settings) -> midtransclient.Snap:
    """Build a Snap client from the configured key pair."""
    snap = midtransclient.Snap(
        is_production=settings.midtrans_is_production,
        server_key=settings.midtrans_server_key,
        client_key=settings.midtrans_client_key,
    )
    logger.info(
        f"Midtrans Snap client ready ({'production' if settings.midtrans_is_production else 'sandbox'})"
    )
    return snap
