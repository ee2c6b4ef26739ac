"""
Identity endpoints — email verification lookups.
"""
import logging

from fastapi import APIRouter, Depends

from deps import get_identity_service
from domain.responses import status_body
from models import EmailVerificationResponse, ErrorResponse
from services.identity_service import IdentityService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["identity"])


@router.get(
    "/status/{uid}",
    response_model=EmailVerificationResponse,
    responses={404: {"model": ErrorResponse}},
)
@router.get(
    "/verification/{uid}",
    response_model=EmailVerificationResponse,
    responses={404: {"model": ErrorResponse}},
    deprecated=True,
)
async def get_email_verified(
    uid: str,
    identity: IdentityService = Depends(get_identity_service),
):
    """Whether the user's email address has been verified."""
    verified = await identity.get_email_verified(uid)
    return status_body(200, emailVerified=verified)
