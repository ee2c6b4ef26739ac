"""
Pydantic models for request/response validation.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union


class PassthroughBase(BaseModel):
    """Keeps unknown keys so the gateway receives everything the storefront sent."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")


# ── Charge Models ───────────────────────────────────────────────────

class LineItem(PassthroughBase):
    """One line of the order, as sent to the gateway's item_details."""
    id: Union[str, int] = Field(..., description="Item identifier")
    price: int = Field(..., ge=0, description="Unit price in the minor currency unit")
    quantity: int = Field(..., gt=0, description="Number of units")
    name: str = Field(..., description="Display name")


class CustomerDetails(PassthroughBase):
    """Customer contact details; only the email is required."""
    email: str = Field(..., min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None


class ChargeRequest(BaseModel):
    """Request body of POST /charge."""
    customers: CustomerDetails
    items: List[LineItem] = Field(..., min_length=1)
    order_id: str = Field(..., min_length=1, description="Storefront order id, unique per checkout attempt")
    url: Optional[str] = Field(None, description="Finish-callback URL")


class ChargeResponse(BaseModel):
    token: str = Field(..., description="Snap transaction token")


# ── Identity Models ─────────────────────────────────────────────────

class EmailVerificationResponse(BaseModel):
    status_code: str = "200"
    email_verified: bool = Field(..., alias="emailVerified")

    model_config = ConfigDict(populate_by_name=True)


# ── Error Models ────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Error body; carries either error_message or status_message."""
    status_code: str
    error_message: Optional[str] = None
    status_message: Optional[str] = None
