"""Value objects embedded in Subscription and Order documents

Stored as JSON columns and always rewritten whole; an address or item
list is a snapshot taken when the owning document was written, never a
live reference to the catalog or the user's address book.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class DeliveryAddress(BaseModel):
    """Snapshot of a user address at subscription/order creation time"""

    label: str = Field(..., description="Address label (e.g., 'Home', 'Office')")
    street: str = Field(..., min_length=1)
    apartment: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    pincode: str = Field(..., min_length=1)
    landmark: Optional[str] = None


class SubscriptionItem(BaseModel):
    """Product and per-delivery quantity on a subscription"""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1, description="Units delivered on every due date")


class OrderItem(BaseModel):
    """Order line with prices frozen at order creation"""

    product_id: str
    product_name: str
    quantity: int = Field(..., ge=1)
    price_excluding_tax: Decimal = Field(..., ge=0)
    cgst_percent: Decimal = Field(..., ge=0)
    sgst_percent: Decimal = Field(..., ge=0)
    unit_price: Decimal = Field(..., ge=0, description="Display price including tax")
