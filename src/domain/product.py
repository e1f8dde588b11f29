"""Product Domain Entity

Catalog entry. Read-only to the order engine: prices and availability
are snapshotted onto orders, products are never mutated by generation.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column
from sqlalchemy import DateTime, Numeric, String
from src.domain.base import BaseModel, generate_uuid, utc_now


class Product(BaseModel, table=True):
    """
    Product - Dairy catalog item

    Domain Rules:
    - price_excluding_tax is the taxable base
    - tax_cgst / tax_sgst are percentages (e.g., 2.5 for 2.5%)
    - price is the display price including tax
    - Only products with allow_subscription=True may be subscribed
    """

    __tablename__ = "products"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique product identifier"
    )

    name: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Product display name"
    )

    price: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Final price including tax (display only)"
    )

    price_excluding_tax: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Base price without tax"
    )

    tax_cgst: Decimal = Field(
        sa_column=Column(Numeric(6, 3), nullable=False, default=0),
        description="CGST percentage"
    )

    tax_sgst: Decimal = Field(
        sa_column=Column(Numeric(6, 3), nullable=False, default=0),
        description="SGST percentage"
    )

    in_stock: bool = Field(default=True)

    allow_subscription: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def is_subscribable(self) -> bool:
        return self.in_stock and self.allow_subscription
