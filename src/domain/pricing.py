"""Tax and pricing calculator

Turns order lines into a CGST/SGST breakdown. Everything is computed in
Decimal without intermediate rounding; round_money() is applied only when
amounts are presented.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union
from src.domain.errors import PricingError

Number = Union[Decimal, int, float, str]

HUNDRED = Decimal("100")
MONEY_PLACES = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(amount: Number) -> Decimal:
    """Round half-up to paise for display"""
    return to_decimal(amount).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricingLine:
    """One product line: taxable unit price, tax rates (percent) and quantity"""

    price_excluding_tax: Decimal
    cgst_percent: Decimal
    sgst_percent: Decimal
    quantity: int

    @classmethod
    def of(
        cls,
        price_excluding_tax: Number,
        cgst_percent: Number,
        sgst_percent: Number,
        quantity: int,
    ) -> "PricingLine":
        return cls(
            price_excluding_tax=to_decimal(price_excluding_tax),
            cgst_percent=to_decimal(cgst_percent),
            sgst_percent=to_decimal(sgst_percent),
            quantity=quantity,
        )


@dataclass(frozen=True)
class TaxBreakdown:
    subtotal: Decimal
    cgst: Decimal
    sgst: Decimal
    total_tax: Decimal
    total_before_fees: Decimal

    def rounded(self) -> "TaxBreakdown":
        return TaxBreakdown(
            subtotal=round_money(self.subtotal),
            cgst=round_money(self.cgst),
            sgst=round_money(self.sgst),
            total_tax=round_money(self.total_tax),
            total_before_fees=round_money(self.total_before_fees),
        )


def _validate(line: PricingLine) -> None:
    if line.quantity < 0:
        raise PricingError(f"Quantity must not be negative, got {line.quantity}")
    if line.price_excluding_tax < 0:
        raise PricingError(f"Price must not be negative, got {line.price_excluding_tax}")
    if line.cgst_percent < 0 or line.sgst_percent < 0:
        raise PricingError(
            f"Tax rates must not be negative, got CGST={line.cgst_percent} SGST={line.sgst_percent}"
        )


def calculate_tax(lines: Iterable[PricingLine]) -> TaxBreakdown:
    """
    Compute the tax breakdown for a list of lines

    subtotal = sum(price * qty); cgst/sgst = sum(line_subtotal * rate / 100)

    Raises:
        PricingError: any line has a negative price, rate or quantity
    """
    subtotal = Decimal("0")
    cgst = Decimal("0")
    sgst = Decimal("0")

    for line in lines:
        _validate(line)
        line_subtotal = line.price_excluding_tax * line.quantity
        subtotal += line_subtotal
        cgst += line_subtotal * line.cgst_percent / HUNDRED
        sgst += line_subtotal * line.sgst_percent / HUNDRED

    total_tax = cgst + sgst
    return TaxBreakdown(
        subtotal=subtotal,
        cgst=cgst,
        sgst=sgst,
        total_tax=total_tax,
        total_before_fees=subtotal + total_tax,
    )


def calculate_order_total(
    breakdown: TaxBreakdown, platform_fee: Number, delivery_fee: Number
) -> Decimal:
    """Checkout payable: taxed total plus platform and delivery fees"""
    platform_fee = to_decimal(platform_fee)
    delivery_fee = to_decimal(delivery_fee)
    if platform_fee < 0 or delivery_fee < 0:
        raise PricingError("Fees must not be negative")
    return breakdown.total_before_fees + platform_fee + delivery_fee
