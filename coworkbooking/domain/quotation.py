"""
Quotation line items and totals.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List

from .exceptions import InvalidInputError
from .models import PricingTier, to_decimal
from .pricing import resolve_price


@dataclass(frozen=True)
class ServiceOffer:
    """A priced service as listed in the service catalog."""
    service_id: str
    name: str
    price: Decimal
    unit: str = "unit"
    pricing_tiers: List[PricingTier] = field(default_factory=list)

    def unit_price_for(self, quantity: int) -> Decimal:
        return resolve_price(self.price, self.pricing_tiers, quantity)


@dataclass(frozen=True)
class LineItem:
    """A service added to a quotation."""
    service_id: str
    service_name: str
    quantity: int
    unit_price: Decimal
    custom_price_applied: bool = False

    @property
    def total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class QuoteTotals:
    subtotal: Decimal
    discounts: Decimal
    taxes: Decimal
    total: Decimal


def build_line_item(offer: ServiceOffer, quantity: int, custom_price=None) -> LineItem:
    """
    Create a line item, resolving the unit price from the offer's tiers.

    A custom price replaces the tier-resolved price entirely.
    """
    if quantity < 1:
        raise InvalidInputError(f"quantity must be at least 1, got {quantity}")

    if custom_price is not None:
        unit_price = to_decimal(custom_price, "custom_price")
        if unit_price < 0:
            raise InvalidInputError(f"custom_price must not be negative, got {unit_price}")
    else:
        unit_price = offer.unit_price_for(quantity)

    return LineItem(
        service_id=offer.service_id,
        service_name=offer.name,
        quantity=quantity,
        unit_price=unit_price,
        custom_price_applied=custom_price is not None,
    )


def quote_totals(items: Iterable[LineItem], discounts=0, taxes=0) -> QuoteTotals:
    """Subtotal of all line items, minus discounts, plus taxes."""
    subtotal = sum((item.total for item in items), Decimal(0))
    discount_amount: Decimal = to_decimal(discounts, "discounts")
    tax_amount: Decimal = to_decimal(taxes, "taxes")
    return QuoteTotals(
        subtotal=subtotal,
        discounts=discount_amount,
        taxes=tax_amount,
        total=subtotal - discount_amount + tax_amount,
    )

