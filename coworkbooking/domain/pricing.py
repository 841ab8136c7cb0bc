"""
Quantity-tier price resolution for ancillary services.
"""

from decimal import Decimal
from typing import Optional, Sequence

from .exceptions import InvalidInputError
from .models import DiscountType, PricingTier, to_decimal


def resolve_price(base_price, tiers: Sequence[PricingTier], quantity: int) -> Decimal:
    """
    Resolve the unit price for ``quantity`` units.

    The qualifying tier with the highest ``min_quantity`` wins; on equal
    thresholds the last one in input order is used. Tiers are never mutated.

    Args:
        base_price: Flat unit price of the service
        tiers: Pricing tiers, usually sorted by ascending ``min_quantity``
        quantity: Requested quantity

    Returns:
        Unit price after applying the selected tier
    """
    base = to_decimal(base_price, "base_price")
    tier = select_tier(tiers, quantity)

    if tier is None:
        return base

    if tier.discount_type is DiscountType.TIER_PRICE:
        return tier.price
    if tier.discount_type is DiscountType.PERCENTAGE:
        return base * (1 - tier.discount / 100)
    if tier.discount_type is DiscountType.FIXED:
        return max(Decimal(0), base - tier.discount)
    return base


def select_tier(tiers: Sequence[PricingTier], quantity: int) -> Optional[PricingTier]:
    """Return the applicable tier for ``quantity``, or None for flat pricing."""
    selected: Optional[PricingTier] = None
    for tier in tiers:
        if tier.min_quantity > quantity:
            continue
        if selected is None or tier.min_quantity >= selected.min_quantity:
            selected = tier
    return selected


def validate_tiers(tiers: Sequence[PricingTier]) -> Sequence[PricingTier]:
    """
    Ensure tier thresholds are unique and ascending.

    Raises:
        InvalidInputError: If a threshold repeats or the list is out of order
    """
    previous: Optional[int] = None
    for tier in tiers:
        if previous is not None:
            if tier.min_quantity == previous:
                raise InvalidInputError(f"Duplicate pricing tier for min_quantity {tier.min_quantity}")
            if tier.min_quantity < previous:
                raise InvalidInputError(
                    f"Pricing tiers must be sorted by min_quantity, "
                    f"got {tier.min_quantity} after {previous}"
                )
        previous = tier.min_quantity
    return tiers
