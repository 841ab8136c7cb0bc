"""
Tests for tiered price resolution.
"""

from decimal import Decimal

import pytest

from coworkbooking.domain.exceptions import InvalidInputError
from coworkbooking.domain.models import DiscountType, PricingTier
from coworkbooking.domain.pricing import resolve_price, select_tier, validate_tiers


class TestResolvePrice:
    """Tests for resolve_price()."""

    def test_percentage_tier_boundary(self):
        """The percentage tier applies from its threshold on, not before."""
        tiers = [
            PricingTier(min_quantity=1, discount_type=DiscountType.NONE),
            PricingTier(min_quantity=10, discount_type=DiscountType.PERCENTAGE, discount=20),
        ]

        assert resolve_price(100, tiers, 10) == Decimal(80)
        assert resolve_price(100, tiers, 9) == Decimal(100)

    def test_fixed_discount_floors_at_zero(self):
        """A fixed discount larger than the price yields zero, never a negative price."""
        tiers = [PricingTier(min_quantity=1, discount_type=DiscountType.FIXED, discount=50)]

        assert resolve_price(10, tiers, 1) == Decimal(0)

    def test_fixed_discount(self):
        """A fixed discount is subtracted from the base price."""
        tiers = [PricingTier(min_quantity=10, discount_type=DiscountType.FIXED, discount=5)]

        assert resolve_price(45, tiers, 12) == Decimal(40)

    def test_tier_price_replaces_base(self):
        """TIER_PRICE tiers replace the base price outright."""
        tiers = [
            PricingTier(min_quantity=1),
            PricingTier(min_quantity=5, discount_type=DiscountType.TIER_PRICE, price="7.5"),
        ]

        assert resolve_price(10, tiers, 6) == Decimal("7.5")

    def test_no_qualifying_tier(self):
        """Below the lowest threshold the base price applies."""
        tiers = [PricingTier(min_quantity=5, discount_type=DiscountType.PERCENTAGE, discount=10)]

        assert resolve_price("19.99", tiers, 2) == Decimal("19.99")

    def test_empty_tiers_is_flat_pricing(self):
        """No tiers means flat pricing."""
        assert resolve_price(19.99, [], 100) == Decimal("19.99")

    def test_highest_threshold_wins_regardless_of_order(self):
        """The tier with the largest qualifying threshold is selected."""
        tiers = [
            PricingTier(min_quantity=10, discount_type=DiscountType.PERCENTAGE, discount=50),
            PricingTier(min_quantity=1),
        ]

        assert resolve_price(100, tiers, 20) == Decimal(50)

    def test_equal_thresholds_use_last_tier(self):
        """On equal thresholds the last tier in input order wins."""
        tiers = [
            PricingTier(min_quantity=5, discount_type=DiscountType.FIXED, discount=1),
            PricingTier(min_quantity=5, discount_type=DiscountType.FIXED, discount=2),
        ]

        assert resolve_price(10, tiers, 5) == Decimal(8)
        assert select_tier(tiers, 5) is tiers[1]

    def test_idempotent_and_tiers_untouched(self):
        """Repeated calls give identical results and leave the tiers unchanged."""
        tiers = [
            PricingTier(min_quantity=1),
            PricingTier(min_quantity=10, discount_type=DiscountType.PERCENTAGE, discount=20),
        ]
        snapshot = list(tiers)

        first = resolve_price(100, tiers, 15)
        second = resolve_price(100, tiers, 15)

        assert first == second == Decimal(80)
        assert tiers == snapshot


class TestValidateTiers:
    """Tests for validate_tiers()."""

    def test_sorted_unique_tiers_pass(self):
        tiers = [PricingTier(min_quantity=1), PricingTier(min_quantity=10)]

        assert validate_tiers(tiers) is tiers

    def test_duplicate_threshold_rejected(self):
        with pytest.raises(InvalidInputError, match="Duplicate pricing tier"):
            validate_tiers([PricingTier(min_quantity=5), PricingTier(min_quantity=5)])

    def test_unsorted_tiers_rejected(self):
        with pytest.raises(InvalidInputError, match="sorted"):
            validate_tiers([PricingTier(min_quantity=10), PricingTier(min_quantity=1)])
