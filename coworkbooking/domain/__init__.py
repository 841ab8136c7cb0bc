"""
Domain layer - Pure business logic without external dependencies.
"""

from .booking_evaluator import calculate_cost, evaluate, format_duration
from .exceptions import BookingError, CatalogLookupError, ConfigurationError, InvalidInputError
from .models import (
    BookingEvaluation,
    BookingWindow,
    DiscountType,
    EndCondition,
    Frequency,
    PricingTier,
    RecurrencePreview,
    RecurrenceRule,
    SpaceConstraints,
    Violation,
    ViolationKind,
)
from .pricing import resolve_price, select_tier, validate_tiers
from .quotation import LineItem, QuoteTotals, ServiceOffer, build_line_item, quote_totals
from .recurrence import RecurrenceExpander, default_days_of_week, expand

__all__ = [
    "BookingError",
    "BookingEvaluation",
    "BookingWindow",
    "CatalogLookupError",
    "ConfigurationError",
    "DiscountType",
    "EndCondition",
    "Frequency",
    "InvalidInputError",
    "LineItem",
    "PricingTier",
    "QuoteTotals",
    "RecurrenceExpander",
    "RecurrencePreview",
    "RecurrenceRule",
    "ServiceOffer",
    "SpaceConstraints",
    "Violation",
    "ViolationKind",
    "build_line_item",
    "calculate_cost",
    "default_days_of_week",
    "evaluate",
    "expand",
    "format_duration",
    "quote_totals",
    "resolve_price",
    "select_tier",
    "validate_tiers",
]
