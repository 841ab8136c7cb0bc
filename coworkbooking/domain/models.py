"""
Domain models for recurring bookings, booking windows and service pricing.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import FrozenSet, Iterator, List, Optional

import pendulum
from pendulum import DateTime

from .exceptions import InvalidInputError

MAX_INTERVAL = 52
MAX_OCCURRENCES = 365
MAX_BUFFER_MINUTES = 120

# 0=Sunday, 6=Saturday
WEEKDAY_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}


class Frequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class EndCondition(str, Enum):
    NEVER = "NEVER"
    BY_DATE = "BY_DATE"
    BY_COUNT = "BY_COUNT"


class DiscountType(str, Enum):
    NONE = "NONE"
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"
    TIER_PRICE = "TIER_PRICE"


class ViolationKind(str, Enum):
    INVALID_WINDOW = "INVALID_WINDOW"
    BELOW_MINIMUM_DURATION = "BELOW_MINIMUM_DURATION"
    ABOVE_MAXIMUM_DURATION = "ABOVE_MAXIMUM_DURATION"
    OVER_CAPACITY = "OVER_CAPACITY"


def to_decimal(value, field_name: str = "value") -> Decimal:
    """Coerce an int, float, str or Decimal to Decimal."""
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise InvalidInputError(f"{field_name} is not a valid number: {value!r}") from e
    if not result.is_finite():
        raise InvalidInputError(f"{field_name} must be a finite number, got {value!r}")
    return result


def to_enum(enum_cls, value, field_name: str):
    """Coerce a member or its string value to ``enum_cls``."""
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidInputError(f"{field_name} must be one of {allowed}, got {value!r}") from e


def weekday_index(dt: date) -> int:
    """Return the weekday with 0=Sunday ... 6=Saturday."""
    return dt.isoweekday() % 7


def _set(obj, name: str, value) -> None:
    object.__setattr__(obj, name, value)


@dataclass(frozen=True)
class RecurrenceRule:
    """
    Repeat rule projecting further dates from an anchor booking.

    Invariants:
    - interval is within 1..52
    - end_date is set iff end_condition is BY_DATE
    - occurrence_count (1..365, anchor included) is set iff end_condition is BY_COUNT
    """
    enabled: bool = False
    frequency: Frequency = Frequency.WEEKLY
    interval: int = 1
    days_of_week: FrozenSet[int] = field(default_factory=frozenset)
    end_condition: EndCondition = EndCondition.NEVER
    end_date: Optional[date] = None
    occurrence_count: Optional[int] = None

    def __post_init__(self):
        _set(self, "frequency", to_enum(Frequency, self.frequency, "frequency"))
        _set(self, "end_condition", to_enum(EndCondition, self.end_condition, "end_condition"))
        _set(self, "days_of_week", frozenset(self.days_of_week))

        if not 1 <= self.interval <= MAX_INTERVAL:
            raise InvalidInputError(
                f"interval must be between 1 and {MAX_INTERVAL}, got {self.interval}"
            )

        invalid_days = sorted(d for d in self.days_of_week if d not in range(7))
        if invalid_days:
            raise InvalidInputError(f"days_of_week must be between 0 and 6, got {invalid_days}")

        if self.end_condition is EndCondition.BY_DATE:
            if self.end_date is None:
                raise InvalidInputError("end_date is required when end_condition is BY_DATE")
            if isinstance(self.end_date, datetime):
                _set(self, "end_date", self.end_date.date())
        elif self.end_date is not None:
            raise InvalidInputError("end_date is only allowed when end_condition is BY_DATE")

        if self.end_condition is EndCondition.BY_COUNT:
            if self.occurrence_count is None:
                raise InvalidInputError("occurrence_count is required when end_condition is BY_COUNT")
            if not 1 <= self.occurrence_count <= MAX_OCCURRENCES:
                raise InvalidInputError(
                    f"occurrence_count must be between 1 and {MAX_OCCURRENCES}, "
                    f"got {self.occurrence_count}"
                )
        elif self.occurrence_count is not None:
            raise InvalidInputError("occurrence_count is only allowed when end_condition is BY_COUNT")

    def describe(self) -> str:
        """Short human-readable summary, e.g. 'every 2 weeks on Monday, Wednesday'."""
        if not self.enabled:
            return "does not repeat"

        unit = {
            Frequency.DAILY: "day",
            Frequency.WEEKLY: "week",
            Frequency.MONTHLY: "month",
        }[self.frequency]
        text = f"every {unit}" if self.interval == 1 else f"every {self.interval} {unit}s"

        if self.frequency is Frequency.WEEKLY and self.days_of_week:
            days = ", ".join(WEEKDAY_NAMES[d] for d in sorted(self.days_of_week))
            text += f" on {days}"

        if self.end_condition is EndCondition.BY_DATE:
            text += f" until {self.end_date.isoformat()}"
        elif self.end_condition is EndCondition.BY_COUNT:
            text += f", {self.occurrence_count} times"
        return text


@dataclass(frozen=True)
class BookingWindow:
    """
    Requested time window of a booking plus setup and cleanup buffers.

    Ordering of start and end is not enforced here; the evaluator reports a
    non-positive window as a violation so previews stay live while editing.
    """
    anchor_start: DateTime
    anchor_end: DateTime
    setup_minutes: int = 0
    cleanup_minutes: int = 0

    def __post_init__(self):
        for name in ("anchor_start", "anchor_end"):
            value = getattr(self, name)
            if not isinstance(value, DateTime):
                _set(self, name, pendulum.instance(value))

        for name in ("setup_minutes", "cleanup_minutes"):
            value = getattr(self, name)
            if not 0 <= value <= MAX_BUFFER_MINUTES:
                raise InvalidInputError(
                    f"{name} must be between 0 and {MAX_BUFFER_MINUTES}, got {value}"
                )

    def duration_minutes(self) -> int:
        """Return the duration in whole minutes (negative if end precedes start)."""
        return int((self.anchor_end - self.anchor_start).total_seconds() / 60)

    def shifted_to(self, start: DateTime) -> "BookingWindow":
        """Return a window of the same length and buffers starting at ``start``."""
        return BookingWindow(
            anchor_start=start,
            anchor_end=start.add(seconds=int((self.anchor_end - self.anchor_start).total_seconds())),
            setup_minutes=self.setup_minutes,
            cleanup_minutes=self.cleanup_minutes,
        )

    def __str__(self) -> str:
        return f"{self.anchor_start.format('DD.MM.YYYY HH:mm')} - {self.anchor_end.format('HH:mm')}"


@dataclass(frozen=True)
class SpaceConstraints:
    """Booking rules of a bookable space."""
    capacity: int
    min_booking_minutes: int = 0
    max_booking_minutes: Optional[int] = None
    hourly_rate: Optional[Decimal] = None

    def __post_init__(self):
        if self.capacity <= 0:
            raise InvalidInputError(f"capacity must be greater than zero, got {self.capacity}")
        if self.min_booking_minutes < 0:
            raise InvalidInputError(
                f"min_booking_minutes must not be negative, got {self.min_booking_minutes}"
            )
        if self.max_booking_minutes is not None and self.max_booking_minutes < self.min_booking_minutes:
            raise InvalidInputError(
                f"max_booking_minutes ({self.max_booking_minutes}) must not be lower than "
                f"min_booking_minutes ({self.min_booking_minutes})"
            )
        if self.hourly_rate is not None:
            rate = to_decimal(self.hourly_rate, "hourly_rate")
            if rate < 0:
                raise InvalidInputError(f"hourly_rate must not be negative, got {rate}")
            _set(self, "hourly_rate", rate)


@dataclass(frozen=True)
class PricingTier:
    """
    Quantity threshold at which a different price or discount applies.

    ``price`` is present iff the discount type is TIER_PRICE, ``discount`` iff
    it is PERCENTAGE or FIXED.
    """
    min_quantity: int
    discount_type: DiscountType = DiscountType.NONE
    price: Optional[Decimal] = None
    discount: Optional[Decimal] = None

    def __post_init__(self):
        _set(self, "discount_type", to_enum(DiscountType, self.discount_type, "discount_type"))

        if self.min_quantity < 1:
            raise InvalidInputError(f"min_quantity must be at least 1, got {self.min_quantity}")

        if self.discount_type is DiscountType.TIER_PRICE:
            if self.price is None:
                raise InvalidInputError("price is required for TIER_PRICE tiers")
            price = to_decimal(self.price, "price")
            if price < 0:
                raise InvalidInputError(f"price must not be negative, got {price}")
            _set(self, "price", price)
        elif self.price is not None:
            raise InvalidInputError(f"price is not allowed for {self.discount_type.value} tiers")

        if self.discount_type in (DiscountType.PERCENTAGE, DiscountType.FIXED):
            if self.discount is None:
                raise InvalidInputError(f"discount is required for {self.discount_type.value} tiers")
            discount = to_decimal(self.discount, "discount")
            if discount < 0:
                raise InvalidInputError(f"discount must not be negative, got {discount}")
            if self.discount_type is DiscountType.PERCENTAGE and discount > 100:
                raise InvalidInputError(f"percentage discount must not exceed 100, got {discount}")
            _set(self, "discount", discount)
        elif self.discount is not None:
            raise InvalidInputError(f"discount is not allowed for {self.discount_type.value} tiers")


@dataclass(frozen=True)
class Violation:
    """A business rule the requested booking failed to satisfy."""
    kind: ViolationKind
    message: str
    limit: Optional[int] = None


@dataclass
class BookingEvaluation:
    """Result of evaluating a booking window against a space's rules."""
    duration_minutes: int
    total_cost: Decimal
    violations: List[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def has(self, kind: ViolationKind) -> bool:
        return any(v.kind is kind for v in self.violations)


@dataclass
class RecurrencePreview:
    """
    Occurrences shown to the user for a recurrence rule.

    ``truncated`` is set when the full series holds more occurrences than the
    preview lists.
    """
    occurrences: List[DateTime]
    truncated: bool = False

    def __len__(self) -> int:
        return len(self.occurrences)

    def __iter__(self) -> Iterator[DateTime]:
        return iter(self.occurrences)
