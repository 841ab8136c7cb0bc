"""
Cost and constraint evaluation for a requested booking window.

Every rule is checked so callers can surface all problems at once; duration
and cost are returned even when the request is invalid, mirroring the live
preview of the booking form. No rounding is applied here.
"""

from decimal import Decimal
from typing import List

from .models import (
    BookingEvaluation,
    BookingWindow,
    SpaceConstraints,
    Violation,
    ViolationKind,
)

MINUTES_PER_HOUR = 60


def evaluate(window: BookingWindow, constraints: SpaceConstraints, attendee_count: int) -> BookingEvaluation:
    """
    Evaluate a booking window against the rules of a space.

    Args:
        window: Requested start/end plus setup and cleanup buffers
        constraints: Duration, capacity and rate rules of the space
        attendee_count: Number of people attending

    Returns:
        BookingEvaluation with duration, total cost and all violations found
    """
    duration = window.duration_minutes()
    violations: List[Violation] = []

    if duration <= 0:
        violations.append(Violation(
            kind=ViolationKind.INVALID_WINDOW,
            message="End time must be after start time",
        ))

    if duration < constraints.min_booking_minutes:
        violations.append(Violation(
            kind=ViolationKind.BELOW_MINIMUM_DURATION,
            limit=constraints.min_booking_minutes,
            message=f"Minimum booking duration is {constraints.min_booking_minutes} minutes",
        ))

    if constraints.max_booking_minutes is not None and duration > constraints.max_booking_minutes:
        violations.append(Violation(
            kind=ViolationKind.ABOVE_MAXIMUM_DURATION,
            limit=constraints.max_booking_minutes,
            message=f"Maximum booking duration is {constraints.max_booking_minutes} minutes",
        ))

    if attendee_count > constraints.capacity:
        violations.append(Violation(
            kind=ViolationKind.OVER_CAPACITY,
            limit=constraints.capacity,
            message=f"Space capacity is {constraints.capacity} people",
        ))

    return BookingEvaluation(
        duration_minutes=duration,
        total_cost=calculate_cost(window, constraints),
        violations=violations,
    )


def calculate_cost(window: BookingWindow, constraints: SpaceConstraints) -> Decimal:
    """Hourly rate times booked minutes, setup and cleanup included."""
    if constraints.hourly_rate is None:
        return Decimal(0)

    billable_minutes = window.duration_minutes() + window.setup_minutes + window.cleanup_minutes
    return constraints.hourly_rate * billable_minutes / MINUTES_PER_HOUR


def format_duration(minutes: int) -> str:
    """Format minutes for display, e.g. 150 -> '2h 30m', 45 -> '45m'."""
    if minutes < 0:
        return f"-{format_duration(-minutes)}"
    hours, mins = divmod(minutes, MINUTES_PER_HOUR)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"
