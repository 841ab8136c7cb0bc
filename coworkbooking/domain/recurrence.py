"""
Expansion of recurrence rules into concrete occurrence dates.

Pure domain logic: no I/O, no shared state. Month arithmetic is delegated to
pendulum, which clamps to the last valid day of the target month
(2024-01-31 + 1 month = 2024-02-29); the cursor then continues from the
clamped date.
"""

import logging
from typing import FrozenSet, List

from pendulum import DateTime

from .models import (
    BookingWindow,
    EndCondition,
    Frequency,
    RecurrencePreview,
    RecurrenceRule,
    weekday_index,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_PREVIEW = 10


class RecurrenceExpander:
    """
    Projects an anchor booking forward according to a recurrence rule.

    Algorithm:
    1. Advance the cursor from the anchor by ``interval`` days, weeks or months
    2. Stop when the candidate passes the end date, when the occurrence count
       (anchor included) is reached, or when the preview cap is hit
    3. For weekly rules with a day filter, drop candidates whose weekday is
       not selected; the cursor still moves on from the dropped candidate
    4. Return accepted candidates in order, without the anchor
    """

    def __init__(self, max_preview: int = DEFAULT_MAX_PREVIEW):
        self.max_preview = max_preview

    def expand(self, rule: RecurrenceRule, window: BookingWindow) -> List[DateTime]:
        """Return up to ``max_preview`` occurrence start times after the anchor."""
        return self._generate(rule, window.anchor_start, self.max_preview)

    def preview(self, rule: RecurrenceRule, window: BookingWindow) -> RecurrencePreview:
        """
        Expand the rule and flag whether the series continues past the preview.

        One extra occurrence is generated to tell a series that ends exactly at
        the cap apart from one that keeps going.
        """
        if self.max_preview <= 0:
            return RecurrencePreview(occurrences=[], truncated=False)

        dates = self._generate(rule, window.anchor_start, self.max_preview + 1)
        truncated = len(dates) > self.max_preview
        return RecurrencePreview(occurrences=dates[:self.max_preview], truncated=truncated)

    def _generate(self, rule: RecurrenceRule, anchor: DateTime, limit: int) -> List[DateTime]:
        if not rule.enabled or limit <= 0:
            return []

        day_filter = self._day_filter(rule)
        if day_filter and weekday_index(anchor) not in day_filter:
            # Weekly steps keep the anchor's weekday, so nothing could ever match.
            logger.debug(
                "Weekday filter %s excludes anchor weekday %s; no occurrences",
                sorted(day_filter),
                weekday_index(anchor),
            )
            return []

        accepted: List[DateTime] = []
        current = anchor

        while len(accepted) < limit:
            candidate = self._advance(current, rule)

            if rule.end_condition is EndCondition.BY_DATE and candidate.date() > rule.end_date:
                break

            # The anchor counts toward the occurrence total
            if rule.end_condition is EndCondition.BY_COUNT and len(accepted) + 1 >= rule.occurrence_count:
                break

            if not day_filter or weekday_index(candidate) in day_filter:
                accepted.append(candidate)

            current = candidate

        logger.debug("Expanded %s from %s into %d occurrence(s)", rule.describe(), anchor, len(accepted))
        return accepted

    @staticmethod
    def _advance(current: DateTime, rule: RecurrenceRule) -> DateTime:
        if rule.frequency is Frequency.DAILY:
            return current.add(days=rule.interval)
        if rule.frequency is Frequency.WEEKLY:
            return current.add(weeks=rule.interval)
        return current.add(months=rule.interval)

    @staticmethod
    def _day_filter(rule: RecurrenceRule) -> FrozenSet[int]:
        if rule.frequency is not Frequency.WEEKLY:
            return frozenset()
        return rule.days_of_week


def expand(rule: RecurrenceRule, window: BookingWindow, max_preview: int = DEFAULT_MAX_PREVIEW) -> List[DateTime]:
    """Occurrence start times following the anchor, capped at ``max_preview``."""
    return RecurrenceExpander(max_preview=max_preview).expand(rule, window)


def default_days_of_week(anchor: DateTime) -> FrozenSet[int]:
    """Initial weekday selection for a new weekly rule: the anchor's own weekday."""
    return frozenset({weekday_index(anchor)})
