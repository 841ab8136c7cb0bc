"""
Application service backing the booking and quotation forms.

The service is the view-model layer: every field change on a form results in
one call here, which looks up the space or service in a catalog and runs the
pure domain functions. It holds no state between calls, so the latest call
always reflects the latest input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Protocol

from ..domain.booking_evaluator import evaluate
from ..domain.models import (
    BookingEvaluation,
    BookingWindow,
    RecurrencePreview,
    RecurrenceRule,
    SpaceConstraints,
)
from ..domain.quotation import LineItem, ServiceOffer, build_line_item
from ..domain.recurrence import RecurrenceExpander

logger = logging.getLogger(__name__)


class SpaceCatalogProtocol(Protocol):
    """Protocol describing the space lookup needed by the service."""

    def get_space(self, space_id: str) -> SpaceConstraints:
        """Return the booking rules of a space or raise CatalogLookupError."""


class ServiceCatalogProtocol(Protocol):
    """Protocol describing the service lookup needed for quotations."""

    def get_service(self, service_id: str) -> ServiceOffer:
        """Return the priced service offer or raise CatalogLookupError."""


@dataclass
class BookingPreview:
    """Everything the booking form shows for the current input."""
    space_id: str
    evaluation: BookingEvaluation
    recurrence: RecurrencePreview
    occurrence_windows: List[BookingWindow]
    projected_cost: Decimal

    @property
    def is_valid(self) -> bool:
        return self.evaluation.is_valid


class BookingPreviewService:
    """
    Recomputes booking previews and service prices from catalog data.

    Catalog access goes through protocols so the config-backed catalog can be
    swapped for any other source (or a stub in tests).
    """

    def __init__(
        self,
        space_catalog: SpaceCatalogProtocol,
        service_catalog: Optional[ServiceCatalogProtocol] = None,
        expander: Optional[RecurrenceExpander] = None,
    ) -> None:
        self._space_catalog = space_catalog
        self._service_catalog = service_catalog
        self._expander = expander or RecurrenceExpander()

    def preview_booking(
        self,
        *,
        space_id: str,
        window: BookingWindow,
        attendee_count: int,
        rule: Optional[RecurrenceRule] = None,
    ) -> BookingPreview:
        """
        Evaluate the anchor booking and expand its recurrence rule.

        The projected cost covers the anchor plus every previewed occurrence;
        when the preview is truncated the full series costs more.
        """
        constraints = self._space_catalog.get_space(space_id)
        evaluation = evaluate(window, constraints, attendee_count)

        if rule is None:
            recurrence = RecurrencePreview(occurrences=[])
        else:
            recurrence = self._expander.preview(rule, window)

        occurrence_windows = [window.shifted_to(start) for start in recurrence.occurrences]
        projected_cost = evaluation.total_cost + sum(
            (evaluate(w, constraints, attendee_count).total_cost for w in occurrence_windows),
            Decimal(0),
        )

        logger.debug(
            "Preview for space %s: %d min, %d violation(s), %d occurrence(s)",
            space_id,
            evaluation.duration_minutes,
            len(evaluation.violations),
            len(recurrence),
        )

        return BookingPreview(
            space_id=space_id,
            evaluation=evaluation,
            recurrence=recurrence,
            occurrence_windows=occurrence_windows,
            projected_cost=projected_cost,
        )

    def price_service(self, service_id: str, quantity: int) -> Decimal:
        """Resolve the unit price of a service for the given quantity."""
        return self._require_service_catalog().get_service(service_id).unit_price_for(quantity)

    def add_line_item(self, service_id: str, quantity: int, custom_price=None) -> LineItem:
        """Build a quotation line item for a catalog service."""
        offer = self._require_service_catalog().get_service(service_id)
        return build_line_item(offer, quantity, custom_price=custom_price)

    def _require_service_catalog(self) -> ServiceCatalogProtocol:
        if self._service_catalog is None:
            raise RuntimeError("BookingPreviewService was created without a service catalog")
        return self._service_catalog
