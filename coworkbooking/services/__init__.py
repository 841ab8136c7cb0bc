"""
Service layer helpers that orchestrate catalogs and domain logic.
"""

from .booking_preview import (
    BookingPreview,
    BookingPreviewService,
    ServiceCatalogProtocol,
    SpaceCatalogProtocol,
)

__all__ = [
    "BookingPreview",
    "BookingPreviewService",
    "ServiceCatalogProtocol",
    "SpaceCatalogProtocol",
]
