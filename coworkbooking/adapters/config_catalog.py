"""
Catalog adapter serving spaces and services from the loaded configuration.
"""

from ..config import AppConfig
from ..domain.exceptions import CatalogLookupError
from ..domain.models import SpaceConstraints
from ..domain.quotation import ServiceOffer


class ConfigCatalog:
    """
    Resolves space and service ids against an ``AppConfig``.

    Satisfies both ``SpaceCatalogProtocol`` and ``ServiceCatalogProtocol``.
    """

    def __init__(self, config: AppConfig):
        self.config = config

    def get_space(self, space_id: str) -> SpaceConstraints:
        space = self.config.find_space(space_id)
        if space is None:
            raise CatalogLookupError(f"Unknown space: '{space_id}'")
        return space.to_constraints()

    def get_service(self, service_id: str) -> ServiceOffer:
        service = self.config.find_service(service_id)
        if service is None:
            raise CatalogLookupError(f"Unknown service: '{service_id}'")
        return service.to_offer()
