"""
Domain-specific exception hierarchy for the coworking booking core.
"""


class BookingError(Exception):
    """Base class for all application-level errors."""


class InvalidInputError(BookingError, ValueError):
    """Raised when a domain object is constructed from structurally invalid input."""


class CatalogLookupError(BookingError, LookupError):
    """Raised when a space or service id is not present in the catalog."""


class ConfigurationError(BookingError):
    """Raised when the configuration file cannot be loaded or validated."""
