"""
Adapters layer - Catalog sources for spaces and services.
"""

from .config_catalog import ConfigCatalog

__all__ = ["ConfigCatalog"]
