"""
Configuration management using Pydantic models loaded from YAML.
"""

from decimal import Decimal
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .domain.exceptions import ConfigurationError
from .domain.models import DiscountType, PricingTier, SpaceConstraints
from .domain.pricing import validate_tiers
from .domain.quotation import ServiceOffer


class DefaultsConfig(BaseModel):
    """Default settings for previews."""
    max_preview: int = 10
    currency: str = "MXN"

    @field_validator("max_preview")
    @classmethod
    def validate_max_preview(cls, value: int) -> int:
        """Keep the recurrence preview within a displayable size."""
        if not 1 <= value <= 50:
            raise ValueError(f"max_preview must be between 1 and 50, got {value}")
        return value


class PricingTierConfig(BaseModel):
    """Quantity tier of a service."""
    min_quantity: int
    discount_type: DiscountType = DiscountType.NONE
    price: Optional[Decimal] = None
    discount: Optional[Decimal] = None

    def to_domain(self) -> PricingTier:
        return PricingTier(
            min_quantity=self.min_quantity,
            discount_type=self.discount_type,
            price=self.price,
            discount=self.discount,
        )


class ServiceConfig(BaseModel):
    """Ancillary service (printing, coffee, parking...) offered with a booking."""
    id: str
    name: str
    price: Decimal
    unit: str = "unit"
    pricing_tiers: List[PricingTierConfig] = Field(default_factory=list)

    @field_validator("price")
    @classmethod
    def validate_price(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValueError(f"price must not be negative, got {value}")
        return value

    @model_validator(mode="after")
    def validate_pricing_tiers(self) -> "ServiceConfig":
        """Build the domain tiers once so invalid combinations fail at load time."""
        validate_tiers([tier.to_domain() for tier in self.pricing_tiers])
        return self

    def to_offer(self) -> ServiceOffer:
        return ServiceOffer(
            service_id=self.id,
            name=self.name,
            price=self.price,
            unit=self.unit,
            pricing_tiers=[tier.to_domain() for tier in self.pricing_tiers],
        )


class SpaceConfig(BaseModel):
    """Bookable space and its booking rules."""
    id: str
    name: str
    capacity: int
    hourly_rate: Optional[Decimal] = None
    min_booking_minutes: int = 0
    max_booking_minutes: Optional[int] = None

    @model_validator(mode="after")
    def validate_constraints(self) -> "SpaceConfig":
        self.to_constraints()
        return self

    def to_constraints(self) -> SpaceConstraints:
        return SpaceConstraints(
            capacity=self.capacity,
            min_booking_minutes=self.min_booking_minutes,
            max_booking_minutes=self.max_booking_minutes,
            hourly_rate=self.hourly_rate,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "America/Mexico_City"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    spaces: List[SpaceConfig] = Field(default_factory=list)
    services: List[ServiceConfig] = Field(default_factory=list)

    @field_validator("spaces", "services")
    @classmethod
    def validate_unique_ids(cls, value: list) -> list:
        """Ensure catalog ids are unique (case-insensitive)."""
        seen: set[str] = set()
        for entry in value:
            key = entry.id.lower()
            if key in seen:
                raise ValueError(f"Duplicate id detected: {entry.id}")
            seen.add(key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the file is not valid YAML or fails validation
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}:\n{e}") from e

    def find_space(self, space_id: str) -> SpaceConfig | None:
        """Find a space by id."""
        for space in self.spaces:
            if space.id.lower() == space_id.lower():
                return space
        return None

    def find_service(self, service_id: str) -> ServiceConfig | None:
        """Find a service by id."""
        for service in self.services:
            if service.id.lower() == service_id.lower():
                return service
        return None


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
