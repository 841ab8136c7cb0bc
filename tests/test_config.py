"""
Tests for YAML configuration loading.
"""

from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

from coworkbooking.config import AppConfig
from coworkbooking.domain.exceptions import ConfigurationError
from coworkbooking.domain.models import DiscountType

VALID_CONFIG = """
timezone: America/Mexico_City
defaults:
  max_preview: 5
  currency: MXN
spaces:
  - id: sala-a
    name: Sala A
    capacity: 8
    hourly_rate: 100
    min_booking_minutes: 60
    max_booking_minutes: 480
services:
  - id: printing
    name: Printing
    price: 2.50
    unit: page
    pricing_tiers:
      - min_quantity: 1
      - min_quantity: 100
        discount_type: PERCENTAGE
        discount: 20
"""


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestAppConfig:
    """Tests for AppConfig."""

    def test_load_valid_config(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, VALID_CONFIG))

        assert config.defaults.max_preview == 5
        assert config.spaces[0].hourly_rate == Decimal(100)
        assert config.services[0].pricing_tiers[1].discount_type is DiscountType.PERCENTAGE

    def test_space_converts_to_constraints(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, VALID_CONFIG))

        constraints = config.find_space("SALA-A").to_constraints()

        assert constraints.capacity == 8
        assert constraints.min_booking_minutes == 60
        assert constraints.max_booking_minutes == 480

    def test_service_converts_to_offer(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, VALID_CONFIG))

        offer = config.find_service("printing").to_offer()

        assert offer.unit_price_for(150) == Decimal("2.00")

    def test_unknown_ids(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, VALID_CONFIG))

        assert config.find_space("nope") is None
        assert config.find_service("nope") is None

    def test_defaults_when_sections_missing(self):
        config = AppConfig()

        assert config.defaults.max_preview == 10
        assert config.spaces == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write(tmp_path, "spaces: [unclosed"))

    def test_duplicate_space_ids(self, tmp_path):
        content = """
spaces:
  - {id: a, name: A, capacity: 1}
  - {id: A, name: Other A, capacity: 2}
"""
        with pytest.raises(ConfigurationError, match="Duplicate id"):
            AppConfig.load_from_yaml(_write(tmp_path, content))

    def test_invalid_space_constraints(self):
        with pytest.raises(ValidationError, match="max_booking_minutes"):
            AppConfig(spaces=[{
                "id": "a",
                "name": "A",
                "capacity": 1,
                "min_booking_minutes": 60,
                "max_booking_minutes": 30,
            }])

    def test_invalid_tier(self):
        with pytest.raises(ValidationError, match="price is required"):
            AppConfig(services=[{
                "id": "s",
                "name": "S",
                "price": 1,
                "pricing_tiers": [{"min_quantity": 1, "discount_type": "TIER_PRICE"}],
            }])

    def test_unsorted_tiers(self):
        with pytest.raises(ValidationError, match="sorted"):
            AppConfig(services=[{
                "id": "s",
                "name": "S",
                "price": 1,
                "pricing_tiers": [{"min_quantity": 10}, {"min_quantity": 1}],
            }])

    def test_max_preview_bounds(self):
        with pytest.raises(ValidationError, match="max_preview"):
            AppConfig(defaults={"max_preview": 0})
