"""Shared fixtures for fuel tracker tests."""

from datetime import datetime, timezone

import pytest

from fueltrack import CalculationMethod, Vehicle, VehicleKind

FIXED_NOW = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_vehicle():
    """Factory for vehicles with sensible defaults; override any field."""

    def _make(**overrides):
        fields = dict(
            id="v1",
            user_id="alice",
            vehicle_number="KA01AB1234",
            vehicle_type=VehicleKind.BIKE,
            tank_capacity=15.0,
            mileage=20.0,
            has_reserve_tank=True,
            reserve_tank_capacity=1.5,
            current_odometer=1000,
            current_fuel_level=10.0,
            is_on_reserve=False,
            mileage_calculation_method=CalculationMethod.MANUAL,
        )
        fields.update(overrides)
        return Vehicle(**fields)

    return _make


@pytest.fixture
def clock():
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW
