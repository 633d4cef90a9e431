#!/usr/bin/env python3
"""Tests for the Vehicle class and the patch reducer."""

import pytest
from fueltrack import (
    CalculationMethod,
    FuelState,
    FuelStatus,
    VehiclePatch,
    apply_patch,
)

# =============================================================================
# Unit Tests: Vehicle Properties
# =============================================================================


class TestVehicleDerivedFigures:
    """Tests for range, percentage and status properties."""

    def test_range_is_level_times_mileage(self, make_vehicle):
        vehicle = make_vehicle(current_fuel_level=3, mileage=20)
        assert vehicle.range_km == 60

    def test_fuel_percentage(self, make_vehicle):
        vehicle = make_vehicle(current_fuel_level=7.5, tank_capacity=15)
        assert vehicle.fuel_percentage == 50

    def test_fuel_status_low(self, make_vehicle):
        vehicle = make_vehicle(current_fuel_level=2.5, tank_capacity=15)
        assert vehicle.fuel_status == FuelStatus.LOW

    def test_low_fuel_by_level(self, make_vehicle):
        vehicle = make_vehicle(current_fuel_level=1.9, mileage=50)
        assert vehicle.is_low_fuel is True

    def test_low_fuel_by_range(self, make_vehicle):
        vehicle = make_vehicle(current_fuel_level=2.5, mileage=3)
        assert vehicle.is_low_fuel is True

    def test_not_low_fuel(self, make_vehicle):
        vehicle = make_vehicle(current_fuel_level=10, mileage=20)
        assert vehicle.is_low_fuel is False

    def test_fuel_state(self, make_vehicle):
        assert make_vehicle(is_on_reserve=False).fuel_state == FuelState.NORMAL
        assert make_vehicle(is_on_reserve=True).fuel_state == FuelState.RESERVE

    def test_expected_top_up(self, make_vehicle):
        vehicle = make_vehicle(current_fuel_level=5, tank_capacity=15)
        assert vehicle.expected_top_up == 10

    def test_name(self, make_vehicle):
        assert make_vehicle(vehicle_number="KA01").name == "KA01 (Two-wheeler)"


class TestConsumptionFloor:
    """Tests for Vehicle.consumption_floor."""

    def test_reserve_capacity_when_off_reserve(self, make_vehicle):
        vehicle = make_vehicle(has_reserve_tank=True, reserve_tank_capacity=1.5)
        assert vehicle.consumption_floor == 1.5

    def test_zero_when_on_reserve(self, make_vehicle):
        vehicle = make_vehicle(has_reserve_tank=True, is_on_reserve=True)
        assert vehicle.consumption_floor == 0

    def test_zero_without_reserve_tank(self, make_vehicle):
        vehicle = make_vehicle(has_reserve_tank=False, reserve_tank_capacity=1.5)
        assert vehicle.reserve_tank_capacity == 0
        assert vehicle.consumption_floor == 0


# =============================================================================
# VehiclePatch and apply_patch
# =============================================================================


class TestVehiclePatch:
    """Tests for VehiclePatch field handling."""

    def test_empty_patch(self):
        assert VehiclePatch().is_empty is True
        assert VehiclePatch().changes() == {}

    def test_falsy_values_are_changes(self):
        """False and 0 are real values; only None means unchanged."""
        patch = VehiclePatch(is_on_reserve=False, current_fuel_level=0)
        assert patch.changes() == {"is_on_reserve": False, "current_fuel_level": 0}

    def test_as_fields_uses_stored_enum_values(self):
        patch = VehiclePatch(
            mileage=29.0, mileage_calculation_method=CalculationMethod.FULL_TO_FULL
        )
        assert patch.as_fields() == {
            "mileage": 29.0,
            "mileage_calculation_method": "full_to_full",
        }


class TestApplyPatch:
    """Tests for the apply_patch reducer."""

    def test_applies_set_fields(self, make_vehicle):
        vehicle = make_vehicle(current_fuel_level=10, current_odometer=1000)
        updated = apply_patch(vehicle, VehiclePatch(current_fuel_level=4.0))
        assert updated.current_fuel_level == 4.0
        assert updated.current_odometer == 1000

    def test_does_not_mutate_input(self, make_vehicle):
        vehicle = make_vehicle(current_fuel_level=10)
        apply_patch(vehicle, VehiclePatch(current_fuel_level=4.0, is_on_reserve=True))
        assert vehicle.current_fuel_level == 10
        assert vehicle.is_on_reserve is False

    def test_empty_patch_is_identity(self, make_vehicle):
        vehicle = make_vehicle()
        updated = apply_patch(vehicle, VehiclePatch())
        assert updated is not vehicle
        assert vars(updated) == vars(vehicle)

    def test_derived_figures_follow_patch(self, make_vehicle):
        vehicle = make_vehicle(current_fuel_level=10, mileage=20)
        updated = apply_patch(vehicle, VehiclePatch(current_fuel_level=2.0, mileage=25))
        assert updated.range_km == pytest.approx(50)
