#!/usr/bin/env python3
"""Tests for Registration validation and defaults."""
import pytest
from fueltrack import InvalidVehicle, Registration, VehicleKind


class TestRegistrationDefaults:
    """Defaults applied to a bare registration."""

    def test_defaults(self):
        fields = Registration(vehicle_number="ka01ab1234").as_fields()
        assert fields["vehicle_number"] == "KA01AB1234"
        assert fields["vehicle_type"] == "bike"
        assert fields["mileage"] == 15.0
        assert fields["tank_capacity"] == 15.0
        assert fields["has_reserve_tank"] is True
        assert fields["reserve_tank_capacity"] == 1.0
        assert fields["mileage_calculation_method"] == "manual"

    def test_estimation_state_starts_unset(self):
        fields = Registration(vehicle_number="KA01").as_fields()
        assert fields["last_full_tank_odo"] == 0
        assert fields["last_full_tank_date"] is None
        assert fields["last_reserve_odo"] == 0
        assert fields["last_reserve_date"] is None

    def test_no_reserve_tank_zeroes_capacity(self):
        fields = Registration(
            vehicle_number="KA01",
            vehicle_type=VehicleKind.CAR,
            has_reserve_tank=False,
            reserve_tank_capacity=5,
            tank_capacity=40,
        ).as_fields()
        assert fields["reserve_tank_capacity"] == 0
        assert fields["vehicle_type"] == "car"


class TestRegistrationValidation:
    """Each invalid registration raises InvalidVehicle."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"vehicle_number": ""},
            {"vehicle_number": "   "},
            {"mileage": 0},
            {"mileage": -3},
            {"tank_capacity": 0},
            {"reserve_tank_capacity": 15},
            {"reserve_tank_capacity": -1},
            {"current_odometer": -10},
            {"current_fuel_level": 16},
            {"current_fuel_level": -1},
            {"mileage": float("nan")},
        ],
    )
    def test_rejects(self, overrides):
        fields = {"vehicle_number": "KA01"}
        fields.update(overrides)
        with pytest.raises(InvalidVehicle):
            Registration(**fields).validate()

    def test_valid_passes(self):
        Registration(
            vehicle_number="KA01", tank_capacity=12, reserve_tank_capacity=1.2,
            current_fuel_level=12, current_odometer=15000,
        ).validate()


class TestRegistrationWarnings:
    """Valid but suspicious registrations are flagged, not rejected."""

    def test_level_below_reserve_warns(self):
        registration = Registration(
            vehicle_number="KA01", reserve_tank_capacity=1.5, current_fuel_level=0.5
        )
        registration.validate()
        warnings = registration.warnings()
        assert len(warnings) == 1
        assert "below the 1.5L reserve" in warnings[0]

    def test_on_reserve_does_not_warn(self):
        registration = Registration(
            vehicle_number="KA01", reserve_tank_capacity=1.5,
            current_fuel_level=0.5, is_on_reserve=True,
        )
        assert registration.warnings() == []

    def test_no_reserve_tank_does_not_warn(self):
        registration = Registration(
            vehicle_number="KA01", has_reserve_tank=False, current_fuel_level=0
        )
        assert registration.warnings() == []

    def test_level_above_reserve_does_not_warn(self):
        registration = Registration(vehicle_number="KA01", current_fuel_level=6)
        assert registration.warnings() == []
