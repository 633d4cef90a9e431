#!/usr/bin/env python3
"""Tests for the fuel, maintenance and problem enums."""

from fueltrack import (
    CalculationMethod,
    FuelState,
    FuelStatus,
    MaintenanceStatus,
    ProblemPriority,
    ProblemStatus,
    VehicleKind,
)


class TestFuelStatus:
    """Tests for FuelStatus ordering."""

    def test_urgency_ordering(self):
        """Lower value = more urgent."""
        assert FuelStatus.CRITICAL.value < FuelStatus.LOW.value
        assert FuelStatus.LOW.value < FuelStatus.OK.value


class TestStoredValues:
    """Enum values match the strings kept in the store files."""

    def test_vehicle_kind_values(self):
        assert VehicleKind("bike") is VehicleKind.BIKE
        assert VehicleKind("car") is VehicleKind.CAR

    def test_vehicle_kind_labels(self):
        assert VehicleKind.BIKE.label == "Two-wheeler"
        assert VehicleKind.CAR.label == "Four-wheeler"

    def test_calculation_method_values(self):
        assert CalculationMethod("manual") is CalculationMethod.MANUAL
        assert CalculationMethod("full_to_full") is CalculationMethod.FULL_TO_FULL
        assert CalculationMethod("reserve_to_reserve") is CalculationMethod.RESERVE_TO_RESERVE

    def test_calculation_method_label(self):
        assert CalculationMethod.RESERVE_TO_RESERVE.label == "Reserve To Reserve"

    def test_fuel_state_values(self):
        assert FuelState.NORMAL.value == "normal"
        assert FuelState.RESERVE.value == "reserve"


class TestMaintenanceStatus:
    """Tests for MaintenanceStatus ordering."""

    def test_urgency_ordering(self):
        """Lower value = more urgent."""
        ordered = sorted(MaintenanceStatus, key=lambda s: s.value)
        assert ordered == [
            MaintenanceStatus.OVERDUE,
            MaintenanceStatus.DUE_SOON,
            MaintenanceStatus.SCHEDULED,
            MaintenanceStatus.UNSCHEDULED,
            MaintenanceStatus.COMPLETED,
        ]


class TestProblemEnums:
    """Problem priority ranking and status labels."""

    def test_priority_rank(self):
        assert ProblemPriority.CRITICAL.rank < ProblemPriority.HIGH.rank
        assert ProblemPriority.HIGH.rank < ProblemPriority.MEDIUM.rank
        assert ProblemPriority.MEDIUM.rank < ProblemPriority.LOW.rank

    def test_stored_values(self):
        assert ProblemPriority("critical") is ProblemPriority.CRITICAL
        assert ProblemStatus("in_progress") is ProblemStatus.IN_PROGRESS

    def test_status_label(self):
        assert ProblemStatus.IN_PROGRESS.label == "IN PROGRESS"
        assert ProblemStatus.OPEN.label == "OPEN"
