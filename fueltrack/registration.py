"""Registration dataclass for new vehicles, with validation and defaults."""

import math
from dataclasses import dataclass
from typing import Any, Dict, List

from .calculation_method import CalculationMethod
from .errors import InvalidVehicle
from .vehicle_kind import VehicleKind

DEFAULT_MILEAGE = 15.0
DEFAULT_TANK_CAPACITY = 15.0
DEFAULT_RESERVE_CAPACITY = 1.0


@dataclass
class Registration:
    """User-supplied initial values for a vehicle."""

    vehicle_number: str
    vehicle_type: VehicleKind = VehicleKind.BIKE
    mileage: float = DEFAULT_MILEAGE
    tank_capacity: float = DEFAULT_TANK_CAPACITY
    has_reserve_tank: bool = True
    reserve_tank_capacity: float = DEFAULT_RESERVE_CAPACITY
    current_odometer: float = 0
    current_fuel_level: float = 0
    is_on_reserve: bool = False

    def validate(self) -> None:
        """Raise InvalidVehicle describing the first problem found."""
        if not self.vehicle_number or not self.vehicle_number.strip():
            raise InvalidVehicle("Please enter a vehicle number")
        for name in ("mileage", "tank_capacity", "reserve_tank_capacity",
                     "current_odometer", "current_fuel_level"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidVehicle(f"{name} must be a number")
        if self.mileage <= 0:
            raise InvalidVehicle("Please enter a valid mileage")
        if self.tank_capacity <= 0:
            raise InvalidVehicle("Tank capacity must be greater than 0")
        if self.has_reserve_tank and not (
            0 <= self.reserve_tank_capacity < self.tank_capacity
        ):
            raise InvalidVehicle("Reserve capacity must be less than tank capacity")
        if self.current_odometer < 0:
            raise InvalidVehicle("Odometer reading cannot be negative")
        if not 0 <= self.current_fuel_level <= self.tank_capacity:
            raise InvalidVehicle("Fuel level must be between 0 and tank capacity")

    def warnings(self) -> List[str]:
        """Advisory notes on a valid registration; never block it."""
        notes = []
        if (
            self.has_reserve_tank
            and not self.is_on_reserve
            and self.current_fuel_level < self.reserve_tank_capacity
        ):
            notes.append(
                f"Fuel level {self.current_fuel_level:.1f}L is below the "
                f"{self.reserve_tank_capacity:.1f}L reserve; the next odometer update "
                "will raise it to the reserve level. Register as on reserve, or enter "
                "the level including the reserve tank."
            )
        return notes

    def as_fields(self) -> Dict[str, Any]:
        """Validated fields in store format, with estimation state initialised."""
        self.validate()
        return {
            "vehicle_number": self.vehicle_number.strip().upper(),
            "vehicle_type": self.vehicle_type.value,
            "mileage": self.mileage,
            "tank_capacity": self.tank_capacity,
            "has_reserve_tank": self.has_reserve_tank,
            "reserve_tank_capacity": (
                self.reserve_tank_capacity if self.has_reserve_tank else 0
            ),
            "current_odometer": self.current_odometer,
            "current_fuel_level": self.current_fuel_level,
            "is_on_reserve": self.is_on_reserve,
            "last_full_tank_odo": 0,
            "last_full_tank_date": None,
            "last_reserve_odo": 0,
            "last_reserve_date": None,
            "mileage_calculation_method": CalculationMethod.MANUAL.value,
        }
