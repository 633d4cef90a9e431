"""Vehicle class - the main aggregate for fuel state and derived figures."""

from typing import Optional

from .calculation_method import CalculationMethod
from .calculations import (
    calc_fuel_percentage,
    calc_range,
    check_fuel_status,
    is_low_fuel,
)
from .status import FuelState, FuelStatus
from .vehicle_kind import VehicleKind


class Vehicle:
    """A registered vehicle with its capacity, live fuel state and mileage estimate."""

    def __init__(
        self,
        id: str,
        user_id: str,
        vehicle_number: str,
        vehicle_type: VehicleKind,
        tank_capacity: float,
        mileage: float,
        has_reserve_tank: bool = False,
        reserve_tank_capacity: float = 0,
        current_odometer: float = 0,
        current_fuel_level: float = 0,
        is_on_reserve: bool = False,
        mileage_calculation_method: CalculationMethod = CalculationMethod.MANUAL,
        last_full_tank_odo: float = 0,
        last_full_tank_date: Optional[str] = None,
        last_reserve_odo: float = 0,
        last_reserve_date: Optional[str] = None,
        created_at: Optional[str] = None,
        updated_at: Optional[str] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.vehicle_number = vehicle_number
        self.vehicle_type = vehicle_type
        self.tank_capacity = tank_capacity
        self.mileage = mileage
        self.has_reserve_tank = has_reserve_tank
        self.reserve_tank_capacity = reserve_tank_capacity if has_reserve_tank else 0
        self.current_odometer = current_odometer
        self.current_fuel_level = current_fuel_level
        self.is_on_reserve = is_on_reserve
        self.mileage_calculation_method = mileage_calculation_method
        self.last_full_tank_odo = last_full_tank_odo or 0
        self.last_full_tank_date = last_full_tank_date
        self.last_reserve_odo = last_reserve_odo or 0
        self.last_reserve_date = last_reserve_date
        self.created_at = created_at
        self.updated_at = updated_at

    def __repr__(self) -> str:
        return (
            f"<Vehicle {self.vehicle_number} odo={self.current_odometer} "
            f"fuel={self.current_fuel_level:.2f}L mileage={self.mileage:.2f}>"
        )

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        return f"{self.vehicle_number} ({self.vehicle_type.label})"

    @property
    def range_km(self) -> float:
        """Estimated distance left on the current fuel level."""
        return calc_range(self.current_fuel_level, self.mileage)

    @property
    def fuel_percentage(self) -> float:
        return calc_fuel_percentage(self.current_fuel_level, self.tank_capacity)

    @property
    def fuel_status(self) -> FuelStatus:
        return check_fuel_status(self.current_fuel_level, self.tank_capacity)

    @property
    def fuel_state(self) -> FuelState:
        return FuelState.RESERVE if self.is_on_reserve else FuelState.NORMAL

    @property
    def is_low_fuel(self) -> bool:
        return is_low_fuel(self.current_fuel_level, self.range_km)

    @property
    def consumption_floor(self) -> float:
        """
        Lowest level odometer projections may bring the tank down to.

        Off reserve the projection stops at the reserve tank, since switching
        to reserve is a separate user-reported event. On reserve it may reach 0.
        """
        if self.is_on_reserve or not self.has_reserve_tank:
            return 0
        return self.reserve_tank_capacity

    @property
    def expected_top_up(self) -> float:
        """Litres needed to fill the tank from the current level."""
        return self.tank_capacity - self.current_fuel_level
