"""FuelRecord class for point-in-time fuel snapshots."""
from typing import Optional

from .calculations import calc_range


class FuelRecord:
    """A snapshot of odometer, fuel left and mileage estimate at one moment."""

    def __init__(
            self,
            id: str,
            user_id: str,
            odometer_reading: float,
            petrol_left: float,
            estimated_mileage: float,
            is_reserve: bool = False,
            vehicle_id: Optional[str] = None,
            distance_traveled: Optional[float] = None,
            petrol_used: Optional[float] = None,
            created_at: Optional[str] = None,
            updated_at: Optional[str] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.vehicle_id = vehicle_id
        self.odometer_reading = odometer_reading
        self.petrol_left = petrol_left
        self.estimated_mileage = estimated_mileage
        self.is_reserve = is_reserve
        self.distance_traveled = distance_traveled
        self.petrol_used = petrol_used
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def range_km(self) -> float:
        return calc_range(self.petrol_left, self.estimated_mileage)
