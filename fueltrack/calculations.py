"""Helper functions for fuel, mileage and maintenance due calculations."""

from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from .status import FuelStatus, MaintenanceStatus

# Below either of these the vehicle is flagged as low on fuel
LOW_FUEL_LITERS = 2
LOW_RANGE_KM = 10


def calc_sample_mileage(distance: float, fuel_used: float) -> Optional[float]:
    """
    Calculate a single mileage sample (km/L).

    Returns None when either the distance or the fuel used is not positive,
    so callers keep their previous estimate instead of dividing by zero.
    """
    if fuel_used <= 0 or distance <= 0:
        return None
    return distance / fuel_used


def blend_mileage(previous: float, sample: Optional[float]) -> float:
    """Average a new sample with the previous estimate: (previous + sample) / 2."""
    if sample is None:
        return previous
    return (previous + sample) / 2


def calc_fuel_consumed(distance: float, mileage: float) -> float:
    """Litres burned over a distance at the given mileage."""
    return distance / mileage


def calc_range(fuel_level: float, mileage: float) -> float:
    """Estimated range in km: fuel level * mileage."""
    return fuel_level * mileage


def calc_fuel_percentage(fuel_level: float, capacity: float) -> float:
    """Fuel level as a percentage of capacity, clamped to 0-100."""
    if capacity <= 0:
        return 0.0
    return max(0.0, min(100.0, fuel_level / capacity * 100))


def check_fuel_status(fuel_level: float, capacity: float) -> FuelStatus:
    """Classify the fuel level by percentage of tank capacity."""
    percentage = calc_fuel_percentage(fuel_level, capacity)
    if percentage < 10:
        return FuelStatus.CRITICAL
    if percentage < 20:
        return FuelStatus.LOW
    return FuelStatus.OK


def is_low_fuel(fuel_level: float, range_km: float) -> bool:
    """Low fuel when under 2 L or under 10 km of range."""
    return fuel_level < LOW_FUEL_LITERS or range_km < LOW_RANGE_KM


def calc_due_date(
    last_date: Optional[date], interval_months: Optional[float]
) -> Optional[date]:
    """Calculate next due date: last + interval months."""
    if interval_months is None or last_date is None:
        return None
    months = int(interval_months)
    days = int((interval_months - months) * 30)
    return last_date + relativedelta(months=months, days=days)


def check_due_status(today: date, due: date, soon_days: int) -> MaintenanceStatus:
    """Determine status of pending work by comparing today to its due date."""
    if today > due:
        return MaintenanceStatus.OVERDUE
    if (due - today).days <= soon_days:
        return MaintenanceStatus.DUE_SOON
    return MaintenanceStatus.SCHEDULED
