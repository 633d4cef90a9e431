"""
Mileage and fuel estimation for the four fuel events.

Every operation takes the vehicle's current state plus the user's input and
returns an Estimate holding the patch to persist. Nothing here touches a
store: validation errors are raised before any patch is built, so a rejected
input can never cause a write.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from .calculation_method import CalculationMethod
from .calculations import blend_mileage, calc_fuel_consumed, calc_sample_mileage
from .errors import InvalidAmount, NonMonotonicOdometer
from .patch import VehiclePatch
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

# Largest top-up accepted by add_fuel without an odometer reading
MAX_SINGLE_REFUEL_LITERS = 20

# Allowed gap between the litres entered on tank_full and the expected top-up
FUEL_MISMATCH_TOLERANCE_LITERS = 2


@dataclass
class Estimate:
    """Result of a fuel event: the patch to persist plus advisory warnings."""

    patch: VehiclePatch
    warnings: List[str] = field(default_factory=list)
    sample_mileage: Optional[float] = None

    @property
    def recalculated(self) -> bool:
        """True when the event produced a new mileage sample."""
        return self.sample_mileage is not None


@dataclass
class OdometerPreview:
    distance: float
    fuel_consumed: float
    fuel_left: float


@dataclass
class MileagePreview:
    distance: float
    fuel_used: float
    sample_mileage: float
    new_mileage: float


def _timestamp(now: Optional[datetime]) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def _check_odometer(vehicle: Vehicle, odometer: float) -> None:
    if not math.isfinite(odometer) or odometer < vehicle.current_odometer:
        raise NonMonotonicOdometer(
            f"Odometer reading {odometer} cannot be less than previous reading "
            f"{vehicle.current_odometer}"
        )


# =============================================================================
# Add fuel
# =============================================================================


def add_fuel(vehicle: Vehicle, amount: float) -> Estimate:
    """
    Top up the tank without an odometer reading.

    The level is capped at tank capacity and the reserve flag is cleared.
    Mileage is left alone: without a distance there is nothing to measure.
    """
    if not 0 < amount <= MAX_SINGLE_REFUEL_LITERS:
        raise InvalidAmount(
            f"Fuel amount must be more than 0 and at most "
            f"{MAX_SINGLE_REFUEL_LITERS}L, got {amount}"
        )

    new_level = min(vehicle.current_fuel_level + amount, vehicle.tank_capacity)
    logger.debug(
        "Adding fuel to %s: %.2fL, new level %.2fL",
        vehicle.vehicle_number,
        amount,
        new_level,
    )
    return Estimate(
        patch=VehiclePatch(current_fuel_level=new_level, is_on_reserve=False)
    )


# =============================================================================
# Update odometer
# =============================================================================


def preview_odometer(vehicle: Vehicle, reading: float) -> OdometerPreview:
    """Projected consumption for a reading, without validating it."""
    distance = max(reading - vehicle.current_odometer, 0)
    consumed = calc_fuel_consumed(distance, vehicle.mileage)
    fuel_left = max(vehicle.current_fuel_level - consumed, vehicle.consumption_floor)
    return OdometerPreview(distance=distance, fuel_consumed=consumed, fuel_left=fuel_left)


def update_odometer(vehicle: Vehicle, reading: float) -> Estimate:
    """
    Record a new odometer reading and burn fuel at the current mileage.

    The reading must be a whole number strictly above the previous one.
    The projected level never drops below the vehicle's consumption floor
    (the reserve tank when one exists and is not yet in use, otherwise 0).
    """
    if not math.isfinite(reading):
        raise InvalidAmount(f"Invalid odometer reading: {reading}")
    if reading <= vehicle.current_odometer:
        raise NonMonotonicOdometer(
            f"Odometer reading must be greater than the previous reading "
            f"{vehicle.current_odometer}, got {reading}"
        )
    if reading != int(reading):
        raise InvalidAmount(f"Odometer reading must be a whole number, got {reading}")

    preview = preview_odometer(vehicle, reading)
    logger.debug(
        "Odometer update for %s: distance %skm, fuel used %.2fL, new level %.2fL",
        vehicle.vehicle_number,
        preview.distance,
        preview.fuel_consumed,
        preview.fuel_left,
    )
    return Estimate(
        patch=VehiclePatch(
            current_odometer=int(reading),
            current_fuel_level=preview.fuel_left,
        )
    )


# =============================================================================
# Set reserve
# =============================================================================


def set_reserve(
    vehicle: Vehicle, odometer: float, now: Optional[datetime] = None
) -> Estimate:
    """
    Record that the vehicle just switched to its reserve tank.

    Reserve-to-reserve estimation:
    - Needs a previous reserve event (last_reserve_odo > 0) behind this reading
    - Fuel used between two reserve switches is the usable main tank:
      tank_capacity - reserve_tank_capacity
    - The sample is averaged with the previous mileage

    The level always becomes the reserve capacity.
    """
    _check_odometer(vehicle, odometer)

    new_mileage = vehicle.mileage
    method = vehicle.mileage_calculation_method
    sample = None

    if vehicle.last_reserve_odo > 0 and odometer > vehicle.last_reserve_odo:
        distance = odometer - vehicle.last_reserve_odo
        fuel_used = vehicle.tank_capacity - vehicle.reserve_tank_capacity
        sample = calc_sample_mileage(distance, fuel_used)
        logger.debug(
            "Reserve-to-reserve for %s: %skm on %.2fL",
            vehicle.vehicle_number,
            distance,
            fuel_used,
        )
        if sample is not None:
            new_mileage = blend_mileage(vehicle.mileage, sample)
            method = CalculationMethod.RESERVE_TO_RESERVE
            logger.debug(
                "Sample mileage %.2f km/L, new average %.2f km/L", sample, new_mileage
            )

    return Estimate(
        patch=VehiclePatch(
            current_odometer=odometer,
            current_fuel_level=vehicle.reserve_tank_capacity,
            is_on_reserve=True,
            mileage=new_mileage,
            mileage_calculation_method=method,
            last_reserve_odo=odometer,
            last_reserve_date=_timestamp(now),
        ),
        sample_mileage=sample,
    )


# =============================================================================
# Tank full
# =============================================================================


def preview_tank_full(vehicle: Vehicle, odometer: float) -> Optional[MileagePreview]:
    """Full-to-full figures a fill-up at this reading would produce, or None."""
    if not (vehicle.last_full_tank_odo > 0 and odometer > vehicle.last_full_tank_odo):
        return None
    distance = odometer - vehicle.last_full_tank_odo
    fuel_used = vehicle.expected_top_up
    sample = calc_sample_mileage(distance, fuel_used)
    if sample is None:
        return None
    return MileagePreview(
        distance=distance,
        fuel_used=fuel_used,
        sample_mileage=sample,
        new_mileage=blend_mileage(vehicle.mileage, sample),
    )


def tank_full(
    vehicle: Vehicle,
    odometer: float,
    fuel_added: float,
    now: Optional[datetime] = None,
) -> Estimate:
    """
    Record a fill-up to the brim.

    Full-to-full estimation:
    - Needs a previous full tank (last_full_tank_odo > 0) behind this reading
    - Fuel used since then is what the tank was missing before this fill:
      tank_capacity - current_fuel_level
    - The sample is averaged with the previous mileage

    The level always becomes tank capacity; fuel_added is only checked
    against the expected top-up and a mismatch over 2L yields a warning.
    """
    _check_odometer(vehicle, odometer)
    if not 0 < fuel_added <= vehicle.tank_capacity:
        raise InvalidAmount(
            f"Fuel added must be more than 0 and at most the tank capacity "
            f"{vehicle.tank_capacity}L, got {fuel_added}"
        )

    preview = preview_tank_full(vehicle, odometer)
    new_mileage = vehicle.mileage
    method = vehicle.mileage_calculation_method
    sample = None
    if preview is not None:
        sample = preview.sample_mileage
        new_mileage = preview.new_mileage
        method = CalculationMethod.FULL_TO_FULL
        logger.debug(
            "Full-to-full for %s: %skm on %.2fL, sample %.2f km/L, new average %.2f km/L",
            vehicle.vehicle_number,
            preview.distance,
            preview.fuel_used,
            sample,
            new_mileage,
        )

    warnings = []
    expected = vehicle.expected_top_up
    if abs(fuel_added - expected) > FUEL_MISMATCH_TOLERANCE_LITERS:
        message = (
            f"Fuel added ({fuel_added:.1f}L) differs from the expected top-up "
            f"({expected:.1f}L) by more than {FUEL_MISMATCH_TOLERANCE_LITERS}L"
        )
        logger.warning("%s: %s", vehicle.vehicle_number, message)
        warnings.append(message)

    return Estimate(
        patch=VehiclePatch(
            current_odometer=odometer,
            current_fuel_level=vehicle.tank_capacity,
            is_on_reserve=False,
            mileage=new_mileage,
            mileage_calculation_method=method,
            last_full_tank_odo=odometer,
            last_full_tank_date=_timestamp(now),
        ),
        warnings=warnings,
        sample_mileage=sample,
    )
