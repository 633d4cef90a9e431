"""FuelTracker - runs fuel events for the signed-in user against the stores."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from . import estimator
from .errors import StoreError
from .estimator import Estimate
from .fuel_record import FuelRecord
from .loader import FuelRecordStore, VehicleStore, utc_now
from .patch import apply_patch
from .registration import Registration
from .session import Session
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


@dataclass
class Outcome:
    """A fuel event after it was (or, on a dry run, would have been) saved."""

    vehicle: Vehicle
    estimate: Estimate
    saved: bool = True

    @property
    def warnings(self) -> List[str]:
        return self.estimate.warnings


class FuelTracker:
    """
    Wires the estimator to the stores for one session.

    Each event loads the vehicle, computes the complete patch and then issues
    a single vehicle write followed by a fuel record snapshot. Validation
    errors are raised before anything is written. Only the vehicle write
    decides success: a failed snapshot is logged, not raised, so retrying
    an event never applies it twice.
    """

    def __init__(
        self,
        session: Session,
        vehicles: VehicleStore,
        records: Optional[FuelRecordStore] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session = session
        self.vehicles = vehicles
        self.records = records
        self.clock = clock

    def _user(self) -> str:
        return self.session.require_user()

    # -------------------------------------------------------------------------
    # Vehicles
    # -------------------------------------------------------------------------

    def list_vehicles(self) -> List[Vehicle]:
        return self.vehicles.list(self._user())

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        return self.vehicles.get(vehicle_id, self._user())

    def find_vehicle(self, vehicle_number: str) -> Vehicle:
        return self.vehicles.find_by_number(vehicle_number, self._user())

    def register(self, registration: Registration) -> Vehicle:
        user_id = self._user()
        registration.validate()
        vehicle = self.vehicles.create(user_id, registration)
        logger.info("Registered vehicle %s for %s", vehicle.vehicle_number, user_id)
        for warning in registration.warnings():
            logger.warning("%s: %s", vehicle.vehicle_number, warning)
        return vehicle

    def delete_vehicle(self, vehicle_id: str) -> None:
        self.vehicles.delete(vehicle_id, self._user())
        logger.info("Deleted vehicle %s", vehicle_id)

    def list_records(self) -> List[FuelRecord]:
        user_id = self._user()
        if self.records is None:
            return []
        return self.records.list(user_id)

    # -------------------------------------------------------------------------
    # Fuel events
    # -------------------------------------------------------------------------

    def add_fuel(self, vehicle_id: str, amount: float, dry_run: bool = False) -> Outcome:
        vehicle = self.get_vehicle(vehicle_id)
        return self._commit(vehicle, estimator.add_fuel(vehicle, amount), "add_fuel", dry_run)

    def update_odometer(
        self, vehicle_id: str, reading: float, dry_run: bool = False
    ) -> Outcome:
        vehicle = self.get_vehicle(vehicle_id)
        estimate = estimator.update_odometer(vehicle, reading)
        return self._commit(vehicle, estimate, "update_odometer", dry_run)

    def set_reserve(
        self, vehicle_id: str, odometer: float, dry_run: bool = False
    ) -> Outcome:
        vehicle = self.get_vehicle(vehicle_id)
        estimate = estimator.set_reserve(vehicle, odometer, now=self.clock())
        return self._commit(vehicle, estimate, "set_reserve", dry_run)

    def tank_full(
        self,
        vehicle_id: str,
        odometer: float,
        fuel_added: float,
        dry_run: bool = False,
    ) -> Outcome:
        vehicle = self.get_vehicle(vehicle_id)
        estimate = estimator.tank_full(vehicle, odometer, fuel_added, now=self.clock())
        return self._commit(vehicle, estimate, "tank_full", dry_run)

    def _commit(
        self, vehicle: Vehicle, estimate: Estimate, event: str, dry_run: bool
    ) -> Outcome:
        updated = apply_patch(vehicle, estimate.patch)
        if dry_run:
            return Outcome(vehicle=updated, estimate=estimate, saved=False)

        user_id = self._user()
        try:
            self.vehicles.patch(vehicle.id, user_id, estimate.patch.as_fields())
        except StoreError:
            logger.error("Failed to save %s for %s", event, vehicle.vehicle_number)
            raise
        logger.info(
            "%s on %s: odo %s, fuel %.2fL, mileage %.2f km/L",
            event,
            vehicle.vehicle_number,
            updated.current_odometer,
            updated.current_fuel_level,
            updated.mileage,
        )

        # The vehicle is saved at this point; the history log is secondary
        if self.records is not None:
            try:
                self.records.append(user_id, _snapshot(vehicle, updated))
            except StoreError:
                logger.exception(
                    "Saved %s for %s but could not append fuel record",
                    event,
                    vehicle.vehicle_number,
                )
        return Outcome(vehicle=updated, estimate=estimate)


def _snapshot(before: Vehicle, after: Vehicle) -> dict:
    """Fuel record fields describing the vehicle after an event."""
    fields = {
        "vehicle_id": after.id,
        "odometer_reading": after.current_odometer,
        "petrol_left": after.current_fuel_level,
        "estimated_mileage": after.mileage,
        "is_reserve": after.is_on_reserve,
    }
    distance = after.current_odometer - before.current_odometer
    if distance > 0:
        fields["distance_traveled"] = distance
    burned = before.current_fuel_level - after.current_fuel_level
    if burned > 0:
        fields["petrol_used"] = burned
    return fields
