"""UpkeepTracker - maintenance records and reported problems for the signed-in user."""

import logging
import math
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from .calculations import calc_due_date
from .errors import InvalidEntry, StoreError
from .loader import MaintenanceStore, ProblemStore, VehicleStore, utc_now
from .maintenance import MaintenanceDue, MaintenanceEntry, MaintenanceRecord
from .problem import ProblemReport, VehicleProblem
from .session import Session
from .status import MaintenanceStatus, ProblemStatus
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return utc_now().date()


class UpkeepTracker:
    """
    Keeps a vehicle's maintenance log and problem list.

    Every entry belongs to one of the user's vehicles; adding an entry for
    a vehicle the user does not own raises VehicleNotFound. Entries are not
    removed when their vehicle is deleted.
    """

    def __init__(
        self,
        session: Session,
        vehicles: VehicleStore,
        maintenance: MaintenanceStore,
        problems: ProblemStore,
        today: Callable[[], date] = utc_today,
    ):
        self.session = session
        self.vehicles = vehicles
        self.maintenance = maintenance
        self.problems = problems
        self.today = today

    def _user(self) -> str:
        return self.session.require_user()

    def find_vehicle(self, vehicle_number: str) -> Vehicle:
        return self.vehicles.find_by_number(vehicle_number, self._user())

    def vehicle_numbers(self) -> Dict[str, str]:
        """Map vehicle id to registration number for display."""
        return {v.id: v.vehicle_number for v in self.vehicles.list(self._user())}

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def list_maintenance(self, vehicle_id: Optional[str] = None) -> List[MaintenanceRecord]:
        return self.maintenance.list(self._user(), vehicle_id)

    def get_maintenance(self, record_id: str) -> MaintenanceRecord:
        return self.maintenance.get(record_id, self._user())

    def add_maintenance(self, entry: MaintenanceEntry) -> MaintenanceRecord:
        user_id = self._user()
        fields = entry.as_fields()
        vehicle = self.vehicles.get(entry.vehicle_id, user_id)
        record = self.maintenance.create(user_id, fields)
        logger.info("Added %s for %s", record.maintenance_type, vehicle.vehicle_number)
        return record

    def complete_maintenance(
        self,
        record_id: str,
        completed_on: Optional[date] = None,
        repeat_months: Optional[float] = None,
    ) -> Tuple[MaintenanceRecord, Optional[MaintenanceRecord]]:
        """
        Mark a record completed.

        With repeat_months, also schedule the same work again that many
        months after completion. Returns (completed record, follow-up or None).
        """
        user_id = self._user()
        record = self.maintenance.get(record_id, user_id)
        if record.is_completed:
            raise InvalidEntry(f"{record.maintenance_type} is already completed")
        if repeat_months is not None and not (
            math.isfinite(repeat_months) and repeat_months > 0
        ):
            raise InvalidEntry("Repeat interval must be a positive number of months")

        done_on = completed_on or self.today()
        next_due = calc_due_date(done_on, repeat_months)

        done = self.maintenance.patch(
            record.id, user_id, {"is_completed": True, "completed_date": done_on.isoformat()}
        )
        logger.info("Completed %s on %s", record.maintenance_type, done_on)

        follow_up = None
        if next_due is not None:
            entry = MaintenanceEntry(
                vehicle_id=record.vehicle_id,
                maintenance_type=record.maintenance_type,
                odometer_reading=record.odometer_reading,
                description=record.description,
                due_date=next_due,
            )
            try:
                follow_up = self.maintenance.create(user_id, entry.as_fields())
            except StoreError:
                logger.exception(
                    "Completed %s but could not schedule the next one",
                    record.maintenance_type,
                )
        return done, follow_up

    def delete_maintenance(self, record_id: str) -> None:
        self.maintenance.delete(record_id, self._user())

    def maintenance_due(self, vehicle_id: Optional[str] = None) -> List[MaintenanceDue]:
        """Pending records with a due date, most urgent first."""
        today = self.today()
        due = [
            record.due(today)
            for record in self.list_maintenance(vehicle_id)
            if not record.is_completed and record.due_date
        ]
        return sorted(due, key=lambda d: (d.status.value, d.record.due_on))

    def overdue_maintenance(self) -> List[MaintenanceDue]:
        return [d for d in self.maintenance_due() if d.status == MaintenanceStatus.OVERDUE]

    # -------------------------------------------------------------------------
    # Problems
    # -------------------------------------------------------------------------

    def list_problems(self, vehicle_id: Optional[str] = None) -> List[VehicleProblem]:
        return self.problems.list(self._user(), vehicle_id)

    def get_problem(self, problem_id: str) -> VehicleProblem:
        return self.problems.get(problem_id, self._user())

    def report_problem(self, report: ProblemReport) -> VehicleProblem:
        user_id = self._user()
        fields = report.as_fields()
        vehicle = self.vehicles.get(report.vehicle_id, user_id)
        problem = self.problems.create(user_id, fields)
        logger.info(
            "Reported %s problem on %s: %s",
            problem.priority.value,
            vehicle.vehicle_number,
            problem.problem_title,
        )
        return problem

    def set_problem_status(self, problem_id: str, status: ProblemStatus) -> VehicleProblem:
        problem = self.problems.patch(problem_id, self._user(), {"status": status.value})
        logger.info("Problem %s is now %s", problem.problem_title, status.value)
        return problem

    def delete_problem(self, problem_id: str) -> None:
        self.problems.delete(problem_id, self._user())

    def open_problems(self, vehicle_id: Optional[str] = None) -> List[VehicleProblem]:
        """Open problems, most serious first; newest first within a priority."""
        open_ = [p for p in self.list_problems(vehicle_id) if p.is_open]
        return sorted(open_, key=lambda p: p.priority.rank)

    def critical_problems(self) -> List[VehicleProblem]:
        return [p for p in self.list_problems() if p.is_critical]
