"""Maintenance records: scheduled and completed work on a vehicle."""

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from dateutil.parser import isoparse

from .calculations import check_due_status
from .errors import InvalidEntry
from .status import MaintenanceStatus

# Pending work due within this many days counts as due soon
DUE_SOON_DAYS = 14

DateLike = Union[date, str, None]


def parse_date(value: DateLike) -> Optional[date]:
    """Parse a stored or typed date; raises ValueError on garbage."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(str(value)).date()


class MaintenanceRecord:
    """One piece of maintenance work, pending until marked completed."""

    def __init__(
        self,
        id: str,
        user_id: str,
        vehicle_id: str,
        maintenance_type: str,
        odometer_reading: float = 0,
        description: Optional[str] = None,
        cost: float = 0,
        due_date: Optional[str] = None,
        completed_date: Optional[str] = None,
        is_completed: bool = False,
        created_at: Optional[str] = None,
        updated_at: Optional[str] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.vehicle_id = vehicle_id
        self.maintenance_type = maintenance_type
        self.odometer_reading = odometer_reading
        self.description = description
        self.cost = cost
        self.due_date = due_date
        self.completed_date = completed_date
        self.is_completed = is_completed
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def due_on(self) -> Optional[date]:
        return parse_date(self.due_date)

    def status(self, today: date) -> MaintenanceStatus:
        if self.is_completed:
            return MaintenanceStatus.COMPLETED
        due = self.due_on
        if due is None:
            return MaintenanceStatus.UNSCHEDULED
        return check_due_status(today, due, DUE_SOON_DAYS)

    def days_remaining(self, today: date) -> Optional[int]:
        """Days until due (negative when overdue); None when done or undated."""
        due = self.due_on
        if self.is_completed or due is None:
            return None
        return (due - today).days

    def due(self, today: date) -> "MaintenanceDue":
        return MaintenanceDue(
            record=self,
            status=self.status(today),
            days_remaining=self.days_remaining(today),
        )


@dataclass
class MaintenanceDue:
    """Calculated due information for a maintenance record."""

    record: MaintenanceRecord
    status: MaintenanceStatus
    days_remaining: Optional[int] = None

    @property
    def is_due(self) -> bool:
        return self.status in (MaintenanceStatus.OVERDUE, MaintenanceStatus.DUE_SOON)


@dataclass
class MaintenanceEntry:
    """User-supplied values for a new maintenance record."""

    vehicle_id: str
    maintenance_type: str
    odometer_reading: float = 0
    description: Optional[str] = None
    cost: float = 0.0
    due_date: DateLike = None

    def validate(self) -> None:
        """Raise InvalidEntry describing the first problem found."""
        if not self.maintenance_type or not self.maintenance_type.strip():
            raise InvalidEntry("Please enter a maintenance type")
        if self.description is not None and not isinstance(self.description, str):
            raise InvalidEntry("Description must be text")
        for name in ("odometer_reading", "cost"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidEntry(f"{name} must be a number")
        if self.cost < 0:
            raise InvalidEntry("Cost cannot be negative")
        if self.odometer_reading < 0:
            raise InvalidEntry("Odometer reading cannot be negative")
        try:
            parse_date(self.due_date)
        except (ValueError, OverflowError):
            raise InvalidEntry(f"Invalid due date {self.due_date!r}, expected YYYY-MM-DD")

    def as_fields(self) -> Dict[str, Any]:
        self.validate()
        due = parse_date(self.due_date)
        description = (self.description or "").strip()
        return {
            "vehicle_id": self.vehicle_id,
            "maintenance_type": self.maintenance_type.strip(),
            "description": description or None,
            "cost": float(self.cost),
            "odometer_reading": int(self.odometer_reading),
            "due_date": due.isoformat() if due else None,
            "completed_date": None,
            "is_completed": False,
        }
