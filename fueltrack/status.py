"""Enums for fuel level, maintenance urgency and problem tracking."""

from enum import Enum


class FuelState(Enum):
    """Which tank the vehicle is drawing from."""

    NORMAL = "normal"
    RESERVE = "reserve"


class FuelStatus(Enum):
    """Fuel level categories. Lower value = more urgent."""

    CRITICAL = 1  # Below 10% of tank capacity
    LOW = 2  # Below 20% of tank capacity
    OK = 3


class MaintenanceStatus(Enum):
    """Maintenance urgency categories. Lower value = more urgent."""

    OVERDUE = 1
    DUE_SOON = 2
    SCHEDULED = 3
    UNSCHEDULED = 4  # Pending with no due date
    COMPLETED = 5


class ProblemPriority(Enum):
    """How serious a reported problem is, most serious first."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return list(ProblemPriority).index(self)


class ProblemStatus(Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    IGNORED = "ignored"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").upper()
