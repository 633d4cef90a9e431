"""Reported vehicle problems and their triage state."""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import InvalidEntry
from .status import ProblemPriority, ProblemStatus


class VehicleProblem:
    """An issue reported against a vehicle."""

    def __init__(
        self,
        id: str,
        user_id: str,
        vehicle_id: str,
        problem_title: str,
        description: Optional[str] = None,
        priority: ProblemPriority = ProblemPriority.MEDIUM,
        status: ProblemStatus = ProblemStatus.OPEN,
        estimated_cost: float = 0,
        created_at: Optional[str] = None,
        updated_at: Optional[str] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.vehicle_id = vehicle_id
        self.problem_title = problem_title
        self.description = description
        self.priority = priority
        self.status = status
        self.estimated_cost = estimated_cost
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def is_open(self) -> bool:
        return self.status == ProblemStatus.OPEN

    @property
    def is_critical(self) -> bool:
        """Open and of critical priority: needs attention before riding."""
        return self.is_open and self.priority == ProblemPriority.CRITICAL


@dataclass
class ProblemReport:
    """User-supplied values for a new problem."""

    vehicle_id: str
    problem_title: str
    description: Optional[str] = None
    priority: ProblemPriority = ProblemPriority.MEDIUM
    estimated_cost: float = 0.0

    def validate(self) -> None:
        if not self.problem_title or not self.problem_title.strip():
            raise InvalidEntry("Please describe the problem")
        if self.description is not None and not isinstance(self.description, str):
            raise InvalidEntry("Description must be text")
        if not math.isfinite(self.estimated_cost) or self.estimated_cost < 0:
            raise InvalidEntry("Estimated cost cannot be negative")

    def as_fields(self) -> Dict[str, Any]:
        self.validate()
        description = (self.description or "").strip()
        return {
            "vehicle_id": self.vehicle_id,
            "problem_title": self.problem_title.strip(),
            "description": description or None,
            "priority": self.priority.value,
            "status": ProblemStatus.OPEN.value,
            "estimated_cost": float(self.estimated_cost),
        }
