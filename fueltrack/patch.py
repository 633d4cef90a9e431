"""VehiclePatch dataclass and the reducer that applies it to a Vehicle."""

import copy
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional

from .calculation_method import CalculationMethod
from .vehicle import Vehicle


@dataclass
class VehiclePatch:
    """Partial update produced by a fuel event. None means "leave unchanged"."""

    current_odometer: Optional[float] = None
    current_fuel_level: Optional[float] = None
    is_on_reserve: Optional[bool] = None
    mileage: Optional[float] = None
    mileage_calculation_method: Optional[CalculationMethod] = None
    last_full_tank_odo: Optional[float] = None
    last_full_tank_date: Optional[str] = None
    last_reserve_odo: Optional[float] = None
    last_reserve_date: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        """Fields this patch sets, keyed by Vehicle attribute name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def as_fields(self) -> Dict[str, Any]:
        """Fields this patch sets, in store format (enums as their values)."""
        return {
            key: value.value if isinstance(value, Enum) else value
            for key, value in self.changes().items()
        }

    @property
    def is_empty(self) -> bool:
        return not self.changes()


def apply_patch(vehicle: Vehicle, patch: VehiclePatch) -> Vehicle:
    """Return a copy of vehicle with the patch applied. The input is not modified."""
    updated = copy.copy(vehicle)
    for key, value in patch.changes().items():
        setattr(updated, key, value)
    return updated
