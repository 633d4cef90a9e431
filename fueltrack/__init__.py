"""
Vehicle fuel tracking.

This package provides models and calculations for tracking fuel:
- VehicleKind, CalculationMethod, FuelState, FuelStatus: enums
- Vehicle: capacity, live fuel state and mileage estimate
- FuelRecord: point-in-time fuel snapshots
- VehiclePatch / apply_patch: partial updates and the reducer applying them
- estimator: the four fuel events (add fuel, odometer, reserve, tank full)
- VehicleStore / FuelRecordStore: YAML-backed stores scoped per user
- FuelTracker: runs fuel events for a session against the stores
- MaintenanceRecord / VehicleProblem: upkeep entries attached to vehicles
- UpkeepTracker: maintenance due dates and problem triage for a session
"""

from .errors import (
    FuelTrackError,
    InvalidAmount,
    NonMonotonicOdometer,
    InvalidVehicle,
    Unauthenticated,
    VehicleNotFound,
    StoreError,
    InvalidEntry,
    EntryNotFound,
)
from .status import (
    FuelState,
    FuelStatus,
    MaintenanceStatus,
    ProblemPriority,
    ProblemStatus,
)
from .vehicle_kind import VehicleKind
from .calculation_method import CalculationMethod
from .vehicle import Vehicle
from .fuel_record import FuelRecord
from .patch import VehiclePatch, apply_patch
from .registration import Registration
from .estimator import (
    Estimate,
    add_fuel,
    update_odometer,
    set_reserve,
    tank_full,
    preview_odometer,
    preview_tank_full,
)
from .notify import ChangeFeed
from .session import Session
from .maintenance import MaintenanceDue, MaintenanceEntry, MaintenanceRecord
from .problem import ProblemReport, VehicleProblem
from .loader import VehicleStore, FuelRecordStore, MaintenanceStore, ProblemStore
from .tracker import FuelTracker, Outcome
from .upkeep import UpkeepTracker
from .config import Config

__all__ = [
    "FuelTrackError",
    "InvalidAmount",
    "NonMonotonicOdometer",
    "InvalidVehicle",
    "Unauthenticated",
    "VehicleNotFound",
    "StoreError",
    "InvalidEntry",
    "EntryNotFound",
    "FuelState",
    "FuelStatus",
    "MaintenanceStatus",
    "ProblemPriority",
    "ProblemStatus",
    "VehicleKind",
    "CalculationMethod",
    "Vehicle",
    "FuelRecord",
    "VehiclePatch",
    "apply_patch",
    "Registration",
    "Estimate",
    "add_fuel",
    "update_odometer",
    "set_reserve",
    "tank_full",
    "preview_odometer",
    "preview_tank_full",
    "ChangeFeed",
    "Session",
    "VehicleStore",
    "FuelRecordStore",
    "MaintenanceStore",
    "ProblemStore",
    "MaintenanceRecord",
    "MaintenanceEntry",
    "MaintenanceDue",
    "VehicleProblem",
    "ProblemReport",
    "FuelTracker",
    "Outcome",
    "UpkeepTracker",
    "Config",
]
