"""YAML-backed stores for vehicles, fuel records, maintenance and problems."""

import logging
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml

from .calculation_method import CalculationMethod
from .errors import EntryNotFound, StoreError, VehicleNotFound
from .fuel_record import FuelRecord
from .maintenance import MaintenanceRecord, parse_date
from .notify import ChangeFeed
from .problem import VehicleProblem
from .registration import Registration
from .status import ProblemPriority, ProblemStatus
from .vehicle import Vehicle
from .vehicle_kind import VehicleKind

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

VEHICLE_FIELDS = (
    "vehicle_number",
    "vehicle_type",
    "mileage",
    "tank_capacity",
    "has_reserve_tank",
    "reserve_tank_capacity",
    "current_odometer",
    "current_fuel_level",
    "is_on_reserve",
    "last_full_tank_odo",
    "last_full_tank_date",
    "last_reserve_odo",
    "last_reserve_date",
    "mileage_calculation_method",
)

RECORD_FIELDS = (
    "vehicle_id",
    "odometer_reading",
    "petrol_left",
    "estimated_mileage",
    "is_reserve",
    "distance_traveled",
    "petrol_used",
)

MAINTENANCE_FIELDS = (
    "vehicle_id",
    "maintenance_type",
    "description",
    "cost",
    "odometer_reading",
    "due_date",
    "completed_date",
    "is_completed",
)

PROBLEM_FIELDS = (
    "vehicle_id",
    "problem_title",
    "description",
    "priority",
    "status",
    "estimated_cost",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_timestamp(value: Any) -> Optional[str]:
    """Normalise timestamps; unquoted YAML timestamps load as datetime objects."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _read_rows(filename: Path, key: str) -> List[Dict[str, Any]]:
    """Load the list stored under key. A missing file is an empty store."""
    if not filename.exists():
        return []
    try:
        with open(filename, "r") as fp:
            data = yaml.load(fp, Loader=yaml.SafeLoader)
    except (OSError, yaml.YAMLError) as e:
        raise StoreError(f"Could not read {filename}: {e}") from e

    if data is None:
        return []
    if not isinstance(data, dict) or not isinstance(data.get(key) or [], list):
        raise StoreError(f"{filename} is not a valid store file (expected '{key}' list)")
    return data.get(key) or []


def _write_rows(filename: Path, key: str, rows: List[Dict[str, Any]]) -> None:
    try:
        filename.parent.mkdir(parents=True, exist_ok=True)
        with open(filename, "w") as fp:
            yaml.dump(
                {key: rows},
                fp,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                width=120,
            )
    except (OSError, yaml.YAMLError) as e:
        raise StoreError(f"Could not write {filename}: {e}") from e
    logger.debug("Wrote %d %s to %s", len(rows), key, filename)


def _check_fields(fields: Dict[str, Any], allowed) -> None:
    unknown = sorted(set(fields) - set(allowed))
    if unknown:
        raise StoreError(f"Unknown fields: {', '.join(unknown)}")


def _newest_first(rows: List[Dict[str, Any]], user_id: str) -> List[Dict[str, Any]]:
    """A user's rows, newest first; later appends win ties on created_at."""
    indexed = [(i, r) for i, r in enumerate(rows) if r.get("user_id") == user_id]
    indexed.sort(key=lambda p: (_as_timestamp(p[1].get("created_at")) or "", p[0]), reverse=True)
    return [r for _, r in indexed]


def _vehicle_from_row(row: Dict[str, Any]) -> Vehicle:
    """Parse a stored row into a Vehicle."""
    for name in ("mileage", "tank_capacity"):
        value = row.get(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
            raise StoreError(
                f"Malformed vehicle row {row.get('id')!r}: {name} must be a positive number"
            )
    try:
        return Vehicle(
            id=row["id"],
            user_id=row["user_id"],
            vehicle_number=row["vehicle_number"],
            vehicle_type=VehicleKind(row.get("vehicle_type", "bike")),
            tank_capacity=row["tank_capacity"],
            mileage=row["mileage"],
            has_reserve_tank=bool(row.get("has_reserve_tank")),
            reserve_tank_capacity=row.get("reserve_tank_capacity") or 0,
            current_odometer=row.get("current_odometer") or 0,
            current_fuel_level=row.get("current_fuel_level") or 0,
            is_on_reserve=bool(row.get("is_on_reserve")),
            mileage_calculation_method=CalculationMethod(
                row.get("mileage_calculation_method") or "manual"
            ),
            last_full_tank_odo=row.get("last_full_tank_odo") or 0,
            last_full_tank_date=_as_timestamp(row.get("last_full_tank_date")),
            last_reserve_odo=row.get("last_reserve_odo") or 0,
            last_reserve_date=_as_timestamp(row.get("last_reserve_date")),
            created_at=_as_timestamp(row.get("created_at")),
            updated_at=_as_timestamp(row.get("updated_at")),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise StoreError(f"Malformed vehicle row {row.get('id')!r}: {e}") from e


def _record_from_row(row: Dict[str, Any]) -> FuelRecord:
    """Parse a stored row into a FuelRecord."""
    try:
        return FuelRecord(
            id=row["id"],
            user_id=row["user_id"],
            vehicle_id=row.get("vehicle_id"),
            odometer_reading=row["odometer_reading"],
            petrol_left=row["petrol_left"],
            estimated_mileage=row["estimated_mileage"],
            is_reserve=bool(row.get("is_reserve")),
            distance_traveled=row.get("distance_traveled"),
            petrol_used=row.get("petrol_used"),
            created_at=_as_timestamp(row.get("created_at")),
            updated_at=_as_timestamp(row.get("updated_at")),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise StoreError(f"Malformed fuel record {row.get('id')!r}: {e}") from e


class VehicleStore:
    """Vehicles of all users in one YAML file, always accessed per user."""

    TABLE = "vehicles"

    def __init__(
        self,
        filename: Union[str, Path],
        feed: Optional[ChangeFeed] = None,
        clock: Clock = utc_now,
    ):
        self.filename = Path(filename)
        self.feed = feed
        self.clock = clock

    def _changed(self, user_id: str) -> None:
        if self.feed is not None:
            self.feed.publish(user_id, self.TABLE)

    def list(self, user_id: str) -> List[Vehicle]:
        """All of a user's vehicles, newest registration first."""
        rows = [r for r in _read_rows(self.filename, self.TABLE) if r.get("user_id") == user_id]
        vehicles = [_vehicle_from_row(r) for r in rows]
        return sorted(vehicles, key=lambda v: v.created_at or "", reverse=True)

    def get(self, vehicle_id: str, user_id: str) -> Vehicle:
        for row in _read_rows(self.filename, self.TABLE):
            if row.get("id") == vehicle_id and row.get("user_id") == user_id:
                return _vehicle_from_row(row)
        raise VehicleNotFound(f"Vehicle '{vehicle_id}' not found")

    def find_by_number(self, vehicle_number: str, user_id: str) -> Vehicle:
        """Look up a vehicle by its registration number (case-insensitive)."""
        wanted = vehicle_number.strip().upper()
        for vehicle in self.list(user_id):
            if vehicle.vehicle_number.upper() == wanted:
                return vehicle
        raise VehicleNotFound(f"Vehicle '{vehicle_number}' not found")

    def create(self, user_id: str, registration: Registration) -> Vehicle:
        fields = registration.as_fields()
        rows = _read_rows(self.filename, self.TABLE)
        now = self.clock().isoformat()
        row = {"id": uuid.uuid4().hex, "user_id": user_id}
        row.update(fields)
        row["created_at"] = now
        row["updated_at"] = now
        rows.append(row)
        _write_rows(self.filename, self.TABLE, rows)
        self._changed(user_id)
        return _vehicle_from_row(row)

    def patch(self, vehicle_id: str, user_id: str, fields: Dict[str, Any]) -> None:
        """Overwrite the given fields of one vehicle. Last write wins."""
        _check_fields(fields, VEHICLE_FIELDS)
        rows = _read_rows(self.filename, self.TABLE)
        for row in rows:
            if row.get("id") == vehicle_id and row.get("user_id") == user_id:
                row.update(fields)
                row["updated_at"] = self.clock().isoformat()
                break
        else:
            raise VehicleNotFound(f"Vehicle '{vehicle_id}' not found")
        _write_rows(self.filename, self.TABLE, rows)
        self._changed(user_id)

    def delete(self, vehicle_id: str, user_id: str) -> None:
        rows = _read_rows(self.filename, self.TABLE)
        remaining = [
            r for r in rows
            if not (r.get("id") == vehicle_id and r.get("user_id") == user_id)
        ]
        if len(remaining) == len(rows):
            raise VehicleNotFound(f"Vehicle '{vehicle_id}' not found")
        _write_rows(self.filename, self.TABLE, remaining)
        self._changed(user_id)


class FuelRecordStore:
    """Append-only fuel snapshots in one YAML file, read newest first."""

    TABLE = "records"

    def __init__(
        self,
        filename: Union[str, Path],
        feed: Optional[ChangeFeed] = None,
        clock: Clock = utc_now,
    ):
        self.filename = Path(filename)
        self.feed = feed
        self.clock = clock

    def _changed(self, user_id: str) -> None:
        if self.feed is not None:
            self.feed.publish(user_id, "fuel_records")

    def list(self, user_id: str) -> List[FuelRecord]:
        rows = _read_rows(self.filename, self.TABLE)
        return [_record_from_row(r) for r in _newest_first(rows, user_id)]

    def latest(self, user_id: str) -> Optional[FuelRecord]:
        records = self.list(user_id)
        return records[0] if records else None

    def append(self, user_id: str, fields: Dict[str, Any]) -> FuelRecord:
        _check_fields(fields, RECORD_FIELDS)
        rows = _read_rows(self.filename, self.TABLE)
        now = self.clock().isoformat()
        row = {"id": uuid.uuid4().hex, "user_id": user_id}
        row.update(fields)
        row["created_at"] = now
        row["updated_at"] = now
        rows.append(row)
        _write_rows(self.filename, self.TABLE, rows)
        self._changed(user_id)
        return _record_from_row(row)

    def patch_latest(self, user_id: str, fields: Dict[str, Any]) -> None:
        """Amend the newest record in place."""
        _check_fields(fields, RECORD_FIELDS)
        rows = _read_rows(self.filename, self.TABLE)
        user_rows = _newest_first(rows, user_id)
        if not user_rows:
            raise StoreError("No records to update")
        user_rows[0].update(fields)
        user_rows[0]["updated_at"] = self.clock().isoformat()
        _write_rows(self.filename, self.TABLE, rows)
        self._changed(user_id)


def _as_date(value: Any) -> Optional[str]:
    due = parse_date(value)
    return due.isoformat() if due else None


def _maintenance_from_row(row: Dict[str, Any]) -> MaintenanceRecord:
    """Parse a stored row into a MaintenanceRecord."""
    try:
        return MaintenanceRecord(
            id=row["id"],
            user_id=row["user_id"],
            vehicle_id=row["vehicle_id"],
            maintenance_type=row["maintenance_type"],
            odometer_reading=row.get("odometer_reading") or 0,
            description=row.get("description"),
            cost=row.get("cost") or 0,
            due_date=_as_date(row.get("due_date")),
            completed_date=_as_date(row.get("completed_date")),
            is_completed=bool(row.get("is_completed")),
            created_at=_as_timestamp(row.get("created_at")),
            updated_at=_as_timestamp(row.get("updated_at")),
        )
    except (KeyError, ValueError, TypeError, OverflowError) as e:
        raise StoreError(f"Malformed maintenance record {row.get('id')!r}: {e}") from e


def _problem_from_row(row: Dict[str, Any]) -> VehicleProblem:
    """Parse a stored row into a VehicleProblem."""
    try:
        return VehicleProblem(
            id=row["id"],
            user_id=row["user_id"],
            vehicle_id=row["vehicle_id"],
            problem_title=row["problem_title"],
            description=row.get("description"),
            priority=ProblemPriority(row.get("priority") or "medium"),
            status=ProblemStatus(row.get("status") or "open"),
            estimated_cost=row.get("estimated_cost") or 0,
            created_at=_as_timestamp(row.get("created_at")),
            updated_at=_as_timestamp(row.get("updated_at")),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise StoreError(f"Malformed problem {row.get('id')!r}: {e}") from e


class EntryStore:
    """
    Per-user entries attached to vehicles, kept in one YAML file.

    Subclasses name the file key, the change feed table, the writable
    fields and the row parser. Entries are addressed by id or by a unique
    id prefix of at least MIN_PREFIX characters, so the CLI can show short ids.
    """

    TABLE = ""
    FEED_TABLE = ""
    FIELDS: tuple = ()
    LABEL = "Entry"
    MIN_PREFIX = 4

    def __init__(
        self,
        filename: Union[str, Path],
        feed: Optional[ChangeFeed] = None,
        clock: Clock = utc_now,
    ):
        self.filename = Path(filename)
        self.feed = feed
        self.clock = clock

    def _parse(self, row: Dict[str, Any]):
        raise NotImplementedError

    def _changed(self, user_id: str) -> None:
        if self.feed is not None:
            self.feed.publish(user_id, self.FEED_TABLE)

    def _find_row(self, rows: List[Dict[str, Any]], entry_id: str, user_id: str) -> Dict[str, Any]:
        user_rows = [r for r in rows if r.get("user_id") == user_id]
        for row in user_rows:
            if row.get("id") == entry_id:
                return row
        if len(entry_id) >= self.MIN_PREFIX:
            matches = [r for r in user_rows if str(r.get("id", "")).startswith(entry_id)]
            if len(matches) == 1:
                return matches[0]
            if len(matches) > 1:
                raise EntryNotFound(f"{self.LABEL} id '{entry_id}' is ambiguous")
        raise EntryNotFound(f"{self.LABEL} '{entry_id}' not found")

    def list(self, user_id: str, vehicle_id: Optional[str] = None) -> List[Any]:
        """A user's entries, newest first, optionally for one vehicle."""
        rows = _newest_first(_read_rows(self.filename, self.TABLE), user_id)
        if vehicle_id is not None:
            rows = [r for r in rows if r.get("vehicle_id") == vehicle_id]
        return [self._parse(r) for r in rows]

    def get(self, entry_id: str, user_id: str):
        rows = _read_rows(self.filename, self.TABLE)
        return self._parse(self._find_row(rows, entry_id, user_id))

    def create(self, user_id: str, fields: Dict[str, Any]):
        _check_fields(fields, self.FIELDS)
        rows = _read_rows(self.filename, self.TABLE)
        now = self.clock().isoformat()
        row = {"id": uuid.uuid4().hex, "user_id": user_id}
        row.update(fields)
        row["created_at"] = now
        row["updated_at"] = now
        rows.append(row)
        _write_rows(self.filename, self.TABLE, rows)
        self._changed(user_id)
        return self._parse(row)

    def patch(self, entry_id: str, user_id: str, fields: Dict[str, Any]):
        """Overwrite the given fields of one entry and return it."""
        _check_fields(fields, self.FIELDS)
        rows = _read_rows(self.filename, self.TABLE)
        row = self._find_row(rows, entry_id, user_id)
        row.update(fields)
        row["updated_at"] = self.clock().isoformat()
        _write_rows(self.filename, self.TABLE, rows)
        self._changed(user_id)
        return self._parse(row)

    def delete(self, entry_id: str, user_id: str) -> None:
        rows = _read_rows(self.filename, self.TABLE)
        row = self._find_row(rows, entry_id, user_id)
        _write_rows(self.filename, self.TABLE, [r for r in rows if r is not row])
        self._changed(user_id)


class MaintenanceStore(EntryStore):
    TABLE = "maintenance"
    FEED_TABLE = "maintenance_records"
    FIELDS = MAINTENANCE_FIELDS
    LABEL = "Maintenance record"

    def _parse(self, row: Dict[str, Any]) -> MaintenanceRecord:
        return _maintenance_from_row(row)


class ProblemStore(EntryStore):
    TABLE = "problems"
    FEED_TABLE = "vehicle_problems"
    FIELDS = PROBLEM_FIELDS
    LABEL = "Problem"

    def _parse(self, row: Dict[str, Any]) -> VehicleProblem:
        return _problem_from_row(row)
