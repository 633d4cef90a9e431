#!/usr/bin/env python3
"""
Unified CLI for vehicle fuel tracking.

Commands:
  register     - Register a new vehicle
  vehicles     - List vehicles with fuel level, range and mileage
  status       - Show one vehicle in detail
  add-fuel     - Top up fuel without an odometer reading
  update-odo   - Record a new odometer reading
  reserve      - Record switching to the reserve tank
  tank-full    - Record filling the tank to the brim
  history      - View fuel record history
  delete       - Remove a vehicle

  maint-add      - Add a maintenance record
  maint          - List maintenance records
  maint-due      - Show overdue and upcoming maintenance
  maint-done     - Mark maintenance completed, optionally scheduling the next
  maint-delete   - Remove a maintenance record
  problem-add    - Report a vehicle problem
  problems       - List open (or all) problems
  problem-status - Move a problem to in_progress, resolved, ignored or open
  problem-delete - Remove a problem
"""

import argparse
import logging
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta
from tabulate import tabulate

from fueltrack import (
    ChangeFeed,
    Config,
    FuelRecord,
    FuelRecordStore,
    FuelTracker,
    FuelTrackError,
    FuelStatus,
    InvalidEntry,
    MaintenanceEntry,
    MaintenanceRecord,
    MaintenanceStatus,
    MaintenanceStore,
    Outcome,
    ProblemPriority,
    ProblemReport,
    ProblemStatus,
    ProblemStore,
    Registration,
    Session,
    Vehicle,
    VehicleKind,
    VehicleProblem,
    VehicleStore,
    UpkeepTracker,
    preview_tank_full,
)
from fueltrack.maintenance import parse_date

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format a distance for display."""
    return f"{km:,.0f} km" if km is not None else "-"


def format_liters(liters: Optional[float]) -> str:
    """Format a fuel amount for display."""
    return f"{liters:.1f}L" if liters is not None else "-"


def format_mileage(mileage: Optional[float]) -> str:
    return f"{mileage:.2f} km/L" if mileage is not None else "-"


def format_since(timestamp: Optional[str], now: Optional[datetime] = None) -> str:
    """Format how long ago a timestamp was (e.g., '2mo 5d ago', 'today')."""
    if not timestamp:
        return "-"
    then = isoparse(timestamp)
    now = now or datetime.now(timezone.utc)
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    delta = relativedelta(now, then)
    months = delta.years * 12 + delta.months
    if months > 0:
        return f"{months}mo {delta.days}d ago"
    if delta.days > 0:
        return f"{delta.days}d ago"
    return "today"


def format_event(odo: float, timestamp: Optional[str], now: Optional[datetime] = None) -> str:
    """Format a last full-tank / reserve event as 'odo @ when'."""
    if not odo:
        return "-"
    return f"{odo:,.0f} km @ {format_since(timestamp, now)}"


def fuel_flag(vehicle: Vehicle) -> str:
    """Short warning marker for the vehicles table."""
    if vehicle.is_on_reserve:
        return "RESERVE"
    if vehicle.is_low_fuel or vehicle.fuel_status == FuelStatus.CRITICAL:
        return "LOW FUEL"
    if vehicle.fuel_status == FuelStatus.LOW:
        return "low"
    return ""


def make_vehicle_table(vehicles: List[Vehicle]) -> List[List[str]]:
    """Convert vehicles to table rows."""
    rows = []
    for v in vehicles:
        rows.append(
            [
                v.vehicle_number,
                v.vehicle_type.label,
                f"{v.current_odometer:,.0f}",
                f"{format_liters(v.current_fuel_level)} / {format_liters(v.tank_capacity)}",
                format_km(v.range_km),
                format_mileage(v.mileage),
                v.mileage_calculation_method.label,
                fuel_flag(v),
            ]
        )
    return rows


def make_history_table(records: List[FuelRecord]) -> List[List[str]]:
    """Convert fuel records (newest first) to table rows with distance since previous."""
    rows = []
    for i, record in enumerate(records):
        previous = records[i + 1] if i + 1 < len(records) else None
        distance = record.odometer_reading - previous.odometer_reading if previous else None
        rows.append(
            [
                (record.created_at or "-")[:16].replace("T", " "),
                f"{record.odometer_reading:,.0f}",
                format_liters(record.petrol_left),
                format_mileage(record.estimated_mileage),
                format_km(record.range_km),
                format_km(distance) if distance and distance > 0 else "-",
                "yes" if record.is_reserve else "",
            ]
        )
    return rows


def print_outcome(outcome: Outcome) -> None:
    """Print the result of a fuel event."""
    v = outcome.vehicle
    print(f"Vehicle: {v.name}")
    print(f"  Odometer: {v.current_odometer:,.0f} km")
    print(f"  Fuel:     {format_liters(v.current_fuel_level)} ({v.fuel_percentage:.0f}%)")
    print(f"  Mileage:  {format_mileage(v.mileage)} ({v.mileage_calculation_method.label})")
    print(f"  Range:    {format_km(v.range_km)}")
    if outcome.estimate.recalculated:
        print(f"  New sample: {format_mileage(outcome.estimate.sample_mileage)}")
    for warning in outcome.warnings:
        print(f"Warning: {warning}")
    print()
    if outcome.saved:
        print("Saved.")
    else:
        print("(dry run - no changes made)")


# =============================================================================
# Commands
# =============================================================================


def cmd_register(tracker: FuelTracker, args) -> int:
    """Register a new vehicle."""
    registration = Registration(
        vehicle_number=args.vehicle_number,
        vehicle_type=VehicleKind(args.type),
        mileage=args.mileage,
        tank_capacity=args.tank,
        has_reserve_tank=not args.no_reserve_tank,
        reserve_tank_capacity=0 if args.no_reserve_tank else args.reserve,
        current_odometer=args.odometer,
        current_fuel_level=args.fuel,
    )
    vehicle = tracker.register(registration)
    print(f"Registered {vehicle.name}")
    for warning in registration.warnings():
        print(f"Warning: {warning}")
    return 0


def cmd_vehicles(tracker: FuelTracker, args) -> int:
    """List vehicles."""
    vehicles = tracker.list_vehicles()
    if not vehicles:
        print("No vehicles registered.")
        return 0
    headers = ["Vehicle", "Type", "Odometer", "Fuel", "Range", "Mileage", "Method", ""]
    print(tabulate(make_vehicle_table(vehicles), headers=headers, tablefmt="simple"))
    return 0


def cmd_status(tracker: FuelTracker, args) -> int:
    """Show one vehicle in detail."""
    v = tracker.find_vehicle(args.vehicle_number)
    print(f"Vehicle: {v.name}")
    print(f"Odometer: {v.current_odometer:,.0f} km")
    print(
        f"Fuel: {format_liters(v.current_fuel_level)} of {format_liters(v.tank_capacity)} "
        f"({v.fuel_percentage:.0f}%, {v.fuel_state.value})"
    )
    if v.has_reserve_tank:
        print(f"Reserve tank: {format_liters(v.reserve_tank_capacity)}")
    print(f"Mileage: {format_mileage(v.mileage)} ({v.mileage_calculation_method.label})")
    print(f"Range: {format_km(v.range_km)}")
    print(f"Last full tank: {format_event(v.last_full_tank_odo, v.last_full_tank_date)}")
    print(f"Last reserve: {format_event(v.last_reserve_odo, v.last_reserve_date)}")
    if v.is_low_fuel:
        print()
        print(f"LOW FUEL: {format_km(v.range_km)} range remaining. Consider refueling soon.")
    return 0


def cmd_add_fuel(tracker: FuelTracker, args) -> int:
    """Top up fuel."""
    v = tracker.find_vehicle(args.vehicle_number)
    print_outcome(tracker.add_fuel(v.id, args.liters, dry_run=args.dry_run))
    return 0


def cmd_update_odo(tracker: FuelTracker, args) -> int:
    """Record a new odometer reading."""
    v = tracker.find_vehicle(args.vehicle_number)
    print_outcome(tracker.update_odometer(v.id, args.km, dry_run=args.dry_run))
    return 0


def cmd_reserve(tracker: FuelTracker, args) -> int:
    """Record switching to reserve."""
    v = tracker.find_vehicle(args.vehicle_number)
    print_outcome(tracker.set_reserve(v.id, args.km, dry_run=args.dry_run))
    return 0


def cmd_tank_full(tracker: FuelTracker, args) -> int:
    """Record a full tank."""
    v = tracker.find_vehicle(args.vehicle_number)
    preview = preview_tank_full(v, args.km)
    if preview is not None:
        print(
            f"Full-to-full: {format_km(preview.distance)} on "
            f"{format_liters(preview.fuel_used)} = {format_mileage(preview.sample_mileage)}"
        )
    print_outcome(tracker.tank_full(v.id, args.km, args.liters, dry_run=args.dry_run))
    return 0


def cmd_history(tracker: FuelTracker, args) -> int:
    """View fuel record history."""
    records = tracker.list_records()
    if not records:
        print("No fuel records found.")
        return 0
    shown = records[: args.limit] if args.limit else records
    # Keep one extra record so the oldest shown row still gets its distance
    rows = make_history_table(records[: len(shown) + 1])[: len(shown)]
    headers = ["When", "Odometer", "Fuel", "Mileage", "Range", "Distance", "Reserve"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_delete(tracker: FuelTracker, args) -> int:
    """Remove a vehicle."""
    v = tracker.find_vehicle(args.vehicle_number)
    if args.dry_run:
        print(f"Would delete {v.name}")
        print("(dry run - no changes made)")
        return 0
    tracker.delete_vehicle(v.id)
    print(f"Deleted {v.name}")
    return 0


COMMANDS = {
    "register": cmd_register,
    "vehicles": cmd_vehicles,
    "status": cmd_status,
    "add-fuel": cmd_add_fuel,
    "update-odo": cmd_update_odo,
    "reserve": cmd_reserve,
    "tank-full": cmd_tank_full,
    "history": cmd_history,
    "delete": cmd_delete,
}


# =============================================================================
# Maintenance and problems
# =============================================================================


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"{cost:,.2f}" if cost else "-"


def format_days(days: Optional[int]) -> str:
    """Format days until due (e.g., 'in 5d', '3d overdue', 'today')."""
    if days is None:
        return "-"
    if days < 0:
        return f"{-days}d overdue"
    if days == 0:
        return "today"
    return f"in {days}d"


def status_label(status: MaintenanceStatus) -> str:
    return status.name.replace("_", " ").lower()


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def make_maintenance_table(
    records: List[MaintenanceRecord], numbers: Dict[str, str], today: date
) -> List[List[str]]:
    """Convert maintenance records to table rows."""
    rows = []
    for r in records:
        rows.append(
            [
                r.id[:8],
                numbers.get(r.vehicle_id, "?"),
                truncate(r.maintenance_type),
                r.due_date or "-",
                status_label(r.status(today)),
                format_days(r.days_remaining(today)),
                f"{r.odometer_reading:,.0f}",
                format_cost(r.cost),
            ]
        )
    return rows


def make_problem_table(
    problems: List[VehicleProblem], numbers: Dict[str, str]
) -> List[List[str]]:
    """Convert problems to table rows."""
    rows = []
    for p in problems:
        rows.append(
            [
                p.id[:8],
                numbers.get(p.vehicle_id, "?"),
                truncate(p.problem_title),
                p.priority.value,
                p.status.label,
                format_cost(p.estimated_cost),
            ]
        )
    return rows


def vehicle_filter(upkeep: UpkeepTracker, vehicle_number: Optional[str]) -> Optional[str]:
    if vehicle_number is None:
        return None
    return upkeep.find_vehicle(vehicle_number).id


def cmd_maint_add(upkeep: UpkeepTracker, args) -> int:
    """Add a maintenance record."""
    v = upkeep.find_vehicle(args.vehicle_number)
    entry = MaintenanceEntry(
        vehicle_id=v.id,
        maintenance_type=args.maintenance_type,
        odometer_reading=v.current_odometer if args.odometer is None else args.odometer,
        description=args.description,
        cost=args.cost,
        due_date=args.due,
    )
    record = upkeep.add_maintenance(entry)
    print(f"Added {record.maintenance_type} for {v.vehicle_number} ({record.id[:8]})")
    if record.due_date:
        print(f"Due: {record.due_date}")
    return 0


def cmd_maint(upkeep: UpkeepTracker, args) -> int:
    """List maintenance records."""
    records = upkeep.list_maintenance(vehicle_filter(upkeep, args.vehicle_number))
    if args.pending:
        records = [r for r in records if not r.is_completed]
    if not records:
        print("No maintenance records found.")
        return 0
    headers = ["ID", "Vehicle", "Type", "Due", "Status", "Remaining", "Odometer", "Cost"]
    rows = make_maintenance_table(records, upkeep.vehicle_numbers(), upkeep.today())
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_maint_due(upkeep: UpkeepTracker, args) -> int:
    """Show overdue and upcoming maintenance."""
    due = upkeep.maintenance_due(vehicle_filter(upkeep, args.vehicle_number))
    if not due:
        print("No scheduled maintenance.")
        return 0

    today = upkeep.today()
    numbers = upkeep.vehicle_numbers()
    headers = ["ID", "Vehicle", "Type", "Due", "Status", "Remaining", "Odometer", "Cost"]
    sections = [
        ("OVERDUE:", MaintenanceStatus.OVERDUE),
        ("DUE SOON:", MaintenanceStatus.DUE_SOON),
        ("SCHEDULED:", MaintenanceStatus.SCHEDULED),
    ]
    for title, status in sections:
        records = [d.record for d in due if d.status == status]
        if records:
            print(title)
            rows = make_maintenance_table(records, numbers, today)
            print(tabulate(rows, headers=headers, tablefmt="simple"))
            print()
    return 0


def cmd_maint_done(upkeep: UpkeepTracker, args) -> int:
    """Mark maintenance completed."""
    try:
        completed_on = parse_date(args.date)
    except (ValueError, OverflowError):
        raise InvalidEntry(f"Invalid date {args.date!r}, expected YYYY-MM-DD")
    done, follow_up = upkeep.complete_maintenance(
        args.record_id, completed_on=completed_on, repeat_months=args.repeat_months
    )
    print(f"Completed {done.maintenance_type} on {done.completed_date}")
    if follow_up is not None:
        print(f"Next {follow_up.maintenance_type} due {follow_up.due_date} ({follow_up.id[:8]})")
    elif args.repeat_months is not None:
        print("Warning: could not schedule the next one")
    return 0


def cmd_maint_delete(upkeep: UpkeepTracker, args) -> int:
    """Remove a maintenance record."""
    record = upkeep.get_maintenance(args.record_id)
    upkeep.delete_maintenance(record.id)
    print(f"Deleted {record.maintenance_type} ({record.id[:8]})")
    return 0


def cmd_problem_add(upkeep: UpkeepTracker, args) -> int:
    """Report a vehicle problem."""
    v = upkeep.find_vehicle(args.vehicle_number)
    report = ProblemReport(
        vehicle_id=v.id,
        problem_title=args.title,
        description=args.description,
        priority=ProblemPriority(args.priority),
        estimated_cost=args.cost,
    )
    problem = upkeep.report_problem(report)
    print(f"Reported {problem.priority.value} problem on {v.vehicle_number} ({problem.id[:8]})")
    if problem.is_critical:
        print("CRITICAL: fix this before riding.")
    return 0


def cmd_problems(upkeep: UpkeepTracker, args) -> int:
    """List reported problems."""
    vehicle_id = vehicle_filter(upkeep, args.vehicle_number)
    if args.all:
        problems = upkeep.list_problems(vehicle_id)
    else:
        problems = upkeep.open_problems(vehicle_id)
    if not problems:
        print("No problems found." if args.all else "No open problems.")
        return 0
    headers = ["ID", "Vehicle", "Problem", "Priority", "Status", "Est. Cost"]
    rows = make_problem_table(problems, upkeep.vehicle_numbers())
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_problem_status(upkeep: UpkeepTracker, args) -> int:
    """Move a problem to a new status."""
    problem = upkeep.set_problem_status(args.problem_id, ProblemStatus(args.status))
    print(f"{problem.problem_title}: {problem.status.label}")
    return 0


def cmd_problem_delete(upkeep: UpkeepTracker, args) -> int:
    """Remove a problem."""
    problem = upkeep.get_problem(args.problem_id)
    upkeep.delete_problem(problem.id)
    print(f"Deleted problem {problem.problem_title} ({problem.id[:8]})")
    return 0


UPKEEP_COMMANDS = {
    "maint-add": cmd_maint_add,
    "maint": cmd_maint,
    "maint-due": cmd_maint_due,
    "maint-done": cmd_maint_done,
    "maint-delete": cmd_maint_delete,
    "problem-add": cmd_problem_add,
    "problems": cmd_problems,
    "problem-status": cmd_problem_status,
    "problem-delete": cmd_problem_delete,
}


# =============================================================================
# Main
# =============================================================================


def build_tracker(config: Config, feed: Optional[ChangeFeed] = None) -> FuelTracker:
    feed = feed or ChangeFeed()
    return FuelTracker(
        session=Session(config.user),
        vehicles=VehicleStore(config.vehicles_file, feed=feed),
        records=FuelRecordStore(config.records_file, feed=feed),
    )


def build_upkeep(config: Config, feed: Optional[ChangeFeed] = None) -> UpkeepTracker:
    feed = feed or ChangeFeed()
    return UpkeepTracker(
        session=Session(config.user),
        vehicles=VehicleStore(config.vehicles_file, feed=feed),
        maintenance=MaintenanceStore(config.maintenance_file, feed=feed),
        problems=ProblemStore(config.problems_file, feed=feed),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle fuel tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --user me register KA01AB1234 --type bike --mileage 40 --tank 12
  %(prog)s --user me vehicles
  %(prog)s --user me update-odo KA01AB1234 15230
  %(prog)s --user me reserve KA01AB1234 15410
  %(prog)s --user me tank-full KA01AB1234 15420 10.5
  %(prog)s --user me history --limit 10
  %(prog)s --user me maint-add KA01AB1234 "Oil change" --due 2025-06-01 --cost 450
  %(prog)s --user me maint-due
  %(prog)s --user me maint-done 3f2a --repeat-months 6
  %(prog)s --user me problem-add KA01AB1234 "Brake squeal" --priority high
""",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding the store files (default: $FUELTRACK_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--user",
        type=str,
        help="User id to act as (default: $FUELTRACK_USER)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Register subcommand
    register_parser = subparsers.add_parser("register", help="Register a new vehicle")
    register_parser.add_argument("vehicle_number", type=str, help="Registration number")
    register_parser.add_argument(
        "--type",
        choices=[k.value for k in VehicleKind],
        default=VehicleKind.BIKE.value,
        help="Vehicle type (default: bike)",
    )
    register_parser.add_argument(
        "--mileage", type=float, default=15.0, help="Initial mileage in km/L (default: 15)"
    )
    register_parser.add_argument(
        "--tank", type=float, default=15.0, help="Tank capacity in liters (default: 15)"
    )
    register_parser.add_argument(
        "--reserve", type=float, default=1.0, help="Reserve tank capacity in liters (default: 1)"
    )
    register_parser.add_argument(
        "--no-reserve-tank", action="store_true", help="Vehicle has no reserve tank"
    )
    register_parser.add_argument(
        "--odometer", type=float, default=0, help="Current odometer reading in km"
    )
    register_parser.add_argument(
        "--fuel", type=float, default=0, help="Current fuel level in liters"
    )

    subparsers.add_parser("vehicles", help="List vehicles")

    status_parser = subparsers.add_parser("status", help="Show one vehicle in detail")
    status_parser.add_argument("vehicle_number", type=str)

    add_fuel_parser = subparsers.add_parser("add-fuel", help="Top up fuel")
    add_fuel_parser.add_argument("vehicle_number", type=str)
    add_fuel_parser.add_argument("liters", type=float, help="Liters added (max 20)")

    update_odo_parser = subparsers.add_parser(
        "update-odo", help="Record a new odometer reading"
    )
    update_odo_parser.add_argument("vehicle_number", type=str)
    update_odo_parser.add_argument("km", type=float, help="New odometer reading")

    reserve_parser = subparsers.add_parser(
        "reserve", help="Record switching to the reserve tank"
    )
    reserve_parser.add_argument("vehicle_number", type=str)
    reserve_parser.add_argument("km", type=float, help="Odometer reading now")

    tank_full_parser = subparsers.add_parser("tank-full", help="Record a full tank")
    tank_full_parser.add_argument("vehicle_number", type=str)
    tank_full_parser.add_argument("km", type=float, help="Odometer reading now")
    tank_full_parser.add_argument("liters", type=float, help="Liters added")

    for event_parser in (add_fuel_parser, update_odo_parser, reserve_parser, tank_full_parser):
        event_parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show the result without saving",
        )

    history_parser = subparsers.add_parser("history", help="View fuel record history")
    history_parser.add_argument(
        "--limit", type=int, help="Show only the N most recent records"
    )

    delete_parser = subparsers.add_parser("delete", help="Remove a vehicle")
    delete_parser.add_argument("vehicle_number", type=str)
    delete_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be deleted"
    )

    # Maintenance subcommands
    maint_add_parser = subparsers.add_parser("maint-add", help="Add a maintenance record")
    maint_add_parser.add_argument("vehicle_number", type=str)
    maint_add_parser.add_argument(
        "maintenance_type", type=str, help="What was or will be done (e.g., 'Oil change')"
    )
    maint_add_parser.add_argument("--description", type=str, help="Notes")
    maint_add_parser.add_argument("--cost", type=float, default=0.0, help="Cost")
    maint_add_parser.add_argument(
        "--odometer", type=float, help="Odometer reading (default: vehicle's current)"
    )
    maint_add_parser.add_argument("--due", type=str, help="Due date (YYYY-MM-DD)")

    maint_parser = subparsers.add_parser("maint", help="List maintenance records")
    maint_parser.add_argument("vehicle_number", type=str, nargs="?")
    maint_parser.add_argument(
        "--pending", action="store_true", help="Hide completed records"
    )

    maint_due_parser = subparsers.add_parser(
        "maint-due", help="Show overdue and upcoming maintenance"
    )
    maint_due_parser.add_argument("vehicle_number", type=str, nargs="?")

    maint_done_parser = subparsers.add_parser(
        "maint-done", help="Mark maintenance completed"
    )
    maint_done_parser.add_argument("record_id", type=str, help="Record id or id prefix")
    maint_done_parser.add_argument(
        "--date", type=str, help="Completion date (YYYY-MM-DD, default: today)"
    )
    maint_done_parser.add_argument(
        "--repeat-months",
        type=float,
        help="Schedule the same work again this many months after completion",
    )

    maint_delete_parser = subparsers.add_parser(
        "maint-delete", help="Remove a maintenance record"
    )
    maint_delete_parser.add_argument("record_id", type=str, help="Record id or id prefix")

    # Problem subcommands
    problem_add_parser = subparsers.add_parser("problem-add", help="Report a vehicle problem")
    problem_add_parser.add_argument("vehicle_number", type=str)
    problem_add_parser.add_argument("title", type=str, help="Short problem title")
    problem_add_parser.add_argument(
        "--priority",
        choices=[p.value for p in ProblemPriority],
        default=ProblemPriority.MEDIUM.value,
        help="Priority (default: medium)",
    )
    problem_add_parser.add_argument("--description", type=str, help="Details")
    problem_add_parser.add_argument(
        "--cost", type=float, default=0.0, help="Estimated repair cost"
    )

    problems_parser = subparsers.add_parser("problems", help="List problems")
    problems_parser.add_argument("vehicle_number", type=str, nargs="?")
    problems_parser.add_argument(
        "--all", action="store_true", help="Include in-progress, resolved and ignored"
    )

    problem_status_parser = subparsers.add_parser(
        "problem-status", help="Change a problem's status"
    )
    problem_status_parser.add_argument("problem_id", type=str, help="Problem id or id prefix")
    problem_status_parser.add_argument(
        "status", choices=[s.value for s in ProblemStatus]
    )

    problem_delete_parser = subparsers.add_parser("problem-delete", help="Remove a problem")
    problem_delete_parser.add_argument("problem_id", type=str, help="Problem id or id prefix")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    config = Config.from_env()
    if args.data_dir:
        config.data_dir = args.data_dir
    if args.user:
        config.user = args.user

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command in UPKEEP_COMMANDS:
            return UPKEEP_COMMANDS[args.command](build_upkeep(config), args)
        return COMMANDS[args.command](build_tracker(config), args)
    except FuelTrackError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
