"""Flask JSON API for vehicle fuel tracking."""

import logging

from flask import Flask, jsonify, request

from fueltrack import (
    ChangeFeed,
    Config,
    EntryNotFound,
    FuelRecordStore,
    FuelTracker,
    InvalidAmount,
    InvalidEntry,
    InvalidVehicle,
    MaintenanceEntry,
    MaintenanceStore,
    NonMonotonicOdometer,
    ProblemPriority,
    ProblemReport,
    ProblemStatus,
    ProblemStore,
    Registration,
    Session,
    StoreError,
    Unauthenticated,
    UpkeepTracker,
    VehicleKind,
    VehicleNotFound,
    VehicleStore,
)
from fueltrack.maintenance import parse_date
from fueltrack.upkeep import utc_today

logger = logging.getLogger(__name__)


def vehicle_to_json(vehicle):
    """Stored fields plus the derived range and fuel status."""
    return {
        "id": vehicle.id,
        "user_id": vehicle.user_id,
        "vehicle_number": vehicle.vehicle_number,
        "vehicle_type": vehicle.vehicle_type.value,
        "mileage": vehicle.mileage,
        "tank_capacity": vehicle.tank_capacity,
        "has_reserve_tank": vehicle.has_reserve_tank,
        "reserve_tank_capacity": vehicle.reserve_tank_capacity,
        "current_odometer": vehicle.current_odometer,
        "current_fuel_level": vehicle.current_fuel_level,
        "is_on_reserve": vehicle.is_on_reserve,
        "mileage_calculation_method": vehicle.mileage_calculation_method.value,
        "last_full_tank_odo": vehicle.last_full_tank_odo,
        "last_full_tank_date": vehicle.last_full_tank_date,
        "last_reserve_odo": vehicle.last_reserve_odo,
        "last_reserve_date": vehicle.last_reserve_date,
        "created_at": vehicle.created_at,
        "updated_at": vehicle.updated_at,
        "range_km": vehicle.range_km,
        "fuel_percentage": vehicle.fuel_percentage,
        "fuel_status": vehicle.fuel_status.name.lower(),
        "is_low_fuel": vehicle.is_low_fuel,
    }


def record_to_json(record):
    return {
        "id": record.id,
        "vehicle_id": record.vehicle_id,
        "odometer_reading": record.odometer_reading,
        "petrol_left": record.petrol_left,
        "estimated_mileage": record.estimated_mileage,
        "is_reserve": record.is_reserve,
        "distance_traveled": record.distance_traveled,
        "petrol_used": record.petrol_used,
        "range_km": record.range_km,
        "created_at": record.created_at,
    }


def outcome_to_json(outcome):
    return {
        "vehicle": vehicle_to_json(outcome.vehicle),
        "warnings": outcome.warnings,
        "sample_mileage": outcome.estimate.sample_mileage,
    }


def number_field(data, name):
    """Read a required numeric field from a JSON body."""
    value = data.get(name)
    if isinstance(value, bool) or value is None:
        raise InvalidAmount(f"'{name}' is required")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidAmount(f"'{name}' must be a number")


def maintenance_to_json(record, today):
    return {
        "id": record.id,
        "vehicle_id": record.vehicle_id,
        "maintenance_type": record.maintenance_type,
        "description": record.description,
        "cost": record.cost,
        "odometer_reading": record.odometer_reading,
        "due_date": record.due_date,
        "completed_date": record.completed_date,
        "is_completed": record.is_completed,
        "status": record.status(today).name.lower(),
        "days_remaining": record.days_remaining(today),
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }


def problem_to_json(problem):
    return {
        "id": problem.id,
        "vehicle_id": problem.vehicle_id,
        "problem_title": problem.problem_title,
        "description": problem.description,
        "priority": problem.priority.value,
        "status": problem.status.value,
        "estimated_cost": problem.estimated_cost,
        "is_critical": problem.is_critical,
        "created_at": problem.created_at,
        "updated_at": problem.updated_at,
    }


def entry_number(data, name, default=0.0):
    """Read an optional numeric field of a maintenance record or problem."""
    if name not in data or data[name] is None:
        return default
    try:
        return number_field(data, name)
    except InvalidAmount as e:
        raise InvalidEntry(str(e))


def create_app(config=None, today=utc_today):
    """Build the app around YAML stores in the configured data directory."""
    config = config or Config.from_env()

    app = Flask(__name__)
    app.secret_key = config.secret_key

    feed = ChangeFeed()
    vehicles = VehicleStore(config.vehicles_file, feed=feed)
    records = FuelRecordStore(config.records_file, feed=feed)
    maintenance = MaintenanceStore(config.maintenance_file, feed=feed)
    problems = ProblemStore(config.problems_file, feed=feed)
    app.config["CHANGE_FEED"] = feed

    def session():
        # Identity comes from the caller; the header stands in for a session
        return Session(request.headers.get("X-User-Id"))

    def tracker():
        return FuelTracker(session=session(), vehicles=vehicles, records=records)

    def upkeep():
        return UpkeepTracker(
            session=session(),
            vehicles=vehicles,
            maintenance=maintenance,
            problems=problems,
            today=today,
        )

    @app.errorhandler(InvalidAmount)
    @app.errorhandler(NonMonotonicOdometer)
    @app.errorhandler(InvalidVehicle)
    @app.errorhandler(InvalidEntry)
    def handle_invalid(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(Unauthenticated)
    def handle_unauthenticated(e):
        return jsonify({"error": str(e)}), 401

    @app.errorhandler(VehicleNotFound)
    @app.errorhandler(EntryNotFound)
    def handle_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(StoreError)
    def handle_store_error(e):
        logger.error("Store failure: %s", e)
        return jsonify({"error": "Could not save changes, please try again"}), 502

    @app.route("/api/vehicles", methods=["GET"])
    def list_vehicles():
        return jsonify([vehicle_to_json(v) for v in tracker().list_vehicles()])

    @app.route("/api/vehicles", methods=["POST"])
    def register_vehicle():
        data = request.get_json(silent=True) or {}
        try:
            kind = VehicleKind(data.get("vehicle_type", VehicleKind.BIKE.value))
        except ValueError:
            raise InvalidVehicle("vehicle_type must be 'bike' or 'car'")

        fields = {}
        for name in ("mileage", "tank_capacity", "reserve_tank_capacity",
                     "current_odometer", "current_fuel_level"):
            if name in data:
                try:
                    fields[name] = number_field(data, name)
                except InvalidAmount as e:
                    raise InvalidVehicle(str(e))
        for name in ("has_reserve_tank", "is_on_reserve"):
            if name in data:
                if not isinstance(data[name], bool):
                    raise InvalidVehicle(f"'{name}' must be true or false")
                fields[name] = data[name]

        registration = Registration(
            vehicle_number=str(data.get("vehicle_number") or ""),
            vehicle_type=kind,
            **fields,
        )
        vehicle = tracker().register(registration)
        body = vehicle_to_json(vehicle)
        body["warnings"] = registration.warnings()
        return jsonify(body), 201

    @app.route("/api/vehicles/<vehicle_id>", methods=["GET"])
    def get_vehicle(vehicle_id: str):
        return jsonify(vehicle_to_json(tracker().get_vehicle(vehicle_id)))

    @app.route("/api/vehicles/<vehicle_id>", methods=["DELETE"])
    def delete_vehicle(vehicle_id: str):
        tracker().delete_vehicle(vehicle_id)
        return "", 204

    @app.route("/api/vehicles/<vehicle_id>/fuel", methods=["POST"])
    def add_fuel(vehicle_id: str):
        data = request.get_json(silent=True) or {}
        outcome = tracker().add_fuel(vehicle_id, number_field(data, "amount"))
        return jsonify(outcome_to_json(outcome))

    @app.route("/api/vehicles/<vehicle_id>/odometer", methods=["POST"])
    def update_odometer(vehicle_id: str):
        data = request.get_json(silent=True) or {}
        outcome = tracker().update_odometer(vehicle_id, number_field(data, "odometer"))
        return jsonify(outcome_to_json(outcome))

    @app.route("/api/vehicles/<vehicle_id>/reserve", methods=["POST"])
    def set_reserve(vehicle_id: str):
        data = request.get_json(silent=True) or {}
        outcome = tracker().set_reserve(vehicle_id, number_field(data, "odometer"))
        return jsonify(outcome_to_json(outcome))

    @app.route("/api/vehicles/<vehicle_id>/tank-full", methods=["POST"])
    def tank_full(vehicle_id: str):
        data = request.get_json(silent=True) or {}
        outcome = tracker().tank_full(
            vehicle_id,
            number_field(data, "odometer"),
            number_field(data, "fuel_added"),
        )
        return jsonify(outcome_to_json(outcome))

    @app.route("/api/records", methods=["GET"])
    def list_records():
        return jsonify([record_to_json(r) for r in tracker().list_records()])

    @app.route("/api/maintenance", methods=["GET"])
    def list_maintenance():
        records = upkeep().list_maintenance(request.args.get("vehicle_id"))
        return jsonify([maintenance_to_json(r, today()) for r in records])

    @app.route("/api/maintenance", methods=["POST"])
    def add_maintenance():
        data = request.get_json(silent=True) or {}
        entry = MaintenanceEntry(
            vehicle_id=str(data.get("vehicle_id") or ""),
            maintenance_type=str(data.get("maintenance_type") or ""),
            odometer_reading=entry_number(data, "odometer_reading"),
            description=data.get("description"),
            cost=entry_number(data, "cost"),
            due_date=data.get("due_date"),
        )
        record = upkeep().add_maintenance(entry)
        return jsonify(maintenance_to_json(record, today())), 201

    @app.route("/api/maintenance/due", methods=["GET"])
    def maintenance_due():
        due = upkeep().maintenance_due(request.args.get("vehicle_id"))
        return jsonify([maintenance_to_json(d.record, today()) for d in due])

    @app.route("/api/maintenance/<record_id>/complete", methods=["POST"])
    def complete_maintenance(record_id: str):
        data = request.get_json(silent=True) or {}
        try:
            completed_on = parse_date(data.get("completed_date"))
        except (ValueError, OverflowError):
            raise InvalidEntry("completed_date must be YYYY-MM-DD")
        done, follow_up = upkeep().complete_maintenance(
            record_id,
            completed_on=completed_on,
            repeat_months=entry_number(data, "repeat_months", default=None),
        )
        return jsonify(
            {
                "record": maintenance_to_json(done, today()),
                "next": maintenance_to_json(follow_up, today()) if follow_up else None,
            }
        )

    @app.route("/api/maintenance/<record_id>", methods=["DELETE"])
    def delete_maintenance(record_id: str):
        upkeep().delete_maintenance(record_id)
        return "", 204

    @app.route("/api/problems", methods=["GET"])
    def list_problems():
        vehicle_id = request.args.get("vehicle_id")
        if request.args.get("open"):
            problems = upkeep().open_problems(vehicle_id)
        else:
            problems = upkeep().list_problems(vehicle_id)
        return jsonify([problem_to_json(p) for p in problems])

    @app.route("/api/problems", methods=["POST"])
    def report_problem():
        data = request.get_json(silent=True) or {}
        try:
            priority = ProblemPriority(data.get("priority", ProblemPriority.MEDIUM.value))
        except ValueError:
            raise InvalidEntry("priority must be one of low, medium, high, critical")
        report = ProblemReport(
            vehicle_id=str(data.get("vehicle_id") or ""),
            problem_title=str(data.get("problem_title") or ""),
            description=data.get("description"),
            priority=priority,
            estimated_cost=entry_number(data, "estimated_cost"),
        )
        return jsonify(problem_to_json(upkeep().report_problem(report))), 201

    @app.route("/api/problems/<problem_id>/status", methods=["POST"])
    def set_problem_status(problem_id: str):
        data = request.get_json(silent=True) or {}
        try:
            status = ProblemStatus(data.get("status"))
        except ValueError:
            raise InvalidEntry("status must be one of open, in_progress, resolved, ignored")
        return jsonify(problem_to_json(upkeep().set_problem_status(problem_id, status)))

    @app.route("/api/problems/<problem_id>", methods=["DELETE"])
    def delete_problem(problem_id: str):
        upkeep().delete_problem(problem_id)
        return "", 204

    return app


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    create_app().run(debug=True, host="0.0.0.0", port=5001)
