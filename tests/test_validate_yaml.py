#!/usr/bin/env python3
"""Tests for validate_yaml schema validation."""

from fueltrack import (
    FuelRecordStore,
    MaintenanceEntry,
    MaintenanceStore,
    ProblemReport,
    ProblemStore,
    Registration,
    VehicleStore,
)
from validate_yaml import load_schema, main, validate_store_file


class TestLoadSchema:
    """Tests for load_schema function."""

    def test_returns_dict(self):
        schema = load_schema()
        assert isinstance(schema, dict)

    def test_has_store_definitions(self):
        schema = load_schema()
        assert "vehicle" in schema["definitions"]
        assert "record" in schema["definitions"]
        assert "maintenance" in schema["definitions"]
        assert "problem" in schema["definitions"]


class TestValidateStoreFile:
    """Tests for validate_store_file function."""

    def test_valid_vehicles_file(self, tmp_path):
        path = tmp_path / "vehicles.yaml"
        path.write_text("""
vehicles:
  - id: v1
    user_id: alice
    vehicle_number: KA01AB1234
    vehicle_type: bike
    tank_capacity: 12
    mileage: 40
    has_reserve_tank: true
    reserve_tank_capacity: 1.2
    mileage_calculation_method: manual
    last_full_tank_date: null
""")
        assert validate_store_file(path, load_schema()) == []

    def test_files_written_by_stores_are_valid(self, tmp_path, clock):
        vehicles = VehicleStore(tmp_path / "vehicles.yaml", clock=clock)
        records = FuelRecordStore(tmp_path / "fuel_records.yaml", clock=clock)
        vehicle = vehicles.create("alice", Registration(vehicle_number="KA01"))
        records.append(
            "alice",
            {
                "vehicle_id": vehicle.id,
                "odometer_reading": 100,
                "petrol_left": 4.0,
                "estimated_mileage": 15.0,
            },
        )
        schema = load_schema()
        assert validate_store_file(vehicles.filename, schema) == []
        assert validate_store_file(records.filename, schema) == []

    def test_upkeep_files_written_by_stores_are_valid(self, tmp_path, clock):
        maintenance = MaintenanceStore(tmp_path / "maintenance.yaml", clock=clock)
        problems = ProblemStore(tmp_path / "problems.yaml", clock=clock)
        maintenance.create(
            "alice",
            MaintenanceEntry(
                vehicle_id="v1", maintenance_type="Oil change", due_date="2025-06-01"
            ).as_fields(),
        )
        problems.create(
            "alice", ProblemReport(vehicle_id="v1", problem_title="Brake squeal").as_fields()
        )
        schema = load_schema()
        assert validate_store_file(maintenance.filename, schema) == []
        assert validate_store_file(problems.filename, schema) == []

    def test_bad_due_date_rejected(self, tmp_path):
        path = tmp_path / "maintenance.yaml"
        path.write_text("""
maintenance:
  - id: m1
    user_id: alice
    vehicle_id: v1
    maintenance_type: Chain
    due_date: "June"
""")
        errors = validate_store_file(path, load_schema())
        assert any("Schema validation" in e for e in errors)

    def test_missing_required_field(self, tmp_path):
        path = tmp_path / "vehicles.yaml"
        path.write_text("""
vehicles:
  - id: v1
    user_id: alice
    vehicle_number: KA01
    vehicle_type: bike
    tank_capacity: 12
    # mileage missing
""")
        errors = validate_store_file(path, load_schema())
        assert errors
        assert any("Schema validation" in e for e in errors)

    def test_unknown_method_rejected(self, tmp_path):
        path = tmp_path / "vehicles.yaml"
        path.write_text("""
vehicles:
  - id: v1
    user_id: alice
    vehicle_number: KA01
    vehicle_type: bike
    tank_capacity: 12
    mileage: 40
    mileage_calculation_method: guesswork
""")
        assert validate_store_file(path, load_schema())

    def test_invalid_yaml_returns_parse_error(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("vehicles: [unclosed\n")
        errors = validate_store_file(path, load_schema())
        assert any("YAML" in e for e in errors)

    def test_nonexistent_file_returns_errors(self, tmp_path):
        errors = validate_store_file(tmp_path / "nope.yaml", load_schema())
        assert len(errors) == 1
        assert errors[0].startswith("Error:")


class TestMain:
    """Tests for the validate_yaml command line."""

    def test_missing_dir(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing")]) == 1
        assert "not found" in capsys.readouterr().out

    def test_empty_dir_warns(self, tmp_path, capsys):
        assert main([str(tmp_path)]) == 0
        assert "No store files found" in capsys.readouterr().out

    def test_reports_each_file(self, tmp_path, capsys):
        VehicleStore(tmp_path / "vehicles.yaml").create(
            "alice", Registration(vehicle_number="KA01")
        )
        (tmp_path / "fuel_records.yaml").write_text("records:\n  - id: r1\n")
        assert main([str(tmp_path)]) == 1
        out = capsys.readouterr().out
        assert "OK: vehicles.yaml" in out
        assert "FAIL: fuel_records.yaml" in out
