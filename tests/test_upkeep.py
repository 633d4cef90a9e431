#!/usr/bin/env python3
"""
Tests for UpkeepTracker.

Integration tests against real YAML stores:
1. Entries belong to one of the user's vehicles
2. Due maintenance sorts most urgent first
3. Completing with a repeat interval schedules the next one
4. Open problems sort most serious first
"""

import logging
from datetime import date

import pytest

from fueltrack import (
    EntryNotFound,
    InvalidEntry,
    MaintenanceEntry,
    MaintenanceStatus,
    MaintenanceStore,
    ProblemPriority,
    ProblemReport,
    ProblemStatus,
    ProblemStore,
    Registration,
    Session,
    StoreError,
    Unauthenticated,
    UpkeepTracker,
    VehicleNotFound,
    VehicleStore,
)

TODAY = date(2025, 3, 1)


class FailingCreateStore(MaintenanceStore):
    """Patches work, new records fail."""

    def create(self, user_id, fields):
        raise StoreError("disk full")


@pytest.fixture
def vehicles(tmp_path, clock):
    return VehicleStore(tmp_path / "vehicles.yaml", clock=clock)


@pytest.fixture
def bike(vehicles):
    return vehicles.create("alice", Registration(vehicle_number="KA01AB1234"))


def make_upkeep(tmp_path, vehicles, user="alice", maintenance=None):
    return UpkeepTracker(
        Session(user),
        vehicles,
        maintenance or MaintenanceStore(tmp_path / "maintenance.yaml"),
        ProblemStore(tmp_path / "problems.yaml"),
        today=lambda: TODAY,
    )


@pytest.fixture
def upkeep(tmp_path, vehicles):
    return make_upkeep(tmp_path, vehicles)


def add(upkeep, vehicle, kind, due=None, **fields):
    return upkeep.add_maintenance(
        MaintenanceEntry(vehicle_id=vehicle.id, maintenance_type=kind, due_date=due, **fields)
    )


class TestAddMaintenance:
    """Tests for add_maintenance and listing."""

    def test_add_and_list(self, upkeep, bike):
        record = add(upkeep, bike, "Oil change", due="2025-04-01", cost=450)
        assert record.user_id == "alice"
        assert record.vehicle_id == bike.id
        assert record.is_completed is False
        assert [r.id for r in upkeep.list_maintenance()] == [record.id]
        assert [r.id for r in upkeep.list_maintenance(bike.id)] == [record.id]
        assert upkeep.list_maintenance("other") == []

    def test_other_users_vehicle_rejected(self, tmp_path, vehicles, bike):
        bob = make_upkeep(tmp_path, vehicles, user="bob")
        with pytest.raises(VehicleNotFound):
            add(bob, bike, "Oil change")
        assert bob.list_maintenance() == []

    def test_invalid_entry_never_stored(self, upkeep, bike):
        with pytest.raises(InvalidEntry):
            add(upkeep, bike, "Oil change", cost=-5)
        assert upkeep.list_maintenance() == []

    def test_entries_scoped_to_user(self, tmp_path, vehicles, upkeep, bike):
        record = add(upkeep, bike, "Oil change")
        bob = make_upkeep(tmp_path, vehicles, user="bob")
        assert bob.list_maintenance() == []
        with pytest.raises(EntryNotFound):
            bob.get_maintenance(record.id)

    def test_requires_user(self, tmp_path, vehicles):
        with pytest.raises(Unauthenticated):
            make_upkeep(tmp_path, vehicles, user=None).list_maintenance()

    def test_delete(self, upkeep, bike):
        record = add(upkeep, bike, "Oil change")
        upkeep.delete_maintenance(record.id)
        assert upkeep.list_maintenance() == []


class TestMaintenanceDue:
    """Tests for maintenance_due and overdue_maintenance."""

    def test_most_urgent_first(self, upkeep, bike):
        later = add(upkeep, bike, "Chain", due="2025-06-01")
        soon = add(upkeep, bike, "Brake pads", due="2025-03-10")
        overdue_recent = add(upkeep, bike, "Tyres", due="2025-02-25")
        overdue_old = add(upkeep, bike, "Oil change", due="2025-01-01")
        add(upkeep, bike, "Wash")

        due = upkeep.maintenance_due()
        assert [d.record.id for d in due] == [
            overdue_old.id, overdue_recent.id, soon.id, later.id,
        ]
        assert [d.status for d in due] == [
            MaintenanceStatus.OVERDUE,
            MaintenanceStatus.OVERDUE,
            MaintenanceStatus.DUE_SOON,
            MaintenanceStatus.SCHEDULED,
        ]
        assert [d.record.id for d in upkeep.overdue_maintenance()] == [
            overdue_old.id, overdue_recent.id,
        ]

    def test_completed_excluded(self, upkeep, bike):
        record = add(upkeep, bike, "Oil change", due="2025-01-01")
        upkeep.complete_maintenance(record.id)
        assert upkeep.maintenance_due() == []


class TestCompleteMaintenance:
    """Tests for complete_maintenance."""

    def test_marks_completed_today(self, upkeep, bike):
        record = add(upkeep, bike, "Oil change", due="2025-02-01")
        done, follow_up = upkeep.complete_maintenance(record.id[:6])
        assert done.is_completed
        assert done.completed_date == "2025-03-01"
        assert done.status(TODAY) == MaintenanceStatus.COMPLETED
        assert follow_up is None

    def test_repeat_schedules_next(self, upkeep, bike):
        record = add(upkeep, bike, "Oil change", due="2025-02-01", description="5W-30")
        done, follow_up = upkeep.complete_maintenance(
            record.id, completed_on=date(2025, 2, 10), repeat_months=6
        )
        assert done.completed_date == "2025-02-10"
        assert follow_up.maintenance_type == "Oil change"
        assert follow_up.description == "5W-30"
        assert follow_up.due_date == "2025-08-10"
        assert not follow_up.is_completed
        assert len(upkeep.list_maintenance()) == 2

    def test_already_completed_rejected(self, upkeep, bike):
        record = add(upkeep, bike, "Oil change")
        upkeep.complete_maintenance(record.id)
        with pytest.raises(InvalidEntry, match="already completed"):
            upkeep.complete_maintenance(record.id)

    @pytest.mark.parametrize("months", [0, -3, float("inf")])
    def test_bad_repeat_interval(self, upkeep, bike, months):
        record = add(upkeep, bike, "Oil change")
        with pytest.raises(InvalidEntry):
            upkeep.complete_maintenance(record.id, repeat_months=months)
        assert not upkeep.get_maintenance(record.id).is_completed

    def test_follow_up_failure_keeps_completion(self, tmp_path, vehicles, bike, caplog):
        store = MaintenanceStore(tmp_path / "maintenance.yaml")
        record = store.create(
            "alice",
            MaintenanceEntry(vehicle_id=bike.id, maintenance_type="Oil change").as_fields(),
        )
        failing = FailingCreateStore(tmp_path / "maintenance.yaml")
        upkeep = make_upkeep(tmp_path, vehicles, maintenance=failing)

        with caplog.at_level(logging.ERROR, logger="fueltrack.upkeep"):
            done, follow_up = upkeep.complete_maintenance(record.id, repeat_months=3)

        assert done.is_completed
        assert follow_up is None
        assert "could not schedule the next one" in caplog.text
        assert store.get(record.id, "alice").is_completed


class TestProblems:
    """Tests for reporting and triaging problems."""

    def report(self, upkeep, vehicle, title, priority=ProblemPriority.MEDIUM):
        return upkeep.report_problem(
            ProblemReport(vehicle_id=vehicle.id, problem_title=title, priority=priority)
        )

    def test_report_and_list(self, upkeep, bike):
        problem = self.report(upkeep, bike, "Brake squeal", ProblemPriority.HIGH)
        assert problem.status == ProblemStatus.OPEN
        assert [p.id for p in upkeep.list_problems(bike.id)] == [problem.id]

    def test_other_users_vehicle_rejected(self, tmp_path, vehicles, bike):
        bob = make_upkeep(tmp_path, vehicles, user="bob")
        with pytest.raises(VehicleNotFound):
            self.report(bob, bike, "Flat tyre")

    def test_open_problems_most_serious_first(self, upkeep, bike):
        low = self.report(upkeep, bike, "Mirror loose", ProblemPriority.LOW)
        critical = self.report(upkeep, bike, "No brakes", ProblemPriority.CRITICAL)
        medium = self.report(upkeep, bike, "Horn weak")
        resolved = self.report(upkeep, bike, "Chain slack", ProblemPriority.HIGH)
        upkeep.set_problem_status(resolved.id, ProblemStatus.RESOLVED)

        assert [p.id for p in upkeep.open_problems()] == [critical.id, medium.id, low.id]
        assert [p.id for p in upkeep.critical_problems()] == [critical.id]

    def test_status_change(self, upkeep, bike):
        problem = self.report(upkeep, bike, "No brakes", ProblemPriority.CRITICAL)
        updated = upkeep.set_problem_status(problem.id, ProblemStatus.IN_PROGRESS)
        assert updated.status == ProblemStatus.IN_PROGRESS
        assert upkeep.critical_problems() == []
        assert upkeep.get_problem(problem.id).status.label == "IN PROGRESS"

    def test_delete(self, upkeep, bike):
        problem = self.report(upkeep, bike, "Horn weak")
        upkeep.delete_problem(problem.id)
        assert upkeep.list_problems() == []
        with pytest.raises(EntryNotFound):
            upkeep.delete_problem(problem.id)
