"""
Shared fixtures and factories for the progress tracking tests.

Builds a small plant: one area, a pump skid parent with two child pumps,
and a standalone parent motor with its own tasks, all wired to in-memory
repositories.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from projtrack.domain.progress.entities import Area, Equipment, EquipmentTask
from projtrack.domain.progress.services import (
    ProgressHistoryLedger,
    ProgressRollupService,
)
from projtrack.domain.progress.value_objects import Actor, Discipline, TaskStatus
from projtrack.infrastructure.events import InMemoryEventBus
from projtrack.infrastructure.persistence import (
    InMemoryAreaRepository,
    InMemoryEquipmentRepository,
    InMemoryProgressHistoryRepository,
    InMemoryTaskRepository,
)


# Actor fixtures
@pytest.fixture
def admin():
    return Actor(id=1, role="admin", sector="all", name="Ana Admin")


@pytest.fixture
def supervisor_all():
    """Supervisor promoted to oversight of every sector."""
    return Actor(id=2, role="supervisor", sector="all")


@pytest.fixture
def supervisor_mechanical():
    return Actor(id=3, role="supervisor", sector="mechanical")


@pytest.fixture
def engineer():
    return Actor(id=4, role="engineer", sector="electrical")


@pytest.fixture
def operator():
    return Actor(id=5, role="operator", sector="mechanical")


@pytest.fixture
def viewer():
    return Actor(id=6, role="viewer")


@pytest.fixture
def sesmt():
    return Actor(id=7, role="sesmt")


# Factories
@pytest.fixture
def make_task():
    """Factory for tasks with a consistent status for the given progress."""

    def _make_task(equipment, discipline=Discipline.MECHANICAL, progress=0, **kwargs):
        kwargs.setdefault("name", f"{discipline} work on {equipment.tag}")
        kwargs.setdefault("status", TaskStatus.derive(progress, TaskStatus.PENDING))
        return EquipmentTask(
            equipment_id=equipment.id,
            discipline=discipline,
            current_progress=progress,
            **kwargs,
        )

    return _make_task


@pytest.fixture
def fixed_clock():
    """Deterministic clock advancing one minute per call."""
    start = datetime(2024, 3, 4, 7, 0, tzinfo=timezone.utc)
    ticks = iter(range(10_000))

    def _clock():
        return start + timedelta(minutes=next(ticks))

    return _clock


# Plant fixtures
@pytest.fixture
def area():
    return Area(name="Utilities")


@pytest.fixture
def skid(area):
    """Parent equipment with two children."""
    return Equipment(tag="SK-100", area_id=area.id, is_parent=True)


@pytest.fixture
def pump_a(area, skid):
    return Equipment(tag="P-101A", area_id=area.id, parent_tag=skid.tag)


@pytest.fixture
def pump_b(area, skid):
    return Equipment(tag="P-101B", area_id=area.id, parent_tag=skid.tag)


@pytest.fixture
def motor(area):
    """Parent equipment without children."""
    return Equipment(tag="M-200", area_id=area.id, is_parent=True)


# Repositories and services
@pytest.fixture
def area_repository(area):
    repository = InMemoryAreaRepository()
    repository.save(area)
    return repository


@pytest.fixture
def equipment_repository(skid, pump_a, pump_b, motor):
    repository = InMemoryEquipmentRepository()
    for equipment in (skid, pump_a, pump_b, motor):
        repository.save(equipment)
    return repository


@pytest.fixture
def plant_tasks(make_task, pump_a, pump_b, motor):
    return {
        "pump_a_mech": make_task(pump_a, Discipline.MECHANICAL, 40),
        "pump_a_elec": make_task(pump_a, Discipline.ELECTRICAL, 0),
        "pump_b_mech": make_task(pump_b, Discipline.MECHANICAL, 60),
        "motor_elec": make_task(motor, Discipline.ELECTRICAL, 20),
        "motor_inst": make_task(motor, Discipline.INSTRUMENTATION, 40),
        "motor_mech": make_task(motor, Discipline.MECHANICAL, 60),
    }


@pytest.fixture
def task_repository(plant_tasks):
    repository = InMemoryTaskRepository()
    for task in plant_tasks.values():
        repository.save(task)
    return repository


@pytest.fixture
def history_repository():
    return InMemoryProgressHistoryRepository()


@pytest.fixture
def event_bus():
    return InMemoryEventBus()


@pytest.fixture
def rollup_service(equipment_repository, task_repository, area_repository, event_bus):
    return ProgressRollupService(
        equipment_repository, task_repository, area_repository, event_bus
    )


@pytest.fixture
def ledger(
    equipment_repository,
    task_repository,
    history_repository,
    rollup_service,
    event_bus,
    fixed_clock,
):
    return ProgressHistoryLedger(
        equipment_repository,
        task_repository,
        history_repository,
        rollup_service=rollup_service,
        event_bus=event_bus,
        clock=fixed_clock,
    )


@pytest.fixture
def actor_factory():
    def _actor(role, sector="other"):
        return Actor(id=uuid4(), role=role, sector=sector)

    return _actor
