"""
In-memory repository adapters.

Entities are copied on the way in and out so callers never alias stored
state, the same as with an external store.
"""

import itertools
import threading
from uuid import UUID

from ...domain.progress.entities.area import Area
from ...domain.progress.entities.equipment import Equipment
from ...domain.progress.entities.history import ProgressHistoryEntry
from ...domain.progress.entities.task import EquipmentTask
from ...domain.progress.repositories.interfaces import (
    AreaRepository,
    EquipmentRepository,
    ProgressHistoryRepository,
    TaskRepository,
)
from ...domain.progress.value_objects.enums import Discipline
from ...domain.progress.value_objects.progress import ProgressState
from ...domain.shared.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
)


class InMemoryAreaRepository(AreaRepository):
    def __init__(self) -> None:
        self._areas: dict[UUID, Area] = {}

    def save(self, area: Area) -> None:
        self._areas[area.id] = area.model_copy(deep=True)

    def find_by_id(self, area_id: UUID) -> Area | None:
        area = self._areas.get(area_id)
        return area.model_copy(deep=True) if area else None

    def find_all(self) -> list[Area]:
        return [a.model_copy(deep=True) for a in self._areas.values()]

    def delete(self, area_id: UUID) -> None:
        self._areas.pop(area_id, None)


class InMemoryEquipmentRepository(EquipmentRepository):
    def __init__(self) -> None:
        self._equipment: dict[UUID, Equipment] = {}

    def save(self, equipment: Equipment) -> None:
        existing = self.find_by_tag(equipment.tag)
        if existing is not None and existing.id != equipment.id:
            raise BusinessRuleError(
                "unique_equipment_tag",
                f"Tag '{equipment.tag}' is already in use",
                {"tag": equipment.tag},
            )
        self._equipment[equipment.id] = equipment.model_copy(deep=True)

    def find_by_id(self, equipment_id: UUID) -> Equipment | None:
        equipment = self._equipment.get(equipment_id)
        return equipment.model_copy(deep=True) if equipment else None

    def find_by_tag(self, tag: str) -> Equipment | None:
        for equipment in self._equipment.values():
            if equipment.tag == tag:
                return equipment.model_copy(deep=True)
        return None

    def find_by_area(self, area_id: UUID) -> list[Equipment]:
        return [
            e.model_copy(deep=True)
            for e in self._equipment.values()
            if e.area_id == area_id
        ]

    def find_all(self) -> list[Equipment]:
        return [e.model_copy(deep=True) for e in self._equipment.values()]

    def delete(self, equipment_id: UUID) -> None:
        self._equipment.pop(equipment_id, None)


class InMemoryTaskRepository(TaskRepository):
    """Task store with a compare-and-set progress update."""

    def __init__(self) -> None:
        self._tasks: dict[UUID, EquipmentTask] = {}
        self._lock = threading.Lock()

    def save(self, task: EquipmentTask) -> None:
        existing = self.find_by_equipment_and_discipline(
            task.equipment_id, task.discipline
        )
        if existing is not None and existing.id != task.id:
            raise BusinessRuleError(
                "one_task_per_discipline",
                f"Equipment already has a {task.discipline.value} task",
                {
                    "equipment_id": str(task.equipment_id),
                    "discipline": task.discipline.value,
                },
            )
        self._tasks[task.id] = task.model_copy(deep=True)

    def find_by_id(self, task_id: UUID) -> EquipmentTask | None:
        task = self._tasks.get(task_id)
        return task.model_copy(deep=True) if task else None

    def find_by_equipment(self, equipment_id: UUID) -> list[EquipmentTask]:
        return [
            t.model_copy(deep=True)
            for t in self._tasks.values()
            if t.equipment_id == equipment_id
        ]

    def find_by_equipment_and_discipline(
        self, equipment_id: UUID, discipline: Discipline
    ) -> EquipmentTask | None:
        for task in self._tasks.values():
            if task.equipment_id == equipment_id and task.discipline is discipline:
                return task.model_copy(deep=True)
        return None

    def find_all(self) -> list[EquipmentTask]:
        return [t.model_copy(deep=True) for t in self._tasks.values()]

    def update_progress(
        self,
        task_id: UUID,
        expected: ProgressState,
        new_state: ProgressState,
        actual_hours: float | None = None,
    ) -> EquipmentTask:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise NotFoundError("EquipmentTask", task_id)
            if not expected.matches(task.state):
                raise ConflictError(
                    "Task progress changed concurrently",
                    expected=expected,
                    actual=task.state,
                )
            task.apply_progress(new_state, actual_hours)
            return task.model_copy(deep=True)

    def delete(self, task_id: UUID) -> None:
        self._tasks.pop(task_id, None)


class InMemoryProgressHistoryRepository(ProgressHistoryRepository):
    """Append-only history keyed by monotonically increasing ids."""

    def __init__(self) -> None:
        self._entries: dict[int, ProgressHistoryEntry] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._ids)

    def append(self, entry: ProgressHistoryEntry) -> None:
        if entry.id in self._entries:
            raise BusinessRuleError(
                "append_only_history",
                f"History entry {entry.id} already exists",
                {"entry_id": entry.id},
            )
        self._entries[entry.id] = entry

    def find_by_id(self, entry_id: int) -> ProgressHistoryEntry | None:
        return self._entries.get(entry_id)

    def find_by_equipment_and_discipline(
        self, equipment_id: UUID, discipline: Discipline
    ) -> list[ProgressHistoryEntry]:
        return [
            e
            for e in self._entries.values()
            if e.equipment_id == equipment_id and e.discipline is discipline
        ]

    def find_by_equipment(self, equipment_id: UUID) -> list[ProgressHistoryEntry]:
        return [e for e in self._entries.values() if e.equipment_id == equipment_id]

    def find_all(self) -> list[ProgressHistoryEntry]:
        return list(self._entries.values())

    def delete(self, entry_id: int) -> None:
        self._entries.pop(entry_id, None)
