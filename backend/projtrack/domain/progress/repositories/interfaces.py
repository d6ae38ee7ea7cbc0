"""
Repository Interfaces

Ports to the external persistence layer. The core never stores data
itself; adapters implement these against whatever store the host uses.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from ..entities.area import Area
from ..entities.equipment import Equipment
from ..entities.history import ProgressHistoryEntry
from ..entities.task import EquipmentTask
from ..value_objects.enums import Discipline
from ..value_objects.progress import ProgressState


class AreaRepository(ABC):
    """Repository interface for Area entities."""

    @abstractmethod
    def save(self, area: Area) -> None:
        """Save area."""
        ...

    @abstractmethod
    def find_by_id(self, area_id: UUID) -> Area | None:
        """Find area by ID."""
        ...

    @abstractmethod
    def find_all(self) -> list[Area]:
        """Find all areas."""
        ...

    @abstractmethod
    def delete(self, area_id: UUID) -> None:
        """Delete an area."""
        ...


class EquipmentRepository(ABC):
    """Repository interface for Equipment entities."""

    @abstractmethod
    def save(self, equipment: Equipment) -> None:
        """Save equipment."""
        ...

    @abstractmethod
    def find_by_id(self, equipment_id: UUID) -> Equipment | None:
        """Find equipment by ID."""
        ...

    @abstractmethod
    def find_by_tag(self, tag: str) -> Equipment | None:
        """Find equipment by its unique tag."""
        ...

    @abstractmethod
    def find_by_area(self, area_id: UUID) -> list[Equipment]:
        """Find all equipment of an area."""
        ...

    @abstractmethod
    def find_all(self) -> list[Equipment]:
        """Find all equipment."""
        ...

    @abstractmethod
    def delete(self, equipment_id: UUID) -> None:
        """Delete equipment."""
        ...


class TaskRepository(ABC):
    """Repository interface for EquipmentTask entities."""

    @abstractmethod
    def save(self, task: EquipmentTask) -> None:
        """Save task."""
        ...

    @abstractmethod
    def find_by_id(self, task_id: UUID) -> EquipmentTask | None:
        """Find task by ID."""
        ...

    @abstractmethod
    def find_by_equipment(self, equipment_id: UUID) -> list[EquipmentTask]:
        """Find the tasks of one equipment."""
        ...

    @abstractmethod
    def find_by_equipment_and_discipline(
        self, equipment_id: UUID, discipline: Discipline
    ) -> EquipmentTask | None:
        """Find the live task for an (equipment, discipline) pair."""
        ...

    @abstractmethod
    def find_all(self) -> list[EquipmentTask]:
        """Find all tasks."""
        ...

    @abstractmethod
    def update_progress(
        self,
        task_id: UUID,
        expected: ProgressState,
        new_state: ProgressState,
        actual_hours: float | None = None,
    ) -> EquipmentTask:
        """
        Compare-and-set the live progress of a task.

        Raises:
            NotFoundError: If the task does not exist
            ConflictError: If the stored state no longer matches ``expected``
        """
        ...

    @abstractmethod
    def delete(self, task_id: UUID) -> None:
        """Delete a task."""
        ...


class ProgressHistoryRepository(ABC):
    """Repository interface for the append-only progress history."""

    @abstractmethod
    def next_id(self) -> int:
        """Reserve the next entry id; ids increase monotonically."""
        ...

    @abstractmethod
    def append(self, entry: ProgressHistoryEntry) -> None:
        """Append an entry. Existing entries are never overwritten."""
        ...

    @abstractmethod
    def find_by_id(self, entry_id: int) -> ProgressHistoryEntry | None:
        """Find entry by ID."""
        ...

    @abstractmethod
    def find_by_equipment_and_discipline(
        self, equipment_id: UUID, discipline: Discipline
    ) -> list[ProgressHistoryEntry]:
        """Entries of one (equipment, discipline) pair in insertion order."""
        ...

    @abstractmethod
    def find_by_equipment(self, equipment_id: UUID) -> list[ProgressHistoryEntry]:
        """Entries of every discipline of one equipment."""
        ...

    @abstractmethod
    def delete(self, entry_id: int) -> None:
        """Delete an entry."""
        ...
