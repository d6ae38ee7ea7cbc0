"""
Domain Events

Events published by the progress ledger and the roll-up service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from ...shared.base import utcnow
from ..value_objects.enums import Discipline, TaskStatus


@dataclass(frozen=True)
class ProgressRecorded:
    """Raised when a progress update has been applied and logged."""

    entry_id: int
    equipment_id: UUID
    task_id: UUID
    discipline: Discipline
    previous_progress: int
    new_progress: int
    previous_status: TaskStatus
    new_status: TaskStatus
    updated_by: UUID | int | str
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class HistoryEntryDeleted:
    """Raised when a history entry is removed. The live task is untouched."""

    entry_id: int
    equipment_id: UUID
    discipline: Discipline
    deleted_by: UUID | int | str
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class EquipmentProgressRecalculated:
    """Raised when the derived progress of an equipment or area changes."""

    equipment_id: UUID | None
    area_id: UUID | None
    old_average: int
    new_average: int
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)


DomainEvent = ProgressRecorded | HistoryEntryDeleted | EquipmentProgressRecalculated
