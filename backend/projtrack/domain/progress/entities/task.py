"""Equipment task entity."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from ...shared.base import Entity, utcnow
from ...shared.validation import DataSanitizer
from ..value_objects.enums import Discipline, PriorityLevel, TaskStatus
from ..value_objects.progress import ProgressState


class EquipmentTask(Entity):
    """
    A unit of discipline work on one equipment.

    ``current_progress`` is the live state and the source of truth; the
    progress history is a log next to it and never feeds back into it.
    """

    equipment_id: UUID
    discipline: Discipline
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    current_progress: int = Field(default=0, ge=0, le=100)
    status: TaskStatus = Field(default=TaskStatus.PENDING)
    priority: PriorityLevel = Field(default=PriorityLevel.NORMAL)
    estimated_hours: float = Field(default=0.0, ge=0)
    actual_hours: float = Field(default=0.0, ge=0)
    is_custom: bool = False
    completed_date: datetime | None = None

    @field_validator("discipline", mode="before")
    @classmethod
    def _parse_discipline(cls, v: Any) -> Discipline:
        return Discipline.parse(v)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v: Any) -> TaskStatus:
        return TaskStatus.parse(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _parse_priority(cls, v: Any) -> PriorityLevel:
        return PriorityLevel.parse(v)

    @field_validator("name", mode="before")
    @classmethod
    def _sanitize_name(cls, v: Any) -> str:
        return DataSanitizer.sanitize_string(
            v, max_length=200, allow_empty=False, field_name="name"
        )

    def is_valid(self) -> bool:
        return self.status.is_consistent_with(self.current_progress)

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    @property
    def state(self) -> ProgressState:
        return ProgressState(progress=self.current_progress, status=self.status)

    def apply_progress(
        self, new_state: ProgressState, actual_hours: float | None = None
    ) -> None:
        """Move the live task to a validated new state."""
        status = new_state.status or TaskStatus.derive(
            new_state.progress, self.status
        )
        self.current_progress = new_state.progress
        self.status = status
        if actual_hours is not None:
            self.actual_hours = actual_hours
        self.completed_date = utcnow() if status is TaskStatus.COMPLETED else None
        self.mark_updated()
