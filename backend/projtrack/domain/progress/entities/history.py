"""Progress history entry: one immutable line of the audit trail."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from ...shared.base import ValueObject
from ..value_objects.enums import Discipline, TaskStatus


class ProgressHistoryEntry(ValueObject):
    """
    Append-only record of one progress change.

    Entries are frozen once created. Ordering is by ``updated_at`` with
    ties broken by the insertion ``id``.
    """

    id: int = Field(ge=1)
    equipment_id: UUID
    discipline: Discipline
    task_id: UUID | None = None
    previous_progress: int = Field(ge=0, le=100)
    new_progress: int = Field(ge=0, le=100)
    previous_status: TaskStatus
    new_status: TaskStatus
    observations: str | None = None
    photos: tuple[Any, ...] = ()
    updated_by: UUID | int | str
    updated_at: datetime

    @property
    def sort_key(self) -> tuple[datetime, int]:
        return (self.updated_at, self.id)

    @property
    def has_photos(self) -> bool:
        return len(self.photos) > 0

    @property
    def delta(self) -> int:
        return self.new_progress - self.previous_progress
