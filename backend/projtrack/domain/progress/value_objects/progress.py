"""Progress value objects exchanged with the ledger and the aggregator."""

from pydantic import Field

from ...shared.base import ValueObject
from .enums import TaskStatus


class ProgressState(ValueObject):
    """
    Progress and status of one (equipment, discipline) task.

    Used both as the caller's view of the last known state (``previous``)
    and as the requested new state (``next``). Range checks happen in the
    ledger so that a bad value surfaces as a domain ValidationError.
    """

    progress: int
    status: TaskStatus | None = None

    def matches(self, other: "ProgressState") -> bool:
        """Whether this (possibly status-less) view agrees with ``other``."""
        if self.progress != other.progress:
            return False
        return self.status is None or other.status is None or self.status is other.status

    def __str__(self) -> str:
        if self.status is None:
            return f"{self.progress}%"
        return f"{self.progress}% ({self.status.value})"


class RollUp(ValueObject):
    """Rolled-up progress of one equipment."""

    average_progress: int = Field(ge=0, le=100)
    task_count: int = Field(default=0, ge=0)
    completed_count: int = Field(default=0, ge=0)


class AreaRollUp(ValueObject):
    """Rolled-up progress of an area."""

    average_progress: int = Field(ge=0, le=100)
    equipment_count: int = Field(default=0, ge=0)
    task_count: int = Field(default=0, ge=0)
    completed_count: int = Field(default=0, ge=0)
