"""Area entity."""

from typing import Any

from pydantic import Field, field_validator

from ...shared.base import Entity
from ...shared.validation import DataSanitizer
from ..value_objects.enums import AreaStatus
from ..value_objects.progress import AreaRollUp


class Area(Entity):
    """
    A physical area of the project grouping equipment.

    ``average_progress`` and the counters are read-derived: they are only
    ever written through :meth:`apply_rollup` with values computed from the
    area's equipment and tasks.
    """

    name: str = Field(min_length=1, max_length=100)
    status: AreaStatus = Field(default=AreaStatus.ACTIVE)
    description: str | None = None

    average_progress: int = Field(default=0, ge=0, le=100)
    equipment_count: int = Field(default=0, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def _sanitize_name(cls, v: Any) -> str:
        return DataSanitizer.sanitize_string(
            v, max_length=100, allow_empty=False, field_name="name"
        )

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v: Any) -> AreaStatus:
        return AreaStatus.parse(v)

    def is_valid(self) -> bool:
        return bool(self.name)

    def apply_rollup(self, rollup: AreaRollUp) -> None:
        self.average_progress = rollup.average_progress
        self.equipment_count = rollup.equipment_count
        self.mark_updated()
