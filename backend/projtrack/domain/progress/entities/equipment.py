"""Equipment entity with parent/child hierarchy by tag."""

from typing import Any
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from ...shared.base import Entity
from ...shared.exceptions import ValidationError
from ...shared.validation import DataSanitizer
from ..value_objects.progress import RollUp


class Equipment(Entity):
    """
    Equipment entity.

    A child (``is_parent=False``) references its parent by ``parent_tag``;
    a parent never has one. A parent without children is a degenerate
    single-node parent whose progress is the mean of its own tasks.
    Rolled-up attributes are written only through :meth:`apply_rollup`.
    """

    tag: str
    area_id: UUID
    name: str | None = None
    description: str | None = None
    is_parent: bool = False
    parent_tag: str | None = None

    average_progress: int = Field(default=0, ge=0, le=100)
    task_count: int = Field(default=0, ge=0)
    completed_count: int = Field(default=0, ge=0)

    @field_validator("tag", mode="before")
    @classmethod
    def _sanitize_tag(cls, v: Any) -> str:
        return DataSanitizer.sanitize_tag(v)

    @field_validator("parent_tag", mode="before")
    @classmethod
    def _sanitize_parent_tag(cls, v: Any) -> str | None:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return DataSanitizer.sanitize_tag(v)

    @model_validator(mode="after")
    def _check_hierarchy_shape(self) -> "Equipment":
        if self.is_parent and self.parent_tag is not None:
            raise ValidationError(
                "parent_tag",
                self.parent_tag,
                "A parent equipment cannot reference another parent",
                "PARENT_WITH_PARENT_TAG",
            )
        if not self.is_parent and self.parent_tag is None:
            raise ValidationError(
                "parent_tag",
                None,
                "A child equipment must reference its parent's tag",
                "CHILD_WITHOUT_PARENT_TAG",
            )
        if self.parent_tag is not None and self.parent_tag == self.tag:
            raise ValidationError(
                "parent_tag",
                self.parent_tag,
                "Equipment cannot be its own parent",
                "SELF_PARENT",
            )
        return self

    def is_valid(self) -> bool:
        return bool(self.tag) and (self.is_parent or self.parent_tag is not None)

    @property
    def is_child(self) -> bool:
        return not self.is_parent

    @property
    def rollup(self) -> RollUp:
        return RollUp(
            average_progress=self.average_progress,
            task_count=self.task_count,
            completed_count=self.completed_count,
        )

    def apply_rollup(self, rollup: RollUp) -> None:
        self.average_progress = rollup.average_progress
        self.task_count = rollup.task_count
        self.completed_count = rollup.completed_count
        self.mark_updated()
