"""Actor value object: the immutable identity supplied at session start."""

from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from ...shared.base import ValueObject
from .enums import Role, Sector


class Actor(ValueObject):
    """
    The user on whose behalf a decision is taken.

    Sourced from the external identity provider and never refreshed by the
    core. Every decision function takes it as an explicit argument.
    """

    id: UUID | int | str
    role: Role
    sector: Sector = Field(default=Sector.OTHER)
    name: str | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, v: Any) -> Role:
        return Role.parse(v)

    @field_validator("sector", mode="before")
    @classmethod
    def _parse_sector(cls, v: Any) -> Sector:
        # Users without a sector fall back to "other"
        if v is None or v == "":
            return Sector.OTHER
        return Sector.parse(v)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_cross_sector_supervisor(self) -> bool:
        """Supervisor explicitly promoted to oversight of every sector."""
        return self.role is Role.SUPERVISOR and self.sector is Sector.ALL
