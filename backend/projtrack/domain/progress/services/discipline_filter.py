"""
DisciplineFilter Domain Service

Maps an organizational sector to the disciplines its holder may act on.
"""

from collections.abc import Iterable
from typing import TypeVar

from ..value_objects.enums import Discipline, Sector

ALL_DISCIPLINES: tuple[Discipline, ...] = tuple(Discipline)

_T = TypeVar("_T")


class DisciplineFilter:
    """
    Sector to discipline mapping.

    Sectors "all" and "other" both see every discipline; a named sector
    sees only the discipline of the same name. Total and side-effect free.
    """

    @staticmethod
    def allowed_disciplines(sector: Sector | str) -> tuple[Discipline, ...]:
        """
        Disciplines visible to a sector, in declaration order.

        Args:
            sector: The actor's sector

        Returns:
            A non-empty ordered tuple of disciplines
        """
        sector = Sector.parse(sector)
        discipline = sector.discipline
        if discipline is None:
            return ALL_DISCIPLINES
        return (discipline,)

    @staticmethod
    def can_view_discipline(sector: Sector | str, discipline: Discipline | str) -> bool:
        return Discipline.parse(discipline) in DisciplineFilter.allowed_disciplines(
            sector
        )

    @staticmethod
    def filter_tasks(sector: Sector | str, tasks: Iterable[_T]) -> list[_T]:
        """Keep only the tasks (anything with a ``discipline``) the sector may see."""
        allowed = set(DisciplineFilter.allowed_disciplines(sector))
        return [task for task in tasks if task.discipline in allowed]
