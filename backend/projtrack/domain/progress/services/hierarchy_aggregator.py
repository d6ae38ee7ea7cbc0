"""
HierarchyAggregator Domain Service

Pure roll-up of task progress into equipment and area progress. Children
are weighted equally regardless of how many tasks each one has.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from ..entities.equipment import Equipment
from ..entities.task import EquipmentTask
from ..value_objects.enums import Discipline
from ..value_objects.progress import AreaRollUp, RollUp


class RolledUp(Protocol):
    """Anything carrying rolled-up progress (a RollUp or an Equipment)."""

    average_progress: int
    task_count: int
    completed_count: int


def round_half_up(total: int | Decimal, count: int) -> int:
    """
    Mean of ``count`` values summing to ``total``, rounded half up and
    clamped to [0, 100]. An empty set averages to 0.
    """
    if count <= 0:
        return 0
    mean = Decimal(total) / Decimal(count)
    rounded = int(mean.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return max(0, min(100, rounded))


class HierarchyAggregator:
    """Computes derived progress; never reads or writes storage."""

    @staticmethod
    def summarize_tasks(tasks: Iterable[EquipmentTask]) -> RollUp:
        """
        Roll up the direct tasks of one equipment.

        A leaf without tasks rolls up to 0 progress.
        """
        tasks = list(tasks)
        return RollUp(
            average_progress=round_half_up(
                sum(t.current_progress for t in tasks), len(tasks)
            ),
            task_count=len(tasks),
            completed_count=sum(1 for t in tasks if t.is_completed),
        )

    @staticmethod
    def aggregate(
        parent_tasks: Iterable[EquipmentTask], children: Sequence[RolledUp]
    ) -> RollUp:
        """
        Roll up a parent equipment.

        Args:
            parent_tasks: The parent's own direct tasks
            children: Roll-ups of the parent's children

        Returns:
            The parent's own task average when it has no children, otherwise
            the equally weighted mean of the children's averages with task
            counts summed over the children
        """
        if not children:
            return HierarchyAggregator.summarize_tasks(parent_tasks)

        return RollUp(
            average_progress=round_half_up(
                sum(c.average_progress for c in children), len(children)
            ),
            task_count=sum(c.task_count for c in children),
            completed_count=sum(c.completed_count for c in children),
        )

    @staticmethod
    def aggregate_area(
        equipment: Iterable[Equipment], tasks: Iterable[EquipmentTask]
    ) -> AreaRollUp:
        """
        Roll up an area: the mean over every task of the area's equipment.

        Only non-parent equipment is counted in ``equipment_count``.
        """
        equipment = list(equipment)
        equipment_ids = {e.id for e in equipment}
        area_tasks = [t for t in tasks if t.equipment_id in equipment_ids]
        summary = HierarchyAggregator.summarize_tasks(area_tasks)

        return AreaRollUp(
            average_progress=summary.average_progress,
            equipment_count=sum(1 for e in equipment if not e.is_parent),
            task_count=summary.task_count,
            completed_count=summary.completed_count,
        )

    @staticmethod
    def progress_by_discipline(
        tasks: Iterable[EquipmentTask],
    ) -> dict[Discipline, int]:
        """Rounded mean progress per discipline, for disciplines with tasks."""
        buckets: dict[Discipline, list[int]] = defaultdict(list)
        for task in tasks:
            buckets[task.discipline].append(task.current_progress)

        return {
            discipline: round_half_up(sum(buckets[discipline]), len(buckets[discipline]))
            for discipline in Discipline
            if discipline in buckets
        }
