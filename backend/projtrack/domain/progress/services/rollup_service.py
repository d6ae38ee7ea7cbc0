"""
ProgressRollupService

Recomputes the derived progress of an equipment, its parent and its area
through the repository ports after a task changes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from ...shared.base import DomainService
from ...shared.exceptions import NotFoundError
from ..entities.area import Area
from ..entities.equipment import Equipment
from ..events.domain_events import EquipmentProgressRecalculated
from ..repositories.interfaces import (
    AreaRepository,
    EquipmentRepository,
    TaskRepository,
)
from ..value_objects.progress import RollUp
from .equipment_hierarchy import EquipmentHierarchy
from .hierarchy_aggregator import HierarchyAggregator

if TYPE_CHECKING:
    from ....infrastructure.events.event_bus import EventBusInterface

logger = logging.getLogger(__name__)


class ProgressRollupService(DomainService):
    """Writes aggregator results back onto equipment and area entities."""

    def __init__(
        self,
        equipment_repository: EquipmentRepository,
        task_repository: TaskRepository,
        area_repository: AreaRepository | None = None,
        event_bus: EventBusInterface | None = None,
    ) -> None:
        self._equipment = equipment_repository
        self._tasks = task_repository
        self._areas = area_repository
        self._event_bus = event_bus

    def hierarchy_for(self, equipment: Equipment) -> EquipmentHierarchy:
        """
        Index the stored equipment of ``equipment``'s area.

        Raises:
            BusinessRuleError: If the stored parent/child links are broken
        """
        return EquipmentHierarchy(self._equipment.find_by_area(equipment.area_id))

    def refresh(
        self, equipment_id: UUID, hierarchy: EquipmentHierarchy | None = None
    ) -> RollUp:
        """
        Recompute one equipment, then its parent, then its area.

        Args:
            equipment_id: Equipment whose tasks changed
            hierarchy: Pre-built index of the equipment's area; built from
                the repository when omitted

        Returns:
            The refreshed roll-up of ``equipment_id``

        Raises:
            NotFoundError: If the equipment does not exist
            BusinessRuleError: If the area's parent/child links are broken
        """
        if hierarchy is None:
            equipment = self._equipment.find_by_id(equipment_id)
            if equipment is None:
                raise NotFoundError("Equipment", equipment_id)
            hierarchy = self.hierarchy_for(equipment)
        equipment = hierarchy.get(equipment_id)

        rollup = self._refresh_equipment(equipment, hierarchy)

        parent = hierarchy.parent_of(equipment.id)
        if parent is not None:
            self._refresh_equipment(parent, hierarchy)

        if self._areas is not None:
            area = self._areas.find_by_id(equipment.area_id)
            if area is not None:
                self._refresh_area(area, list(hierarchy))

        return rollup

    def compute(
        self, equipment: Equipment, hierarchy: EquipmentHierarchy | None = None
    ) -> RollUp:
        """Roll-up of one equipment computed from the live tasks."""
        own_tasks = self._tasks.find_by_equipment(equipment.id)
        if not equipment.is_parent:
            return HierarchyAggregator.summarize_tasks(own_tasks)

        if hierarchy is None:
            hierarchy = self.hierarchy_for(equipment)
        children = [
            HierarchyAggregator.summarize_tasks(self._tasks.find_by_equipment(c.id))
            for c in hierarchy.children_of(equipment.id)
        ]
        return HierarchyAggregator.aggregate(own_tasks, children)

    def _refresh_equipment(
        self, equipment: Equipment, hierarchy: EquipmentHierarchy
    ) -> RollUp:
        rollup = self.compute(equipment, hierarchy)
        old_average = equipment.average_progress

        equipment.apply_rollup(rollup)
        self._equipment.save(equipment)

        if old_average != rollup.average_progress:
            logger.debug(
                "Equipment %s progress %d%% -> %d%%",
                equipment.tag,
                old_average,
                rollup.average_progress,
            )
            self._publish(
                EquipmentProgressRecalculated(
                    equipment_id=equipment.id,
                    area_id=equipment.area_id,
                    old_average=old_average,
                    new_average=rollup.average_progress,
                )
            )
        return rollup

    def _refresh_area(self, area: Area, equipment: list[Equipment]) -> None:
        tasks = [t for e in equipment for t in self._tasks.find_by_equipment(e.id)]
        rollup = HierarchyAggregator.aggregate_area(equipment, tasks)
        old_average = area.average_progress

        area.apply_rollup(rollup)
        self._areas.save(area)

        if old_average != rollup.average_progress:
            self._publish(
                EquipmentProgressRecalculated(
                    equipment_id=None,
                    area_id=area.id,
                    old_average=old_average,
                    new_average=rollup.average_progress,
                )
            )

    def _publish(self, event: EquipmentProgressRecalculated) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)
