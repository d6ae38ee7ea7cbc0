"""
Unit tests for the ProgressRollupService.
"""

from uuid import uuid4

import pytest

from projtrack.domain.progress.events import EquipmentProgressRecalculated
from projtrack.domain.progress.value_objects import ProgressState
from projtrack.domain.shared.exceptions import BusinessRuleError, NotFoundError


class TestRefresh:
    def test_child_refresh_updates_parent_and_area(
        self,
        rollup_service,
        equipment_repository,
        area_repository,
        area,
        skid,
        pump_a,
    ):
        rollup = rollup_service.refresh(pump_a.id)

        assert rollup.average_progress == 20
        assert equipment_repository.find_by_id(pump_a.id).average_progress == 20
        # Children 20 and 60 weigh equally
        assert equipment_repository.find_by_id(skid.id).average_progress == 40
        assert equipment_repository.find_by_id(skid.id).task_count == 3

        stored_area = area_repository.find_by_id(area.id)
        assert stored_area.average_progress == 37
        assert stored_area.equipment_count == 2

    def test_childless_parent_uses_own_tasks(
        self, rollup_service, equipment_repository, motor
    ):
        rollup = rollup_service.refresh(motor.id)

        assert rollup.average_progress == 40
        assert equipment_repository.find_by_id(motor.id).task_count == 3

    def test_publishes_changes_only(self, rollup_service, event_bus, pump_a):
        rollup_service.refresh(pump_a.id)
        first = event_bus.get_event_history(EquipmentProgressRecalculated)

        rollup_service.refresh(pump_a.id)
        second = event_bus.get_event_history(EquipmentProgressRecalculated)

        assert len(first) == 3
        assert {(e.old_average, e.new_average) for e in first} == {
            (0, 20),
            (0, 40),
            (0, 37),
        }
        assert len(second) == len(first)

    def test_reflects_live_task_changes(
        self, rollup_service, task_repository, equipment_repository, plant_tasks, skid, pump_b
    ):
        task = plant_tasks["pump_b_mech"]
        task_repository.update_progress(
            task.id, task.state, ProgressState(progress=100)
        )

        rollup_service.refresh(pump_b.id)

        assert equipment_repository.find_by_id(pump_b.id).completed_count == 1
        # (20 + 100) / 2 after pump A has been computed from its tasks
        assert equipment_repository.find_by_id(skid.id).average_progress == 60

    def test_unknown_equipment(self, rollup_service):
        with pytest.raises(NotFoundError):
            rollup_service.refresh(uuid4())

    def test_dangling_parent_tag(self, rollup_service, equipment_repository, skid, pump_a):
        equipment_repository.delete(skid.id)

        with pytest.raises(BusinessRuleError) as exc_info:
            rollup_service.refresh(pump_a.id)

        assert exc_info.value.rule_name == "child_references_parent"

    def test_reuses_given_hierarchy(
        self, rollup_service, equipment_repository, skid, pump_a
    ):
        hierarchy = rollup_service.hierarchy_for(pump_a)

        rollup_service.refresh(pump_a.id, hierarchy)

        assert [c.tag for c in hierarchy.children_of(skid.id)] == ["P-101A", "P-101B"]
        assert equipment_repository.find_by_id(skid.id).average_progress == 40
