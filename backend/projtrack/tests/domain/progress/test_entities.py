"""
Unit tests for progress domain entities.
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from projtrack.domain.progress.entities import (
    Area,
    Equipment,
    EquipmentTask,
    ProgressHistoryEntry,
)
from projtrack.domain.progress.value_objects import (
    AreaRollUp,
    Discipline,
    ProgressState,
    RollUp,
    TaskStatus,
)
from projtrack.domain.shared.exceptions import ValidationError


class TestEquipment:
    def test_tag_is_normalised(self):
        equipment = Equipment(tag="  p-101a ", area_id=uuid4(), is_parent=True)

        assert equipment.tag == "P-101A"

    def test_invalid_tag_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Equipment(tag="P 101", area_id=uuid4(), is_parent=True)

        assert exc_info.value.error_code == "INVALID_FORMAT"

    def test_parent_cannot_have_parent_tag(self):
        with pytest.raises(ValidationError) as exc_info:
            Equipment(tag="SK-1", area_id=uuid4(), is_parent=True, parent_tag="SK-0")

        assert exc_info.value.error_code == "PARENT_WITH_PARENT_TAG"

    def test_child_requires_parent_tag(self):
        with pytest.raises(ValidationError) as exc_info:
            Equipment(tag="P-1", area_id=uuid4(), is_parent=False)

        assert exc_info.value.error_code == "CHILD_WITHOUT_PARENT_TAG"

    def test_child_cannot_be_its_own_parent(self):
        with pytest.raises(ValidationError):
            Equipment(tag="P-1", area_id=uuid4(), parent_tag="p-1")

    def test_apply_rollup(self, skid):
        skid.apply_rollup(RollUp(average_progress=55, task_count=4, completed_count=1))

        assert skid.average_progress == 55
        assert skid.rollup.task_count == 4
        assert skid.updated_at is not None


class TestEquipmentTask:
    def test_defaults(self, pump_a):
        task = EquipmentTask(
            equipment_id=pump_a.id, discipline="electrical", name="Cable pulling"
        )

        assert task.current_progress == 0
        assert task.status is TaskStatus.PENDING
        assert task.priority.value == "normal"
        assert not task.is_custom
        assert task.is_valid()

    def test_contradictory_status_is_invalid(self, make_task, pump_a):
        task = make_task(pump_a, progress=50, status=TaskStatus.COMPLETED)

        assert not task.is_valid()
        with pytest.raises(ValueError):
            task.validate_entity()

    def test_unknown_discipline_rejected(self, pump_a):
        with pytest.raises(ValidationError):
            EquipmentTask(equipment_id=pump_a.id, discipline="welding", name="Weld")

    def test_apply_progress_derives_status(self, make_task, pump_a):
        task = make_task(pump_a, progress=0)

        task.apply_progress(ProgressState(progress=100))

        assert task.current_progress == 100
        assert task.status is TaskStatus.COMPLETED
        assert task.completed_date is not None

    def test_rollback_clears_completion(self, make_task, pump_a):
        task = make_task(pump_a, progress=100)
        task.apply_progress(ProgressState(progress=100))

        task.apply_progress(ProgressState(progress=0))

        assert task.status is TaskStatus.PENDING
        assert task.completed_date is None

    def test_apply_progress_records_hours(self, make_task, pump_a):
        task = make_task(pump_a, progress=10)

        task.apply_progress(ProgressState(progress=20), actual_hours=6.5)

        assert task.actual_hours == 6.5
        assert task.state == ProgressState(progress=20, status=TaskStatus.IN_PROGRESS)


class TestArea:
    def test_name_is_required(self):
        with pytest.raises(ValidationError):
            Area(name="   ")

    def test_apply_rollup(self, area):
        area.apply_rollup(AreaRollUp(average_progress=33, equipment_count=2))

        assert area.average_progress == 33
        assert area.equipment_count == 2


class TestProgressHistoryEntry:
    def _entry(self, **overrides):
        values = dict(
            id=1,
            equipment_id=uuid4(),
            discipline=Discipline.CIVIL,
            previous_progress=10,
            new_progress=30,
            previous_status=TaskStatus.IN_PROGRESS,
            new_status=TaskStatus.IN_PROGRESS,
            updated_by=1,
            updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        values.update(overrides)
        return ProgressHistoryEntry(**values)

    def test_entry_is_frozen(self):
        entry = self._entry()

        with pytest.raises(Exception):
            entry.new_progress = 50

    def test_sort_key_breaks_ties_by_id(self):
        first = self._entry(id=1)
        second = self._entry(id=2)

        assert sorted([second, first], key=lambda e: e.sort_key) == [first, second]

    def test_delta_and_photos(self):
        entry = self._entry(photos=(b"\x89PNG",))

        assert entry.delta == 20
        assert entry.has_photos
