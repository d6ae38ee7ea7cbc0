"""
Unit tests for the HierarchyAggregator domain service.
"""

from decimal import Decimal

import pytest

from projtrack.domain.progress.services import HierarchyAggregator, round_half_up
from projtrack.domain.progress.value_objects import Discipline, RollUp


def _children(*averages):
    return [RollUp(average_progress=a, task_count=1) for a in averages]


class TestRounding:
    @pytest.mark.parametrize(
        "total,count,expected",
        [(200, 3, 67), (1, 2, 1), (5, 10, 1), (249, 10, 25), (0, 0, 0), (100, 1, 100)],
    )
    def test_round_half_up(self, total, count, expected):
        assert round_half_up(total, count) == expected

    def test_clamped(self):
        assert round_half_up(500, 2) == 100
        assert round_half_up(-10, 2) == 0

    def test_accepts_decimal(self):
        assert round_half_up(Decimal("12.5"), 1) == 13


class TestAggregate:
    def test_two_children_average(self):
        assert HierarchyAggregator.aggregate([], _children(40, 60)).average_progress == 50

    def test_three_children_round_half_up(self):
        assert (
            HierarchyAggregator.aggregate([], _children(0, 100, 100)).average_progress
            == 67
        )

    def test_childless_parent_uses_own_tasks(self, make_task, motor):
        tasks = [make_task(motor, d, p) for d, p in zip(Discipline, (20, 40, 60))]

        rollup = HierarchyAggregator.aggregate(tasks, [])

        assert rollup.average_progress == 40
        assert rollup.task_count == 3

    def test_childless_parent_without_tasks_is_zero(self):
        assert HierarchyAggregator.aggregate([], []) == RollUp(average_progress=0)

    def test_children_weighted_equally(self, make_task, motor):
        """A child with many tasks counts the same as a child with one."""
        children = [
            RollUp(average_progress=100, task_count=10, completed_count=10),
            RollUp(average_progress=0, task_count=1),
        ]
        own_tasks = [make_task(motor, progress=90)]

        rollup = HierarchyAggregator.aggregate(own_tasks, children)

        assert rollup.average_progress == 50
        assert rollup.task_count == 11
        assert rollup.completed_count == 10

    def test_accepts_equipment_as_children(self, pump_a, pump_b):
        pump_a.apply_rollup(RollUp(average_progress=30, task_count=2))
        pump_b.apply_rollup(RollUp(average_progress=71, task_count=1))

        assert HierarchyAggregator.aggregate([], [pump_a, pump_b]).average_progress == 51


class TestSummaries:
    def test_summarize_tasks_counts_completed(self, make_task, pump_a):
        tasks = [
            make_task(pump_a, Discipline.MECHANICAL, 100),
            make_task(pump_a, Discipline.ELECTRICAL, 50),
        ]

        rollup = HierarchyAggregator.summarize_tasks(tasks)

        assert rollup == RollUp(average_progress=75, task_count=2, completed_count=1)

    def test_area_rollup(self, skid, pump_a, pump_b, motor, plant_tasks):
        rollup = HierarchyAggregator.aggregate_area(
            [skid, pump_a, pump_b, motor], plant_tasks.values()
        )

        # (40 + 0 + 60 + 20 + 40 + 60) / 6
        assert rollup.average_progress == 37
        assert rollup.equipment_count == 2
        assert rollup.task_count == 6

    def test_area_rollup_ignores_foreign_tasks(self, pump_a, plant_tasks):
        rollup = HierarchyAggregator.aggregate_area([pump_a], plant_tasks.values())

        assert rollup.average_progress == 20
        assert rollup.task_count == 2

    def test_progress_by_discipline(self, plant_tasks):
        breakdown = HierarchyAggregator.progress_by_discipline(plant_tasks.values())

        assert breakdown == {
            Discipline.ELECTRICAL: 10,
            Discipline.MECHANICAL: 53,
            Discipline.INSTRUMENTATION: 40,
        }
        assert list(breakdown) == [
            Discipline.ELECTRICAL,
            Discipline.MECHANICAL,
            Discipline.INSTRUMENTATION,
        ]
