"""
Unit tests for the DisciplineFilter domain service.
"""

import pytest

from projtrack.domain.progress.services import DisciplineFilter
from projtrack.domain.progress.value_objects import Discipline, Sector
from projtrack.domain.shared.exceptions import ValidationError


class TestAllowedDisciplines:
    @pytest.mark.parametrize("sector", [Sector.ALL, Sector.OTHER])
    def test_fallback_sectors_see_everything(self, sector):
        assert DisciplineFilter.allowed_disciplines(sector) == tuple(Discipline)

    @pytest.mark.parametrize(
        "sector",
        [s for s in Sector if s not in (Sector.ALL, Sector.OTHER)],
    )
    def test_named_sector_sees_itself_only(self, sector):
        assert DisciplineFilter.allowed_disciplines(sector) == (
            Discipline(sector.value),
        )

    def test_accepts_raw_strings(self):
        assert DisciplineFilter.allowed_disciplines("civil") == (Discipline.CIVIL,)

    def test_unknown_sector_rejected(self):
        with pytest.raises(ValidationError):
            DisciplineFilter.allowed_disciplines("finance")


class TestFiltering:
    def test_filter_tasks_by_sector(self, plant_tasks):
        tasks = list(plant_tasks.values())

        electrical = DisciplineFilter.filter_tasks(Sector.ELECTRICAL, tasks)

        assert {t.discipline for t in electrical} == {Discipline.ELECTRICAL}
        assert len(electrical) == 2

    def test_filter_tasks_keeps_order_for_other(self, plant_tasks):
        tasks = list(plant_tasks.values())

        assert DisciplineFilter.filter_tasks(Sector.OTHER, tasks) == tasks

    def test_can_view_discipline(self):
        assert DisciplineFilter.can_view_discipline("mechanical", "mechanical")
        assert not DisciplineFilter.can_view_discipline("mechanical", "civil")
        assert DisciplineFilter.can_view_discipline("all", "civil")
