"""
Unit tests for the EquipmentHierarchy index.
"""

from uuid import uuid4

import pytest

from projtrack.domain.progress.entities import Equipment
from projtrack.domain.progress.services import EquipmentHierarchy
from projtrack.domain.shared.exceptions import BusinessRuleError, NotFoundError


@pytest.fixture
def hierarchy(skid, pump_a, pump_b, motor):
    # Children listed first on purpose; the constructor orders parents first
    return EquipmentHierarchy([pump_a, pump_b, skid, motor])


class TestLookup:
    def test_get_and_by_tag(self, hierarchy, pump_a):
        assert hierarchy.get(pump_a.id) is pump_a
        assert hierarchy.by_tag("p-101a") is pump_a

    def test_missing_raises_not_found(self, hierarchy):
        with pytest.raises(NotFoundError):
            hierarchy.get(uuid4())
        with pytest.raises(NotFoundError):
            hierarchy.by_tag("X-1")

    def test_children_and_parent(self, hierarchy, skid, pump_a, pump_b, motor):
        assert hierarchy.children_of(skid.id) == [pump_a, pump_b]
        assert hierarchy.children_of(motor.id) == []
        assert hierarchy.parent_of(pump_b.id) is skid
        assert hierarchy.parent_of(skid.id) is None

    def test_roots_and_area(self, hierarchy, area, skid, motor):
        assert hierarchy.roots() == [skid, motor]
        assert len(hierarchy.in_area(area.id)) == 4
        assert hierarchy.in_area(uuid4()) == []

    def test_container_protocol(self, hierarchy, motor):
        assert len(hierarchy) == 4
        assert motor.id in hierarchy
        assert motor in list(hierarchy)


class TestAddValidation:
    def test_duplicate_tag_rejected(self, hierarchy, area):
        with pytest.raises(BusinessRuleError) as exc_info:
            hierarchy.add(Equipment(tag="M-200", area_id=area.id, is_parent=True))

        assert exc_info.value.rule_name == "unique_equipment_tag"

    def test_unknown_parent_rejected(self, hierarchy, area):
        with pytest.raises(BusinessRuleError) as exc_info:
            hierarchy.add(Equipment(tag="P-300", area_id=area.id, parent_tag="SK-999"))

        assert exc_info.value.rule_name == "child_references_parent"

    def test_parent_tag_must_name_a_parent(self, hierarchy, area):
        with pytest.raises(BusinessRuleError):
            hierarchy.add(Equipment(tag="P-300", area_id=area.id, parent_tag="P-101A"))

    def test_parent_must_be_in_same_area(self, hierarchy):
        with pytest.raises(BusinessRuleError) as exc_info:
            hierarchy.add(Equipment(tag="P-300", area_id=uuid4(), parent_tag="SK-100"))

        assert exc_info.value.rule_name == "child_in_parent_area"

    def test_valid_child_is_indexed(self, hierarchy, area, skid):
        child = Equipment(tag="P-101C", area_id=area.id, parent_tag="SK-100")

        hierarchy.add(child)

        assert hierarchy.children_of(skid.id)[-1] is child


class TestRemove:
    def test_parent_with_children_cannot_be_removed(self, hierarchy, skid):
        with pytest.raises(BusinessRuleError):
            hierarchy.remove(skid.id)

    def test_remove_children_then_parent(self, hierarchy, skid, pump_a, pump_b):
        hierarchy.remove(pump_a.id)
        hierarchy.remove(pump_b.id)

        assert hierarchy.remove(skid.id) is skid
        assert len(hierarchy) == 1
        with pytest.raises(NotFoundError):
            hierarchy.by_tag("SK-100")
