"""
EquipmentHierarchy

Indexed collection of equipment. Equipment is stored by id with a
secondary tag index; parent/child links are resolved through the index
rather than by scanning tags.
"""

from collections import defaultdict
from collections.abc import Iterable, Iterator
from uuid import UUID

from ...shared.exceptions import BusinessRuleError, NotFoundError
from ...shared.validation import DataSanitizer
from ..entities.equipment import Equipment


class EquipmentHierarchy:
    """Two-level parent/child equipment hierarchy."""

    def __init__(self, equipment: Iterable[Equipment] = ()) -> None:
        self._by_id: dict[UUID, Equipment] = {}
        self._id_by_tag: dict[str, UUID] = {}
        self._children: dict[UUID, list[UUID]] = defaultdict(list)

        # Parents first so children can resolve their parent tag
        for item in sorted(equipment, key=lambda e: not e.is_parent):
            self.add(item)

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Equipment]:
        return iter(self._by_id.values())

    def __contains__(self, equipment_id: object) -> bool:
        return equipment_id in self._by_id

    def add(self, equipment: Equipment) -> None:
        """
        Add equipment to the hierarchy.

        Raises:
            BusinessRuleError: On a duplicate id or tag, or a child whose
                parent tag does not name a parent in the same area
        """
        if equipment.id in self._by_id:
            raise BusinessRuleError(
                "unique_equipment_id",
                f"Equipment {equipment.id} already exists",
                {"equipment_id": str(equipment.id)},
            )
        if equipment.tag in self._id_by_tag:
            raise BusinessRuleError(
                "unique_equipment_tag",
                f"Tag '{equipment.tag}' is already in use",
                {"tag": equipment.tag},
            )
        if equipment.is_parent and equipment.parent_tag is not None:
            raise BusinessRuleError(
                "parent_without_parent_tag",
                f"Parent equipment '{equipment.tag}' cannot have a parent tag",
                {"tag": equipment.tag},
            )

        parent: Equipment | None = None
        if equipment.parent_tag is not None:
            parent_id = self._id_by_tag.get(equipment.parent_tag)
            parent = self._by_id.get(parent_id) if parent_id else None
            if parent is None or not parent.is_parent:
                raise BusinessRuleError(
                    "child_references_parent",
                    f"Parent tag '{equipment.parent_tag}' does not name a parent equipment",
                    {"tag": equipment.tag, "parent_tag": equipment.parent_tag},
                )
            if parent.area_id != equipment.area_id:
                raise BusinessRuleError(
                    "child_in_parent_area",
                    f"Equipment '{equipment.tag}' must be in the same area as "
                    f"its parent '{parent.tag}'",
                    {"tag": equipment.tag, "parent_tag": parent.tag},
                )

        self._by_id[equipment.id] = equipment
        self._id_by_tag[equipment.tag] = equipment.id
        if parent is not None:
            self._children[parent.id].append(equipment.id)

    def remove(self, equipment_id: UUID) -> Equipment:
        """
        Remove equipment from the index.

        Raises:
            NotFoundError: If the equipment is unknown
            BusinessRuleError: If the equipment still has children
        """
        equipment = self.get(equipment_id)
        if self._children.get(equipment_id):
            raise BusinessRuleError(
                "parent_has_children",
                f"Equipment '{equipment.tag}' still has child equipment",
                {"tag": equipment.tag},
            )
        parent = self.parent_of(equipment_id)
        if parent is not None:
            self._children[parent.id].remove(equipment_id)
        self._children.pop(equipment_id, None)
        del self._id_by_tag[equipment.tag]
        del self._by_id[equipment_id]
        return equipment

    def get(self, equipment_id: UUID) -> Equipment:
        try:
            return self._by_id[equipment_id]
        except KeyError:
            raise NotFoundError("Equipment", equipment_id) from None

    def by_tag(self, tag: str) -> Equipment:
        equipment_id = self._id_by_tag.get(DataSanitizer.sanitize_tag(tag))
        if equipment_id is None:
            raise NotFoundError("Equipment", tag)
        return self._by_id[equipment_id]

    def children_of(self, parent_id: UUID) -> list[Equipment]:
        self.get(parent_id)
        return [self._by_id[child_id] for child_id in self._children.get(parent_id, [])]

    def has_children(self, equipment_id: UUID) -> bool:
        return bool(self._children.get(equipment_id))

    def parent_of(self, child_id: UUID) -> Equipment | None:
        child = self.get(child_id)
        if child.parent_tag is None:
            return None
        return self._by_id[self._id_by_tag[child.parent_tag]]

    def in_area(self, area_id: UUID) -> list[Equipment]:
        return [e for e in self._by_id.values() if e.area_id == area_id]

    def roots(self) -> list[Equipment]:
        """Top-level equipment (everything without a parent)."""
        return [e for e in self._by_id.values() if e.parent_tag is None]
