"""
DeletionPolicy Domain Service

Guards removal of tasks, equipment and users. Work that has been started
or logged is never deleted.
"""

from collections.abc import Iterable

from ...shared.exceptions import BusinessRuleError, PermissionDeniedError
from ..entities.equipment import Equipment
from ..entities.history import ProgressHistoryEntry
from ..entities.task import EquipmentTask
from ..value_objects.actor import Actor
from ..value_objects.enums import Action, Resource, Role
from .equipment_hierarchy import EquipmentHierarchy
from .permission_engine import PermissionEngine


class DeletionPolicy:
    """Raises on forbidden deletions; returns None when the deletion may proceed."""

    @staticmethod
    def check_task_deletion(
        actor: Actor,
        task: EquipmentTask,
        history: Iterable[ProgressHistoryEntry] = (),
    ) -> None:
        """
        Check that a task may be deleted.

        Raises:
            PermissionDeniedError: Missing (tasks, delete), or a non-admin
                deleting a standard task
            BusinessRuleError: The task has progress, history or photos
        """
        PermissionEngine.require(actor.role, Resource.TASKS, Action.DELETE)

        details = {"task_id": str(task.id), "discipline": task.discipline.value}
        if task.current_progress > 0:
            raise BusinessRuleError(
                "task_without_progress",
                f"Task has {task.current_progress}% progress recorded",
                details,
            )

        entries = [
            e
            for e in history
            if e.equipment_id == task.equipment_id and e.discipline is task.discipline
        ]
        if any(e.has_photos for e in entries):
            raise BusinessRuleError(
                "task_without_photos", "Task has photos attached to its history", details
            )
        if entries:
            raise BusinessRuleError(
                "task_without_history",
                f"Task has {len(entries)} progress history entries",
                details,
            )

        if not task.is_custom and actor.role is not Role.ADMIN:
            raise PermissionDeniedError(
                actor.role.value,
                Resource.TASKS.value,
                Action.DELETE.value,
                "only administrators may delete standard tasks",
            )

    @staticmethod
    def check_equipment_deletion(
        actor: Actor,
        equipment: Equipment,
        hierarchy: EquipmentHierarchy,
        tasks: Iterable[EquipmentTask] = (),
        history: Iterable[ProgressHistoryEntry] = (),
    ) -> None:
        """
        Check that an equipment may be deleted.

        Raises:
            PermissionDeniedError: Missing (equipment, delete)
            BusinessRuleError: A parent with children, a child with tasks,
                or equipment with progress history
        """
        PermissionEngine.require(actor.role, Resource.EQUIPMENT, Action.DELETE)

        details = {"tag": equipment.tag}
        if equipment.is_parent and hierarchy.has_children(equipment.id):
            raise BusinessRuleError(
                "parent_without_children",
                f"Equipment '{equipment.tag}' still has child equipment",
                details,
            )

        if any(e.equipment_id == equipment.id for e in history):
            raise BusinessRuleError(
                "equipment_without_history",
                f"Equipment '{equipment.tag}' has progress history",
                details,
            )

        if not equipment.is_parent and any(
            t.equipment_id == equipment.id for t in tasks
        ):
            raise BusinessRuleError(
                "child_without_tasks",
                f"Equipment '{equipment.tag}' still has tasks",
                details,
            )

    @staticmethod
    def check_user_deletion(actor: Actor, target_role: Role | str) -> None:
        """
        Raises:
            PermissionDeniedError: Unless the actor strictly outranks the target
        """
        target_role = Role.parse(target_role)
        if not PermissionEngine.can_delete_user(actor.role, target_role):
            raise PermissionDeniedError(
                actor.role.value,
                Resource.USERS.value,
                Action.DELETE.value,
                f"cannot delete a user with role '{target_role.value}'",
            )
