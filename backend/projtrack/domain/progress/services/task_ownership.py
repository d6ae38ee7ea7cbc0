"""
TaskOwnershipResolver Domain Service

Decides whether an actor may mutate a specific task. Supervisors are
sector-scoped unless their sector is explicitly "all".
"""

from collections.abc import Iterable
from typing import Any, TypeVar

from ...shared.exceptions import PermissionDeniedError
from ..value_objects.actor import Actor
from ..value_objects.enums import Action, Discipline, Resource, Role, Sector
from .permission_engine import PermissionEngine

_T = TypeVar("_T")


def _discipline_of(task: Any) -> Discipline:
    if isinstance(task, (Discipline, str)):
        return Discipline.parse(task)
    return Discipline.parse(task.discipline)


class TaskOwnershipResolver:
    """Layered role/sector rules for task edits, first match wins."""

    @staticmethod
    def can_edit_task(actor: Actor, task: Any) -> bool:
        """
        Check whether ``actor`` may edit ``task``.

        Args:
            actor: The acting user
            task: A task (anything with a ``discipline``) or a bare discipline

        Returns:
            True if the edit is allowed
        """
        discipline = _discipline_of(task)

        if actor.role is Role.ADMIN:
            return True

        if actor.role is Role.SUPERVISOR:
            if actor.sector is Sector.ALL:
                return True
            return actor.sector is Sector.for_discipline(discipline)

        return PermissionEngine.can(
            actor.role, Resource.TASKS, Action.UPDATE
        ) and PermissionEngine.can(actor.role, Resource.PROGRESS, Action.UPDATE)

    @staticmethod
    def require_edit(actor: Actor, task: Any) -> None:
        """
        Enforce :meth:`can_edit_task`.

        Raises:
            PermissionDeniedError: If the actor may not edit the task
        """
        if TaskOwnershipResolver.can_edit_task(actor, task):
            return

        discipline = _discipline_of(task)
        reason = None
        if actor.role is Role.SUPERVISOR:
            reason = (
                f"sector '{actor.sector.value}' does not cover discipline "
                f"'{discipline.value}'"
            )
        raise PermissionDeniedError(
            actor.role.value, Resource.TASKS.value, Action.UPDATE.value, reason
        )

    @staticmethod
    def editable_tasks(actor: Actor, tasks: Iterable[_T]) -> list[_T]:
        return [t for t in tasks if TaskOwnershipResolver.can_edit_task(actor, t)]
