"""
ProgressHistoryLedger Domain Service

Validates progress updates, applies them to the live task under an
optimistic-concurrency check, and appends an immutable history entry.

The live task's ``current_progress`` is the source of truth. The history
is a log kept next to it: deleting an entry never changes the task.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from ....core.config import settings
from ....core.observability import (
    bind_actor,
    record_history_deletion,
    record_progress_update,
)
from ...shared.base import DomainService, utcnow
from ...shared.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    PostCommitError,
    ValidationError,
)
from ...shared.validation import DataSanitizer, ProgressValidators
from ..entities.equipment import Equipment
from ..entities.history import ProgressHistoryEntry
from ..entities.task import EquipmentTask
from ..events.domain_events import HistoryEntryDeleted, ProgressRecorded
from ..repositories.interfaces import (
    EquipmentRepository,
    ProgressHistoryRepository,
    TaskRepository,
)
from ..value_objects.actor import Actor
from ..value_objects.enums import Action, Discipline, Resource, TaskStatus
from ..value_objects.progress import ProgressState
from .equipment_hierarchy import EquipmentHierarchy
from .permission_engine import PermissionEngine
from .rollup_service import ProgressRollupService
from .task_ownership import TaskOwnershipResolver

if TYPE_CHECKING:
    from ....infrastructure.events.event_bus import EventBusInterface

logger = logging.getLogger(__name__)

StateLike = ProgressState | int


class ProgressHistoryLedger(DomainService):
    """Append-only audit trail of progress per (equipment, discipline)."""

    def __init__(
        self,
        equipment_repository: EquipmentRepository,
        task_repository: TaskRepository,
        history_repository: ProgressHistoryRepository,
        rollup_service: ProgressRollupService | None = None,
        event_bus: EventBusInterface | None = None,
        clock: Callable[[], datetime] = utcnow,
        max_photos: int | None = None,
        observations_max_length: int | None = None,
    ) -> None:
        self._equipment = equipment_repository
        self._tasks = task_repository
        self._history = history_repository
        self._rollup = rollup_service
        self._event_bus = event_bus
        self._clock = clock
        self._max_photos = (
            settings.MAX_PHOTOS_PER_UPDATE if max_photos is None else max_photos
        )
        self._observations_max_length = (
            settings.OBSERVATIONS_MAX_LENGTH
            if observations_max_length is None
            else observations_max_length
        )

    def record_update(
        self,
        equipment_id: UUID,
        discipline: Discipline | str,
        previous: StateLike,
        next_state: StateLike,
        actor: Actor,
        observations: str | None = None,
        photos: Sequence[Any] | None = None,
        actual_hours: float | None = None,
    ) -> ProgressHistoryEntry:
        """
        Record a progress change for the (equipment, discipline) task.

        Checks run in order: input validation, existence, ownership, the
        stored equipment hierarchy, then staleness of ``previous`` against
        the live task. Nothing is written unless every check passes.

        The roll-up refresh and event publication run after the write. If
        either fails the update stays committed and ``PostCommitError``
        carries the appended entry.

        Args:
            equipment_id: Equipment the task belongs to
            discipline: Discipline of the task
            previous: The caller's last known state (progress, optionally status)
            next_state: Requested state; status is derived from progress when omitted
            actor: The acting user
            observations: Optional free-text note
            photos: Optional opaque photo payloads
            actual_hours: Optional worked hours to store on the task

        Returns:
            The appended history entry

        Raises:
            ValidationError: Malformed progress, status, observations or photos
            NotFoundError: Unknown equipment or no task for the discipline
            PermissionDeniedError: Actor may not edit the task
            ConflictError: ``previous`` is stale
            BusinessRuleError: The equipment's stored hierarchy is broken
            PostCommitError: Committed, but roll-up or publication failed
        """
        bind_actor(actor.id)
        try:
            entry = self._record_update(
                equipment_id,
                discipline,
                previous,
                next_state,
                actor,
                observations,
                photos,
                actual_hours,
            )
        except ValidationError:
            record_progress_update("invalid")
            raise
        except NotFoundError:
            record_progress_update("not_found")
            raise
        except PermissionDeniedError:
            record_progress_update("denied")
            raise
        except ConflictError:
            record_progress_update("conflict")
            raise
        except BusinessRuleError:
            record_progress_update("rejected")
            raise
        except PostCommitError:
            record_progress_update("post_commit_error")
            raise

        record_progress_update("recorded")
        return entry

    def _record_update(
        self,
        equipment_id: UUID,
        discipline: Discipline | str,
        previous: StateLike,
        next_state: StateLike,
        actor: Actor,
        observations: str | None,
        photos: Sequence[Any] | None,
        actual_hours: float | None,
    ) -> ProgressHistoryEntry:
        discipline = Discipline.parse(discipline)
        previous_state = self._coerce_state(previous, "previous_progress")
        requested = self._coerce_state(next_state, "progress")
        observations = self._clean_observations(observations)
        photos = ProgressValidators.validate_photos(photos, self._max_photos)
        if actual_hours is not None and actual_hours < 0:
            raise ValidationError(
                "actual_hours", actual_hours, "Hours cannot be negative", "BELOW_MINIMUM"
            )

        equipment = self._get_equipment(equipment_id)
        task = self._get_task(equipment, discipline)

        TaskOwnershipResolver.require_edit(actor, task)

        hierarchy: EquipmentHierarchy | None = None
        if self._rollup is not None:
            hierarchy = self._rollup.hierarchy_for(equipment)

        live_state = task.state
        if not previous_state.matches(live_state):
            logger.info(
                "Stale progress update on %s/%s: expected %s, live %s",
                equipment.tag,
                discipline.value,
                previous_state,
                live_state,
            )
            raise ConflictError(
                f"Progress of {equipment.tag}/{discipline.value} changed since it "
                "was read; re-fetch and retry",
                expected=previous_state,
                actual=live_state,
            )

        new_state = ProgressState(
            progress=requested.progress,
            status=requested.status
            or TaskStatus.derive(requested.progress, live_state.status),
        )
        entry = ProgressHistoryEntry(
            id=self._history.next_id(),
            equipment_id=equipment.id,
            discipline=discipline,
            task_id=task.id,
            previous_progress=live_state.progress,
            new_progress=new_state.progress,
            previous_status=live_state.status,
            new_status=new_state.status,
            observations=observations,
            photos=photos,
            updated_by=actor.id,
            updated_at=self._clock(),
        )

        self._tasks.update_progress(task.id, live_state, new_state, actual_hours)
        self._history.append(entry)

        logger.debug(
            "Recorded progress %s/%s %d%% -> %d%% by %s",
            equipment.tag,
            discipline.value,
            entry.previous_progress,
            entry.new_progress,
            actor.id,
        )

        self._after_commit(entry, hierarchy)
        return entry

    def _after_commit(
        self, entry: ProgressHistoryEntry, hierarchy: EquipmentHierarchy | None
    ) -> None:
        step = "roll-up"
        try:
            if self._rollup is not None:
                self._rollup.refresh(entry.equipment_id, hierarchy)

            step = "event publication"
            self._publish(
                ProgressRecorded(
                    entry_id=entry.id,
                    equipment_id=entry.equipment_id,
                    task_id=entry.task_id,
                    discipline=entry.discipline,
                    previous_progress=entry.previous_progress,
                    new_progress=entry.new_progress,
                    previous_status=entry.previous_status,
                    new_status=entry.new_status,
                    updated_by=entry.updated_by,
                )
            )
        except Exception as e:
            logger.exception(
                "Progress entry %d committed but %s failed", entry.id, step
            )
            raise PostCommitError(entry, step, e) from e

    def delete_entry(self, entry_id: int, actor: Actor) -> ProgressHistoryEntry:
        """
        Delete one history entry. Only admins and supervisors may do so.

        The live task is not recomputed from the remaining history.

        Raises:
            PermissionDeniedError: If the actor may not delete history
            NotFoundError: If the entry does not exist
        """
        bind_actor(actor.id)
        try:
            PermissionEngine.require(actor.role, Resource.PROGRESS, Action.DELETE)
        except PermissionDeniedError:
            record_history_deletion("denied")
            raise

        entry = self._history.find_by_id(entry_id)
        if entry is None:
            record_history_deletion("not_found")
            raise NotFoundError("ProgressHistoryEntry", entry_id)

        self._history.delete(entry_id)
        record_history_deletion("deleted")
        logger.info("History entry %s deleted by %s", entry_id, actor.id)

        self._publish(
            HistoryEntryDeleted(
                entry_id=entry.id,
                equipment_id=entry.equipment_id,
                discipline=entry.discipline,
                deleted_by=actor.id,
            )
        )
        return entry

    def history(
        self,
        equipment_id: UUID,
        discipline: Discipline | str,
        newest_first: bool = False,
    ) -> list[ProgressHistoryEntry]:
        """Entries of one (equipment, discipline), ordered by (updated_at, id)."""
        entries = self._history.find_by_equipment_and_discipline(
            equipment_id, Discipline.parse(discipline)
        )
        return sorted(entries, key=lambda e: e.sort_key, reverse=newest_first)

    def current_state(
        self, equipment_id: UUID, discipline: Discipline | str
    ) -> ProgressState:
        """
        Live state of the task; pass it back as ``previous`` when recording.

        Raises:
            NotFoundError: Unknown equipment or no task for the discipline
        """
        equipment = self._get_equipment(equipment_id)
        return self._get_task(equipment, Discipline.parse(discipline)).state

    def _get_equipment(self, equipment_id: UUID) -> Equipment:
        equipment = self._equipment.find_by_id(equipment_id)
        if equipment is None:
            raise NotFoundError("Equipment", equipment_id)
        return equipment

    def _get_task(self, equipment: Equipment, discipline: Discipline) -> EquipmentTask:
        task = self._tasks.find_by_equipment_and_discipline(equipment.id, discipline)
        if task is None:
            raise NotFoundError("EquipmentTask", f"{equipment.tag}/{discipline.value}")
        return task

    @staticmethod
    def _coerce_state(value: StateLike, field_name: str) -> ProgressState:
        if isinstance(value, ProgressState):
            progress = ProgressValidators.validate_progress(value.progress, field_name)
            status = value.status
        else:
            progress = ProgressValidators.validate_progress(value, field_name)
            status = None

        if status is not None and not status.is_consistent_with(progress):
            raise ValidationError(
                "status",
                status.value,
                f"Status '{status.value}' contradicts progress {progress}",
                "INCONSISTENT_STATUS",
            )
        return ProgressState(progress=progress, status=status)

    def _clean_observations(self, observations: str | None) -> str | None:
        if observations is None:
            return None
        cleaned = DataSanitizer.sanitize_string(
            observations,
            max_length=self._observations_max_length,
            field_name="observations",
        )
        return cleaned or None

    def _publish(self, event: Any) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)
