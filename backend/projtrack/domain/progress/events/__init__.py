"""Domain events for progress tracking."""

from .domain_events import (
    DomainEvent,
    EquipmentProgressRecalculated,
    HistoryEntryDeleted,
    ProgressRecorded,
)

__all__ = [
    "DomainEvent",
    "EquipmentProgressRecalculated",
    "HistoryEntryDeleted",
    "ProgressRecorded",
]
