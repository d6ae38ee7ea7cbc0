"""Repository ports for the progress tracking domain."""

from .interfaces import (
    AreaRepository,
    EquipmentRepository,
    ProgressHistoryRepository,
    TaskRepository,
)

__all__ = [
    "AreaRepository",
    "EquipmentRepository",
    "ProgressHistoryRepository",
    "TaskRepository",
]
