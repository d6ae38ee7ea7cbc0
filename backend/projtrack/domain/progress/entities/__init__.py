"""Entities for the progress tracking domain."""

from .area import Area
from .equipment import Equipment
from .history import ProgressHistoryEntry
from .task import EquipmentTask

__all__ = ["Area", "Equipment", "EquipmentTask", "ProgressHistoryEntry"]
