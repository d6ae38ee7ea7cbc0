from .in_memory import (
    InMemoryAreaRepository,
    InMemoryEquipmentRepository,
    InMemoryProgressHistoryRepository,
    InMemoryTaskRepository,
)

__all__ = [
    "InMemoryAreaRepository",
    "InMemoryEquipmentRepository",
    "InMemoryProgressHistoryRepository",
    "InMemoryTaskRepository",
]
