"""Value objects for the progress tracking domain."""

from .actor import Actor
from .enums import (
    Action,
    AreaStatus,
    Discipline,
    PriorityLevel,
    Resource,
    Role,
    Sector,
    TaskStatus,
)
from .permission import Permission, grant
from .progress import AreaRollUp, ProgressState, RollUp

__all__ = [
    "Actor",
    # Enums
    "Action",
    "AreaStatus",
    "Discipline",
    "PriorityLevel",
    "Resource",
    "Role",
    "Sector",
    "TaskStatus",
    # Permissions
    "Permission",
    "grant",
    # Progress
    "AreaRollUp",
    "ProgressState",
    "RollUp",
]
