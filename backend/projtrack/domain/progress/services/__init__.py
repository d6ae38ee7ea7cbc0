"""Domain services for progress tracking."""

from .deletion_policy import DeletionPolicy
from .discipline_filter import DisciplineFilter
from .equipment_hierarchy import EquipmentHierarchy
from .hierarchy_aggregator import HierarchyAggregator, round_half_up
from .permission_engine import ROLE_PERMISSIONS, PermissionEngine
from .progress_ledger import ProgressHistoryLedger
from .rollup_service import ProgressRollupService
from .task_ownership import TaskOwnershipResolver

__all__ = [
    "DeletionPolicy",
    "DisciplineFilter",
    "EquipmentHierarchy",
    "HierarchyAggregator",
    "PermissionEngine",
    "ProgressHistoryLedger",
    "ProgressRollupService",
    "ROLE_PERMISSIONS",
    "TaskOwnershipResolver",
    "round_half_up",
]
