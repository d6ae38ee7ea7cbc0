"""Domain enums for progress tracking.

All of these are closed sets fixed in code. Adding a role, sector or
discipline is a code change, not a data migration.
"""

from enum import Enum

from ...shared.exceptions import ValidationError


class _ClosedEnum(str, Enum):
    """String enum that rejects unknown values with a domain ValidationError."""

    @classmethod
    def parse(cls, value: "str | _ClosedEnum") -> "_ClosedEnum":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                cls.__name__.lower(),
                value,
                f"Unknown {cls.__name__.lower()}; expected one of "
                f"{', '.join(member.value for member in cls)}",
                "UNKNOWN_ENUM_VALUE",
            ) from None

    def __str__(self) -> str:
        return self.value


class Role(_ClosedEnum):
    """User systemic privilege level."""

    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    ENGINEER = "engineer"
    OPERATOR = "operator"
    VIEWER = "viewer"
    SESMT = "sesmt"  # Workplace safety staff, read-only on project data

    @property
    def rank(self) -> int:
        """Position in admin > supervisor > engineer > operator/sesmt/viewer."""
        ranks = {
            Role.ADMIN: 3,
            Role.SUPERVISOR: 2,
            Role.ENGINEER: 1,
            Role.OPERATOR: 0,
            Role.SESMT: 0,
            Role.VIEWER: 0,
        }
        return ranks[self]

    def outranks(self, other: "Role") -> bool:
        """Check if this role strictly outranks another."""
        return self.rank > other.rank


class Discipline(_ClosedEnum):
    """Category of engineering work assigned to a task."""

    ELECTRICAL = "electrical"
    MECHANICAL = "mechanical"
    CIVIL = "civil"
    INSTRUMENTATION = "instrumentation"
    AUTOMATION = "automation"


class Sector(_ClosedEnum):
    """A user's organizational affiliation."""

    ELECTRICAL = "electrical"
    MECHANICAL = "mechanical"
    CIVIL = "civil"
    INSTRUMENTATION = "instrumentation"
    AUTOMATION = "automation"
    ALL = "all"
    OTHER = "other"

    @property
    def discipline(self) -> Discipline | None:
        """The discipline of the same name, if this sector is one."""
        try:
            return Discipline(self.value)
        except ValueError:
            return None

    @classmethod
    def for_discipline(cls, discipline: Discipline) -> "Sector | None":
        """Direct 1:1 mapping from a discipline to the sector of the same name."""
        try:
            return cls(discipline.value)
        except ValueError:
            return None


class Resource(_ClosedEnum):
    """Protected resources."""

    DASHBOARD = "dashboard"
    AREAS = "areas"
    EQUIPMENT = "equipment"
    TASKS = "tasks"
    USERS = "users"
    REPORTS = "reports"
    SETTINGS = "settings"
    PROGRESS = "progress"
    ADMIN_DASHBOARD = "admin-dashboard"
    STANDARD_TASKS = "standard-tasks"


class Action(_ClosedEnum):
    """Actions on a resource."""

    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def is_write(self) -> bool:
        return self is not Action.VIEW


class TaskStatus(_ClosedEnum):
    """Task status enumeration."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"

    @classmethod
    def derive(cls, progress: int, current: "TaskStatus") -> "TaskStatus":
        """Status implied by a new progress value, keeping the current one otherwise."""
        if progress >= 100:
            return cls.COMPLETED
        if progress > 0:
            return cls.IN_PROGRESS
        # A task rolled back to 0 cannot stay completed
        if current is cls.COMPLETED:
            return cls.PENDING
        return current

    def is_consistent_with(self, progress: int) -> bool:
        """Completed iff progress is 100."""
        if progress >= 100:
            return self is TaskStatus.COMPLETED
        return self is not TaskStatus.COMPLETED


class PriorityLevel(_ClosedEnum):
    """Priority level enumeration."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"


class AreaStatus(_ClosedEnum):
    """Area lifecycle status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    COMPLETED = "completed"
