"""
PermissionEngine Domain Service

Table-driven role based access control. Every (role, resource, action)
triple resolves to exactly one outcome: allowed if the role's permission
set contains it, denied otherwise.
"""

import logging

from ....core.config import settings
from ....core.observability import record_permission_decision
from ...shared.exceptions import PermissionDeniedError
from ..value_objects.enums import Action, Resource, Role
from ..value_objects.permission import Permission, grant

logger = logging.getLogger(__name__)

_ALL_ACTIONS = (Action.VIEW, Action.CREATE, Action.UPDATE, Action.DELETE)

# Role-Permission Matrix with hierarchical inheritance
_VIEWER_PERMISSIONS: frozenset[Permission] = frozenset(
    grant(Resource.DASHBOARD, Action.VIEW)
    | grant(Resource.AREAS, Action.VIEW)
    | grant(Resource.EQUIPMENT, Action.VIEW)
    | grant(Resource.TASKS, Action.VIEW)
    | grant(Resource.REPORTS, Action.VIEW)
    | grant(Resource.PROGRESS, Action.VIEW)
    | grant(Resource.STANDARD_TASKS, Action.VIEW)
)

# Field roles: progress recording, subject to task ownership
_FIELD_PERMISSIONS: frozenset[Permission] = _VIEWER_PERMISSIONS | frozenset(
    grant(Resource.TASKS, Action.UPDATE) | grant(Resource.PROGRESS, Action.UPDATE)
)

_SUPERVISOR_PERMISSIONS: frozenset[Permission] = _FIELD_PERMISSIONS | frozenset(
    grant(Resource.AREAS, *_ALL_ACTIONS)
    | grant(Resource.EQUIPMENT, *_ALL_ACTIONS)
    | grant(Resource.TASKS, *_ALL_ACTIONS)
    | grant(Resource.PROGRESS, Action.DELETE)
    | grant(Resource.USERS, *_ALL_ACTIONS)
)

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.VIEWER: _VIEWER_PERMISSIONS,
    # Safety staff: read-only, like viewers
    Role.SESMT: _VIEWER_PERMISSIONS,
    Role.OPERATOR: _FIELD_PERMISSIONS,
    Role.ENGINEER: _FIELD_PERMISSIONS,
    Role.SUPERVISOR: _SUPERVISOR_PERMISSIONS,
    Role.ADMIN: _SUPERVISOR_PERMISSIONS
    | frozenset(
        grant(Resource.ADMIN_DASHBOARD, Action.VIEW)
        | grant(Resource.SETTINGS, Action.VIEW, Action.UPDATE)
        | grant(Resource.STANDARD_TASKS, *_ALL_ACTIONS)
    ),
}


class PermissionEngine:
    """
    Decides whether a role may perform an action on a resource.

    ``can`` is a pure lookup. ``require`` is the enforcing variant: it logs
    and counts the decision and raises on deny.
    """

    @staticmethod
    def can(role: Role | str, resource: Resource | str, action: Action | str) -> bool:
        """
        Check whether a role holds the (resource, action) capability.

        Raises:
            ValidationError: If any argument is not a known enum value
        """
        permission = Permission(resource=resource, action=action)
        return permission in ROLE_PERMISSIONS.get(Role.parse(role), frozenset())

    @staticmethod
    def require(
        role: Role | str, resource: Resource | str, action: Action | str
    ) -> None:
        """
        Enforce a capability.

        Raises:
            PermissionDeniedError: If the role lacks the capability
        """
        role = Role.parse(role)
        permission = Permission(resource=resource, action=action)
        allowed = PermissionEngine.can(role, permission.resource, permission.action)

        record_permission_decision(
            permission.resource.value, permission.action.value, allowed
        )
        if settings.LOG_PERMISSION_CHECKS:
            logger.debug(
                "Permission %s for role %s: %s",
                permission.key,
                role.value,
                "allowed" if allowed else "denied",
            )

        if not allowed:
            raise PermissionDeniedError(
                role.value, permission.resource.value, permission.action.value
            )

    @staticmethod
    def permissions_for(role: Role | str) -> frozenset[Permission]:
        """The resolved permission set of a role."""
        return ROLE_PERMISSIONS.get(Role.parse(role), frozenset())

    @staticmethod
    def has_any_permission(role: Role | str, resource: Resource | str) -> bool:
        resource = Resource.parse(resource)
        return any(
            p.resource is resource for p in PermissionEngine.permissions_for(role)
        )

    @staticmethod
    def can_write(role: Role | str, resource: Resource | str) -> bool:
        """Whether the role may create, update or delete the resource."""
        resource = Resource.parse(resource)
        return any(
            p.resource is resource and p.action.is_write
            for p in PermissionEngine.permissions_for(role)
        )

    @staticmethod
    def can_delete_user(actor_role: Role | str, target_role: Role | str) -> bool:
        """
        Check whether an actor may delete a user holding ``target_role``.

        Requires the (users, delete) capability and a strictly higher rank:
        nobody deletes a peer or a superior.
        """
        actor_role = Role.parse(actor_role)
        target_role = Role.parse(target_role)
        if not PermissionEngine.can(actor_role, Resource.USERS, Action.DELETE):
            return False
        return actor_role.outranks(target_role)
