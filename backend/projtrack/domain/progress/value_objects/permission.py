"""Permission value object: a (resource, action) capability."""

from typing import Any

from pydantic import field_validator

from ...shared.base import ValueObject
from .enums import Action, Resource


class Permission(ValueObject):
    """A single capability, written ``resource.action`` in listings."""

    resource: Resource
    action: Action

    @field_validator("resource", mode="before")
    @classmethod
    def _parse_resource(cls, v: Any) -> Resource:
        return Resource.parse(v)

    @field_validator("action", mode="before")
    @classmethod
    def _parse_action(cls, v: Any) -> Action:
        return Action.parse(v)

    @property
    def key(self) -> str:
        return f"{self.resource.value}.{self.action.value}"

    def __str__(self) -> str:
        return self.key


def grant(resource: Resource, *actions: Action) -> set[Permission]:
    """All permissions for the given actions on one resource."""
    return {Permission(resource=resource, action=action) for action in actions}
