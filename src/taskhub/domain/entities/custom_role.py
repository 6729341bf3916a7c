"""Custom role entity."""

from dataclasses import dataclass, field
from datetime import datetime

from taskhub.domain.exceptions import InvalidRoleTransition
from taskhub.domain.value_objects import (
    ROLE_TRANSITIONS,
    PermissionMap,
    ResourceRef,
    ResourceType,
    RoleBase,
    RoleStatus,
)


@dataclass
class RoleResourceOverride:
    """Permissions a role gets on one specific resource.

    template_id is set while the map is the one a template wrote; a direct
    edit clears it.
    """

    resource_type: ResourceType
    resource_id: str
    permissions: PermissionMap = field(default_factory=dict)
    template_id: str | None = None

    def matches(self, resource: ResourceRef) -> bool:
        return (
            self.resource_type == resource.resource_type
            and self.resource_id == resource.resource_id
        )


@dataclass
class CustomRole:
    """Organization-scoped role derived from a built-in base role."""

    id: str
    organization_id: str
    name: str
    based_on: RoleBase
    created_at: datetime
    updated_at: datetime
    description: str = ""
    permissions: PermissionMap = field(default_factory=dict)
    resource_overrides: list[RoleResourceOverride] = field(default_factory=list)
    is_system_role: bool = False
    status: RoleStatus = RoleStatus.DRAFT
    created_by: str | None = None
    updated_by: str | None = None
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.status == RoleStatus.DELETED

    def transition(self, target: RoleStatus) -> None:
        """Move to target status, rejecting transitions the lifecycle forbids."""
        if target not in ROLE_TRANSITIONS[self.status]:
            raise InvalidRoleTransition(
                f"Role {self.name!r} cannot go from {self.status} to {target}"
            )
        self.status = target

    def override_for(self, resource: ResourceRef) -> RoleResourceOverride | None:
        for override in self.resource_overrides:
            if override.matches(resource):
                return override
        return None

    def set_override(
        self,
        resource: ResourceRef,
        permissions: PermissionMap,
        template_id: str | None = None,
    ) -> None:
        """Add or replace the override for resource."""
        existing = self.override_for(resource)
        if existing:
            existing.permissions = dict(permissions)
            existing.template_id = template_id
            return
        self.resource_overrides.append(
            RoleResourceOverride(
                resource_type=resource.resource_type,
                resource_id=resource.resource_id,
                permissions=dict(permissions),
                template_id=template_id,
            )
        )

    def remove_override(self, resource: ResourceRef) -> bool:
        """Drop the override for resource. Returns whether one existed."""
        before = len(self.resource_overrides)
        self.resource_overrides = [
            o for o in self.resource_overrides if not o.matches(resource)
        ]
        return len(self.resource_overrides) != before

    def remove_template_override(self, resource: ResourceRef, template_id: str) -> bool:
        """Drop the override for resource only if template_id still owns it."""
        existing = self.override_for(resource)
        if existing is None or existing.template_id != template_id:
            return False
        self.resource_overrides.remove(existing)
        return True
