"""Built-in role defaults and organization seed data."""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from taskhub.domain.exceptions import ValidationError
from taskhub.domain.value_objects import (
    BuiltinRole,
    PermissionMap,
    ResourceAction,
    ResourceType,
    RoleBase,
    flatten_permissions,
)

# category -> actions; every default map covers all of these names
PERMISSION_CATALOG: dict[str, tuple[str, ...]] = {
    "organization": (
        "view",
        "edit",
        "delete",
        "manageMembers",
        "manageSettings",
        "manageRoles",
        "manageBilling",
    ),
    "projects": ("create", "view", "edit", "delete", "manageMembers", "manageTeams"),
    "teams": ("create", "view", "edit", "delete", "manageMembers"),
    "tasks": ("create", "view", "edit", "delete", "reassign", "timeTracking"),
    "notes": ("create", "view", "edit", "delete"),
    "timeTracking": ("track", "editOwn", "editOthers", "viewOwn", "viewTeam", "viewAll"),
    "reports": ("viewOwn", "viewTeam", "viewAll", "export"),
    "comments": ("create", "edit", "delete", "resolve"),
    "integrations": ("view", "edit", "calendar", "invoice"),
    "analytics": ("viewPersonal", "viewTeam", "viewOrganization"),
    "customFields": ("view", "edit"),
}


def grant_map(granted: Mapping[str, tuple[str, ...] | str]) -> PermissionMap:
    """Build a full catalog map with only the given actions set to True.

    "*" grants every action of a category.
    """
    result: PermissionMap = {}
    for category, actions in PERMISSION_CATALOG.items():
        allowed = granted.get(category, ())
        for action in actions:
            result[f"{category}.{action}"] = allowed == "*" or action in allowed
    return result


FULL_ACCESS = grant_map({category: "*" for category in PERMISSION_CATALOG})

# resource type -> catalog category an organization member is checked against
RESOURCE_CATEGORIES: dict[ResourceType, str] = {
    ResourceType.PROJECT: "projects",
    ResourceType.TEAM: "teams",
    ResourceType.TASK: "tasks",
    ResourceType.NOTE: "notes",
}

_ACTION_NAMES: dict[ResourceAction, str] = {
    ResourceAction.READ: "view",
    ResourceAction.WRITE: "edit",
    ResourceAction.DELETE: "delete",
}


def action_permission(resource_type: ResourceType, action: ResourceAction) -> str | None:
    """Catalog permission an organization member needs to perform action.

    share has none: organization membership alone never grants it.
    """
    name = _ACTION_NAMES.get(action)
    if name is None:
        return None
    return f"{RESOURCE_CATEGORIES[resource_type]}.{name}"

_MANAGER = grant_map(
    {
        "organization": ("view",),
        "projects": ("create", "view", "edit", "manageMembers", "manageTeams"),
        "teams": ("create", "view", "edit", "manageMembers"),
        "tasks": "*",
        "notes": "*",
        "timeTracking": ("track", "editOwn", "editOthers", "viewOwn", "viewTeam"),
        "reports": ("viewOwn", "viewTeam", "export"),
        "comments": "*",
        "integrations": ("view", "calendar", "invoice"),
        "analytics": ("viewPersonal", "viewTeam"),
        "customFields": ("view",),
    }
)

_MEMBER = grant_map(
    {
        "organization": ("view",),
        "projects": ("view",),
        "teams": ("view",),
        "tasks": ("create", "view", "edit", "timeTracking"),
        "notes": ("create", "view", "edit"),
        "timeTracking": ("track", "editOwn", "viewOwn"),
        "reports": ("viewOwn",),
        "comments": ("create", "edit", "resolve"),
        "integrations": ("view", "calendar"),
        "analytics": ("viewPersonal",),
        "customFields": ("view",),
    }
)

_GUEST = grant_map(
    {
        "organization": ("view",),
        "projects": ("view",),
        "teams": ("view",),
        "tasks": ("view",),
        "notes": ("view",),
        "timeTracking": ("viewOwn",),
        "reports": ("viewOwn",),
        "comments": ("create",),
        "customFields": ("view",),
    }
)


@dataclass(frozen=True)
class RoleDefaults:
    """Default permission maps of the non-admin built-in roles.

    Admin is never looked up here: it is granted everything.
    """

    roles: Mapping[BuiltinRole, PermissionMap] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "roles",
            MappingProxyType({BuiltinRole(k): dict(v) for k, v in self.roles.items()}),
        )

    @classmethod
    def standard(cls) -> "RoleDefaults":
        return cls(
            roles={
                BuiltinRole.MANAGER: _MANAGER,
                BuiltinRole.MEMBER: _MEMBER,
                BuiltinRole.GUEST: _GUEST,
            }
        )

    @classmethod
    def from_json_file(cls, path: str | Path) -> "RoleDefaults":
        """Load defaults from a JSON object of role name -> (nested) permission map."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValidationError(f"Role defaults file {path} must contain an object")
        roles: dict[BuiltinRole, PermissionMap] = {}
        for name, permissions in raw.items():
            if not BuiltinRole.is_builtin(name):
                raise ValidationError(f"Unknown built-in role in defaults: {name!r}")
            if name == BuiltinRole.ADMIN:
                continue
            roles[BuiltinRole(name)] = flatten_permissions(permissions)
        return cls(roles=roles)

    def for_role(self, role: str) -> PermissionMap:
        """Defaults for a base role. custom and unknown names get an empty map."""
        if role == BuiltinRole.ADMIN:
            return dict(FULL_ACCESS)
        if not BuiltinRole.is_builtin(role):
            return {}
        return dict(self.roles.get(BuiltinRole(role), {}))


@dataclass(frozen=True)
class RoleSeed:
    name: str
    description: str
    based_on: RoleBase


@dataclass(frozen=True)
class TemplateSeed:
    name: str
    description: str
    permissions: PermissionMap
    applicable_resource_types: tuple[ResourceType, ...] = tuple(ResourceType)


SYSTEM_ROLES: tuple[RoleSeed, ...] = (
    RoleSeed("Administrator", "Full access to all features", RoleBase.ADMIN),
    RoleSeed("Manager", "Can manage projects and teams", RoleBase.MANAGER),
    RoleSeed("Member", "Standard team member", RoleBase.MEMBER),
    RoleSeed("Guest", "Limited access, view-only for most features", RoleBase.GUEST),
)

DEFAULT_TEMPLATES: tuple[TemplateSeed, ...] = (
    TemplateSeed("Full Access", "Complete access to all resources", FULL_ACCESS),
    TemplateSeed(
        "Edit Access",
        "Can view and edit but not delete",
        grant_map(
            {
                "organization": ("view",),
                "projects": ("view", "edit"),
                "teams": ("view", "edit"),
                "tasks": ("create", "view", "edit", "timeTracking"),
                "notes": ("create", "view", "edit"),
                "timeTracking": ("track", "editOwn", "viewOwn", "viewTeam"),
                "reports": ("viewOwn", "viewTeam", "export"),
                "comments": ("create", "edit", "resolve"),
                "integrations": ("view", "calendar"),
                "analytics": ("viewPersonal", "viewTeam"),
                "customFields": ("view", "edit"),
            }
        ),
    ),
    TemplateSeed(
        "View Only",
        "Can only view resources",
        grant_map(
            {
                "organization": ("view",),
                "projects": ("view",),
                "teams": ("view",),
                "tasks": ("view",),
                "notes": ("view",),
                "timeTracking": ("viewOwn",),
                "reports": ("viewOwn",),
                "comments": ("create",),
                "analytics": ("viewPersonal",),
                "customFields": ("view",),
            }
        ),
    ),
)
