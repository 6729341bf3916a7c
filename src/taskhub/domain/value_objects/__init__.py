"""Domain value objects."""

from taskhub.domain.value_objects.builtin_role import BuiltinRole, RoleBase
from taskhub.domain.value_objects.capability import RESOURCE_CAPABILITIES, Capability
from taskhub.domain.value_objects.collaborator_role import (
    CollaboratorGating,
    CollaboratorRole,
)
from taskhub.domain.value_objects.membership_status import MembershipStatus
from taskhub.domain.value_objects.object_id import (
    is_valid_object_id,
    new_object_id,
    parse_object_id,
)
from taskhub.domain.value_objects.permission_set import (
    EffectivePermissions,
    PermissionMap,
    flatten_permissions,
    merge_permissions,
)
from taskhub.domain.value_objects.resource_action import ResourceAction
from taskhub.domain.value_objects.resource_ref import ResourceRef
from taskhub.domain.value_objects.resource_type import ResourceType
from taskhub.domain.value_objects.role_status import ROLE_TRANSITIONS, RoleStatus

__all__ = [
    "BuiltinRole",
    "Capability",
    "CollaboratorGating",
    "CollaboratorRole",
    "EffectivePermissions",
    "MembershipStatus",
    "PermissionMap",
    "RESOURCE_CAPABILITIES",
    "ROLE_TRANSITIONS",
    "ResourceAction",
    "ResourceRef",
    "ResourceType",
    "RoleBase",
    "RoleStatus",
    "flatten_permissions",
    "is_valid_object_id",
    "merge_permissions",
    "new_object_id",
    "parse_object_id",
]
