"""Membership entity - user in organization with a role."""

from dataclasses import dataclass, field
from datetime import datetime

from taskhub.domain.value_objects import BuiltinRole, MembershipStatus, PermissionMap


@dataclass
class Membership:
    """Binds a user to an organization.

    role is a built-in role name or a custom role id; permissions holds only
    explicit overrides on top of the role's grants.
    """

    id: str
    user_id: str
    organization_id: str
    role: str
    joined_at: datetime
    created_at: datetime
    updated_at: datetime
    status: MembershipStatus = MembershipStatus.ACTIVE
    title: str | None = None
    permissions: PermissionMap = field(default_factory=dict)
    invited_by: str | None = None
    removed_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.ACTIVE

    @property
    def is_admin(self) -> bool:
        return self.role == BuiltinRole.ADMIN

    @property
    def has_custom_role(self) -> bool:
        return not BuiltinRole.is_builtin(self.role)
