"""Authorization DTOs - resolved memberships and access decisions."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from taskhub.domain.entities import Membership, Resource
from taskhub.domain.exceptions import AuthorizationError
from taskhub.domain.value_objects import EffectivePermissions, ResourceAction


@dataclass(frozen=True)
class ResolvedMembership:
    """Active membership with its effective permissions.

    base_role is the built-in role the membership role reduces to: the role
    itself for built-ins, the based_on of a custom role.
    """

    membership: Membership
    organization_id: str
    permissions: EffectivePermissions
    base_role: str

    @property
    def is_admin(self) -> bool:
        return self.membership.is_admin

    @property
    def role(self) -> str:
        return self.membership.role

    def has_role(self, roles: Iterable[str]) -> bool:
        wanted = set(roles)
        return self.membership.role in wanted or self.base_role in wanted

    def has_permission(self, permission: str) -> bool:
        return self.is_admin or self.permissions.allows(permission)


@dataclass(frozen=True)
class AccessRequirement:
    """What a caller wants to do with a resource."""

    action: ResourceAction = ResourceAction.READ
    permission: str | None = None
    roles: tuple[str, ...] = ()


class AccessGrant(StrEnum):
    """Access path that allowed a request."""

    OWNER = "owner"
    PUBLIC = "public"
    SHARED = "shared"
    COLLABORATOR = "collaborator"
    ORGANIZATION = "organization"


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of evaluating one request against one resource."""

    resource: Resource
    grant: AccessGrant | None = None
    membership: ResolvedMembership | None = None
    error: AuthorizationError | None = None

    @property
    def allowed(self) -> bool:
        return self.grant is not None

    def unwrap(self) -> "AccessDecision":
        """Return self when allowed, raise the carried error otherwise."""
        if self.error is not None:
            raise self.error
        return self

    def to_dict(self) -> dict:
        data: dict = {
            "allowed": self.allowed,
            "resource_type": str(self.resource.resource_type),
            "resource_id": self.resource.id,
            "grant": str(self.grant) if self.grant else None,
        }
        if self.membership is not None:
            data["role"] = self.membership.role
            data["organization_id"] = self.membership.organization_id
        if self.error is not None:
            data["error"] = self.error.code
            data["message"] = self.error.message
        return data
