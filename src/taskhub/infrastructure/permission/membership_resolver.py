"""Membership resolver - organization membership, roles and permissions."""

from collections.abc import Sequence

import structlog

from taskhub.application.dto.access import ResolvedMembership
from taskhub.application.ports import UnitOfWork
from taskhub.domain.entities import Membership
from taskhub.domain.exceptions import (
    InsufficientPermission,
    InsufficientRole,
    InvalidOrganizationId,
    NoOrganizationMembership,
    NotAMember,
    OrganizationRequired,
    UserNotFound,
)
from taskhub.domain.value_objects import (
    BuiltinRole,
    EffectivePermissions,
    ResourceRef,
    is_valid_object_id,
)
from taskhub.infrastructure.permission.role_catalog import RoleCatalog

log = structlog.get_logger()


class OrganizationMembershipResolver:
    """Resolves the active membership of a user and its effective permissions."""

    def __init__(self, unit_of_work_factory, role_catalog: RoleCatalog) -> None:
        self._uow_factory = unit_of_work_factory
        self._catalog = role_catalog

    async def resolve(
        self,
        user_id: str,
        organization_id: str | None,
        resource: ResourceRef | None = None,
        *,
        uow: UnitOfWork | None = None,
    ) -> ResolvedMembership:
        """Resolve membership in organization_id, or the user's current organization.

        Permissions merge in order: role defaults (with a custom role's own
        map and resource override), membership overrides, resource override.
        Admins short-circuit to everything.
        """
        if uow is not None:
            return await self._resolve(uow, user_id, organization_id, resource)
        async with self._uow_factory() as uow:
            return await self._resolve(uow, user_id, organization_id, resource)

    async def membership(
        self, user_id: str, organization_id: str | None, *, uow: UnitOfWork
    ) -> Membership:
        """Active membership in organization_id or the current organization.

        Role permissions are not evaluated, so a membership whose custom role
        is gone is still found.
        """
        org_id = await self._organization_id(uow, user_id, organization_id)
        membership = await uow.memberships.get_active(user_id, org_id)
        if membership is None:
            log.info("authz.not_member", user_id=user_id, organization_id=org_id)
            raise NotAMember()
        return membership

    async def check_role(
        self, user_id: str, organization_id: str | None, roles: Sequence[str]
    ) -> ResolvedMembership:
        resolved = await self.resolve(user_id, organization_id)
        if not resolved.is_admin and not resolved.has_role(roles):
            log.info(
                "authz.insufficient_role",
                user_id=user_id,
                organization_id=resolved.organization_id,
                role=resolved.role,
                required=list(roles),
            )
            raise InsufficientRole(tuple(roles))
        return resolved

    async def check_permission(
        self, user_id: str, organization_id: str | None, permissions: Sequence[str]
    ) -> ResolvedMembership:
        resolved = await self.resolve(user_id, organization_id)
        if resolved.is_admin:
            return resolved
        missing = [p for p in permissions if not resolved.permissions.allows(p)]
        if missing:
            log.info(
                "authz.insufficient_permissions",
                user_id=user_id,
                organization_id=resolved.organization_id,
                missing=missing,
            )
            raise InsufficientPermission(tuple(missing))
        return resolved

    async def require_any_membership(self, user_id: str) -> list[Membership]:
        async with self._uow_factory() as uow:
            memberships = await uow.memberships.list_active_by_user(user_id)
        if not memberships:
            raise NoOrganizationMembership()
        return memberships

    async def _resolve(
        self,
        uow: UnitOfWork,
        user_id: str,
        organization_id: str | None,
        resource: ResourceRef | None,
    ) -> ResolvedMembership:
        membership = await self.membership(user_id, organization_id, uow=uow)
        org_id = membership.organization_id

        if membership.is_admin:
            return ResolvedMembership(
                membership=membership,
                organization_id=org_id,
                permissions=EffectivePermissions.everything(),
                base_role=BuiltinRole.ADMIN,
            )

        permissions, base_role = await self._catalog.role_permissions(
            uow, membership.role, org_id, resource
        )
        permissions = permissions.merged(membership.permissions)
        if resource is not None:
            override = await uow.resource_overrides.get_for_resource(
                org_id, resource.resource_type, resource.resource_id
            )
            if override is not None:
                permissions = permissions.merged(override.permissions)

        return ResolvedMembership(
            membership=membership,
            organization_id=org_id,
            permissions=permissions,
            base_role=base_role,
        )

    async def _organization_id(
        self, uow: UnitOfWork, user_id: str, organization_id: str | None
    ) -> str:
        if organization_id:
            if not is_valid_object_id(organization_id):
                raise InvalidOrganizationId(organization_id)
            return organization_id.lower()

        user = await uow.users.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)
        current = user.current_organization_id
        if not current or not is_valid_object_id(current):
            raise OrganizationRequired()
        return current.lower()
