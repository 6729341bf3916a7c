"""Update membership use case."""

from datetime import UTC, datetime
from typing import Any

import structlog

from taskhub.application.ports import MembershipResolver, UnitOfWork
from taskhub.application.use_cases.membership.admin_guard import ensure_not_last_admin
from taskhub.application.use_cases.membership.current_organization import (
    repoint_current_organization,
)
from taskhub.domain.entities import Membership
from taskhub.domain.exceptions import MembershipNotFound, RoleNotFound, ValidationError
from taskhub.domain.value_objects import (
    BuiltinRole,
    MembershipStatus,
    RoleStatus,
    flatten_permissions,
    is_valid_object_id,
    parse_object_id,
)

log = structlog.get_logger()


async def parse_member_role(uow: UnitOfWork, organization_id: str, value: str) -> str:
    """Built-in role name, or the id of an active custom role in the organization."""
    if BuiltinRole.is_builtin(value):
        return value
    if not is_valid_object_id(value):
        raise ValidationError(f"Invalid role: {value!r}")
    role = await uow.custom_roles.get_by_id(value.lower(), organization_id)
    if role is None or role.status != RoleStatus.ACTIVE:
        raise RoleNotFound(value)
    return role.id


class UpdateMembershipUseCase:
    """Change a member's role, status, title or permission overrides. Admin only."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        organization_id: str,
        user_id: str,
        *,
        role: str | None = None,
        status: str | None = None,
        title: str | None = None,
        permissions: dict[str, Any] | None = None,
    ) -> Membership:
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN,)
        )
        org_id = resolved.organization_id
        user_id = parse_object_id(user_id, "user")
        new_status = self._parse_status(status) if status is not None else None

        async with self._uow_factory() as uow:
            membership = await uow.memberships.get_active(user_id, org_id)
            if membership is None:
                raise MembershipNotFound(user_id)

            new_role = await parse_member_role(uow, org_id, role) if role is not None else None
            demoted = new_role is not None and new_role != BuiltinRole.ADMIN
            deactivated = new_status is not None and new_status != MembershipStatus.ACTIVE
            if demoted or deactivated:
                await ensure_not_last_admin(uow, membership)

            if new_role is not None:
                membership.role = new_role
            if title is not None:
                membership.title = title or None
            if permissions is not None:
                membership.permissions = flatten_permissions(permissions)
            now = datetime.now(UTC)
            if new_status is not None:
                membership.status = new_status
                if new_status == MembershipStatus.REMOVED:
                    membership.removed_at = now
            membership.updated_at = now
            await uow.memberships.update(membership)

            if deactivated:
                await repoint_current_organization(uow, user_id, org_id)

        log.info(
            "membership.updated",
            organization_id=org_id,
            user_id=user_id,
            role=membership.role,
            status=str(membership.status),
        )
        return membership

    @staticmethod
    def _parse_status(value: str) -> MembershipStatus:
        try:
            return MembershipStatus(value)
        except ValueError:
            raise ValidationError(f"Invalid membership status: {value!r}") from None
