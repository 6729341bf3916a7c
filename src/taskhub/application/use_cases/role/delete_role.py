"""Delete custom role use case."""

from datetime import UTC, datetime

import structlog

from taskhub.application.ports import MembershipResolver, UnitOfWork
from taskhub.domain.exceptions import (
    RoleInUse,
    RoleNotFound,
    SystemRoleImmutable,
    ValidationError,
)
from taskhub.domain.value_objects import (
    BuiltinRole,
    RoleStatus,
    is_valid_object_id,
    parse_object_id,
)

log = structlog.get_logger()


class DeleteRoleUseCase:
    """Delete a custom role, reassigning its members first. Admin only."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        organization_id: str | None,
        role_id: str,
        new_role_id: str | None = None,
    ) -> int:
        """Mark the role deleted. Returns how many memberships were reassigned.

        Reassignment and deletion share one unit of work.
        """
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN,)
        )
        org_id = resolved.organization_id
        role_id = parse_object_id(role_id, "role")

        async with self._uow_factory() as uow:
            role = await uow.custom_roles.get_by_id(role_id, org_id, include_deleted=True)
            if role is None:
                raise RoleNotFound(role_id)
            if role.is_system_role:
                raise SystemRoleImmutable("System roles cannot be deleted")

            dependents = await uow.memberships.list_by_role(org_id, role_id)
            reassigned = 0
            if dependents:
                if not new_role_id:
                    raise RoleInUse(
                        f"This role is assigned to {len(dependents)} members. "
                        "Please provide a replacement role."
                    )
                replacement = await self._replacement(uow, org_id, role_id, new_role_id)
                reassigned = await uow.memberships.reassign_role(org_id, role_id, replacement)

            role.transition(RoleStatus.DELETED)
            now = datetime.now(UTC)
            role.deleted_at = now
            role.updated_at = now
            role.updated_by = actor_id
            await uow.custom_roles.update(role)

        log.info(
            "role.deleted",
            role_id=role_id,
            organization_id=org_id,
            reassigned=reassigned,
        )
        return reassigned

    async def _replacement(
        self, uow: UnitOfWork, organization_id: str, role_id: str, new_role_id: str
    ) -> str:
        if BuiltinRole.is_builtin(new_role_id):
            return new_role_id
        if not is_valid_object_id(new_role_id):
            raise ValidationError(f"Invalid replacement role: {new_role_id!r}")
        new_role_id = new_role_id.lower()
        if new_role_id == role_id:
            raise ValidationError("Replacement role must differ from the deleted role")
        replacement = await uow.custom_roles.get_by_id(new_role_id, organization_id)
        if replacement is None or replacement.status != RoleStatus.ACTIVE:
            raise RoleNotFound(new_role_id, "Replacement role")
        return replacement.id
