"""Update custom role use case."""

from datetime import UTC, datetime
from typing import Any

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.role.create_role import clean_name, parse_role_base
from taskhub.domain.entities import CustomRole
from taskhub.domain.exceptions import DuplicateName, RoleNotFound, SystemRoleImmutable
from taskhub.domain.value_objects import (
    BuiltinRole,
    RoleStatus,
    flatten_permissions,
    merge_permissions,
    parse_object_id,
)


class UpdateRoleUseCase:
    """Rename, describe, rebase or extend a custom role. Admin only.

    Permissions are merged into the existing map, not replaced.
    """

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        organization_id: str | None,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        based_on: str | None = None,
        permissions: dict[str, Any] | None = None,
    ) -> CustomRole:
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
                raise SystemRoleImmutable()
            role.transition(RoleStatus.ACTIVE)

            if name is not None:
                new_name = clean_name(name)
                if new_name != role.name:
                    existing = await uow.custom_roles.get_by_name(org_id, new_name)
                    if existing and existing.id != role.id:
                        raise DuplicateName("role", new_name)
                    role.name = new_name
            if description is not None:
                role.description = description
            if based_on is not None:
                role.based_on = parse_role_base(based_on)
            if permissions is not None:
                role.permissions = merge_permissions(
                    role.permissions, flatten_permissions(permissions)
                )

            role.updated_by = actor_id
            role.updated_at = datetime.now(UTC)
            await uow.custom_roles.update(role)
        return role
