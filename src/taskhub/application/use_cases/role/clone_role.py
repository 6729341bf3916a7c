"""Clone role use case."""

import copy
from datetime import UTC, datetime

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.role.create_role import clean_name
from taskhub.domain.entities import CustomRole
from taskhub.domain.exceptions import DuplicateName, RoleNotFound
from taskhub.domain.value_objects import (
    BuiltinRole,
    RoleStatus,
    new_object_id,
    parse_object_id,
)


class CloneRoleUseCase:
    """Copy a system or custom role into a new custom role. Admin only."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        organization_id: str | None,
        role_id: str,
        new_name: str,
    ) -> CustomRole:
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN,)
        )
        org_id = resolved.organization_id
        role_id = parse_object_id(role_id, "role")
        new_name = clean_name(new_name)

        async with self._uow_factory() as uow:
            source = await uow.custom_roles.get_by_id(role_id, org_id)
            if source is None or source.is_deleted:
                raise RoleNotFound(role_id, "Source role")
            if await uow.custom_roles.get_by_name(org_id, new_name):
                raise DuplicateName("role", new_name)

            now = datetime.now(UTC)
            clone = CustomRole(
                id=new_object_id(),
                organization_id=org_id,
                name=new_name,
                based_on=source.based_on,
                created_at=now,
                updated_at=now,
                description=f"Clone of {source.name}",
                permissions=copy.deepcopy(source.permissions),
                created_by=actor_id,
                updated_by=actor_id,
            )
            clone.transition(RoleStatus.ACTIVE)
            await uow.custom_roles.create(clone)
        return clone
