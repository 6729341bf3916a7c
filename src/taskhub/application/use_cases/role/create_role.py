"""Create custom role use case."""

from datetime import UTC, datetime
from typing import Any

import structlog

from taskhub.application.ports import MembershipResolver
from taskhub.domain.entities import CustomRole
from taskhub.domain.exceptions import DuplicateName, ValidationError
from taskhub.domain.value_objects import (
    BuiltinRole,
    RoleBase,
    RoleStatus,
    flatten_permissions,
    new_object_id,
)

log = structlog.get_logger()


def parse_role_base(value: object) -> RoleBase:
    try:
        return RoleBase(value)
    except ValueError:
        allowed = ", ".join(b.value for b in RoleBase)
        raise ValidationError(
            f"Invalid base role {value!r}, expected one of: {allowed}"
        ) from None


def clean_name(value: object, what: str = "Role") -> str:
    name = value.strip() if isinstance(value, str) else ""
    if not name:
        raise ValidationError(f"{what} name is required")
    return name


class CreateRoleUseCase:
    """Create a custom role in the actor's organization. Admin only."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        organization_id: str | None,
        name: str,
        based_on: str = RoleBase.MEMBER,
        permissions: dict[str, Any] | None = None,
        description: str = "",
    ) -> CustomRole:
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN,)
        )
        org_id = resolved.organization_id
        name = clean_name(name)
        base = parse_role_base(based_on)
        flat = flatten_permissions(permissions)

        async with self._uow_factory() as uow:
            if await uow.custom_roles.get_by_name(org_id, name):
                raise DuplicateName("role", name)

            now = datetime.now(UTC)
            role = CustomRole(
                id=new_object_id(),
                organization_id=org_id,
                name=name,
                based_on=base,
                created_at=now,
                updated_at=now,
                description=description or "",
                permissions=flat,
                created_by=actor_id,
                updated_by=actor_id,
            )
            role.transition(RoleStatus.ACTIVE)
            await uow.custom_roles.create(role)

        log.info("role.created", role_id=role.id, organization_id=org_id, name=name)
        return role
