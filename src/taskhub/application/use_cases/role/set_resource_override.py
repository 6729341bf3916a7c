"""Set role resource override use case."""

from datetime import UTC, datetime
from typing import Any

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.resource.lookup import get_organization_resource
from taskhub.domain.entities import CustomRole
from taskhub.domain.exceptions import RoleNotFound
from taskhub.domain.value_objects import BuiltinRole, flatten_permissions, parse_object_id


class SetResourceOverrideUseCase:
    """Give a role a specific permission map on one resource. Admin only."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        organization_id: str | None,
        role_id: str,
        resource_type: str,
        resource_id: str,
        permissions: dict[str, Any],
    ) -> CustomRole:
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN,)
        )
        org_id = resolved.organization_id
        role_id = parse_object_id(role_id, "role")
        flat = flatten_permissions(permissions)

        async with self._uow_factory() as uow:
            role = await uow.custom_roles.get_by_id(role_id, org_id)
            if role is None or role.is_deleted:
                raise RoleNotFound(role_id)
            resource = await get_organization_resource(
                uow, org_id, resource_type, resource_id
            )
            role.set_override(resource.ref, flat, template_id=None)
            role.updated_by = actor_id
            role.updated_at = datetime.now(UTC)
            await uow.custom_roles.update(role)
        return role
