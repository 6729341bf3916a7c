"""Create permission template use case."""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

import structlog

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.role.create_role import clean_name
from taskhub.domain.entities import PermissionTemplate
from taskhub.domain.exceptions import DuplicateName, ValidationError
from taskhub.domain.value_objects import (
    BuiltinRole,
    ResourceType,
    flatten_permissions,
    new_object_id,
)

log = structlog.get_logger()


def parse_resource_types(values: Iterable[object] | None) -> list[ResourceType]:
    """Parse a non-empty list of resource types, dropping duplicates."""
    if isinstance(values, str) or values is None:
        raise ValidationError("applicable_resource_types must be a non-empty list")
    types: list[ResourceType] = []
    for value in values:
        rtype = ResourceType.parse(value)
        if rtype not in types:
            types.append(rtype)
    if not types:
        raise ValidationError("applicable_resource_types must be a non-empty list")
    return types


class CreateTemplateUseCase:
    """Create a permission template. Admin only."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        organization_id: str | None,
        name: str,
        permissions: dict[str, Any] | None,
        applicable_resource_types: Iterable[str],
        description: str = "",
        is_default: bool = False,
    ) -> PermissionTemplate:
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN,)
        )
        org_id = resolved.organization_id
        name = clean_name(name, "Template")
        types = parse_resource_types(applicable_resource_types)
        flat = flatten_permissions(permissions)

        async with self._uow_factory() as uow:
            if await uow.templates.get_by_name(org_id, name):
                raise DuplicateName("permission template", name)
            now = datetime.now(UTC)
            template = PermissionTemplate(
                id=new_object_id(),
                organization_id=org_id,
                name=name,
                created_at=now,
                updated_at=now,
                description=description or "",
                permissions=flat,
                applicable_resource_types=types,
                is_default=bool(is_default),
                created_by=actor_id,
                updated_by=actor_id,
            )
            await uow.templates.create(template)

        log.info("template.created", template_id=template.id, organization_id=org_id)
        return template
