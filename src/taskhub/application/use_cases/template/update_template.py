"""Update permission template use case."""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.role.create_role import clean_name
from taskhub.application.use_cases.template.create_template import parse_resource_types
from taskhub.domain.entities import PermissionTemplate
from taskhub.domain.exceptions import DuplicateName, TemplateNotFound
from taskhub.domain.value_objects import (
    BuiltinRole,
    flatten_permissions,
    merge_permissions,
    parse_object_id,
)


class UpdateTemplateUseCase:
    """Update a permission template. Admin only. Permissions are merged."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        organization_id: str | None,
        template_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        permissions: dict[str, Any] | None = None,
        applicable_resource_types: Iterable[str] | None = None,
        is_default: bool | None = None,
    ) -> PermissionTemplate:
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN,)
        )
        org_id = resolved.organization_id
        template_id = parse_object_id(template_id, "template")

        async with self._uow_factory() as uow:
            template = await uow.templates.get_by_id(template_id, org_id)
            if template is None:
                raise TemplateNotFound(template_id)

            if name is not None:
                new_name = clean_name(name, "Template")
                if new_name != template.name:
                    existing = await uow.templates.get_by_name(org_id, new_name)
                    if existing and existing.id != template.id:
                        raise DuplicateName("permission template", new_name)
                    template.name = new_name
            if description is not None:
                template.description = description
            if permissions is not None:
                template.permissions = merge_permissions(
                    template.permissions, flatten_permissions(permissions)
                )
            if applicable_resource_types is not None:
                template.applicable_resource_types = parse_resource_types(
                    applicable_resource_types
                )
            if is_default is not None:
                template.is_default = bool(is_default)

            template.updated_by = actor_id
            template.updated_at = datetime.now(UTC)
            await uow.templates.update(template)
        return template
