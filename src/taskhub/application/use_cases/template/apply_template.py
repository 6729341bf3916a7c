"""Apply permission template use case."""

from datetime import UTC, datetime

import structlog

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.resource.lookup import get_organization_resource
from taskhub.domain.entities import ResourceOverride, TemplateApplication
from taskhub.domain.exceptions import RoleNotFound, TemplateNotApplicable, TemplateNotFound
from taskhub.domain.value_objects import (
    BuiltinRole,
    ResourceType,
    new_object_id,
    parse_object_id,
)

log = structlog.get_logger()


class ApplyTemplateUseCase:
    """Copy a template's permissions onto one resource. Admin or manager.

    With role_id the map becomes that role's override for the resource;
    without it, the resource-level override every non-admin member gets.
    """

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        organization_id: str | None,
        template_id: str,
        resource_type: str,
        resource_id: str,
        role_id: str | None = None,
    ) -> TemplateApplication:
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN, BuiltinRole.MANAGER)
        )
        org_id = resolved.organization_id
        template_id = parse_object_id(template_id, "template")
        rtype = ResourceType.parse(resource_type)

        async with self._uow_factory() as uow:
            template = await uow.templates.get_by_id(template_id, org_id)
            if template is None:
                raise TemplateNotFound(template_id)
            if not template.is_applicable_to(rtype):
                raise TemplateNotApplicable(template.name, rtype)

            resource = await get_organization_resource(uow, org_id, rtype, resource_id)
            now = datetime.now(UTC)

            role = None
            if role_id:
                role = await uow.custom_roles.get_by_id(
                    parse_object_id(role_id, "role"), org_id
                )
                if role is None or role.is_deleted:
                    raise RoleNotFound(role_id)
                role.set_override(resource.ref, template.permissions, template_id=template.id)
                role.updated_at = now
                role.updated_by = actor_id
                await uow.custom_roles.update(role)
            else:
                existing = await uow.resource_overrides.get_for_resource(
                    org_id, rtype, resource.id
                )
                await uow.resource_overrides.upsert(
                    ResourceOverride(
                        id=existing.id if existing else new_object_id(),
                        organization_id=org_id,
                        resource_type=rtype,
                        resource_id=resource.id,
                        created_at=existing.created_at if existing else now,
                        updated_at=now,
                        permissions=dict(template.permissions),
                        template_id=template.id,
                    )
                )

            application = TemplateApplication(
                id=new_object_id(),
                template_id=template.id,
                organization_id=org_id,
                resource_type=rtype,
                resource_id=resource.id,
                applied_by=actor_id,
                applied_at=now,
                role_id=role.id if role else None,
            )
            await uow.template_applications.create(application)

        log.info(
            "template.applied",
            template_id=template.id,
            resource_type=str(rtype),
            resource_id=resource.id,
            role_id=application.role_id,
        )
        return application
