"""Delete permission template use case."""

from datetime import UTC, datetime

import structlog

from taskhub.application.ports import MembershipResolver
from taskhub.domain.exceptions import (
    DefaultTemplateImmutable,
    TemplateInUse,
    TemplateNotFound,
)
from taskhub.domain.value_objects import BuiltinRole, ResourceRef, parse_object_id

log = structlog.get_logger()


class DeleteTemplateUseCase:
    """Delete a permission template. Admin only.

    A template that has been applied is only deleted with cascade, which also
    removes the role overrides and resource overrides it wrote.
    """

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        organization_id: str | None,
        template_id: str,
        cascade: bool = False,
    ) -> None:
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN,)
        )
        org_id = resolved.organization_id
        template_id = parse_object_id(template_id, "template")

        async with self._uow_factory() as uow:
            template = await uow.templates.get_by_id(template_id, org_id)
            if template is None:
                raise TemplateNotFound(template_id)
            if template.is_default:
                raise DefaultTemplateImmutable()

            applications = await uow.template_applications.list_by_template(template_id)
            overrides = await uow.resource_overrides.list_by_template(template_id)
            if (applications or overrides) and not cascade:
                raise TemplateInUse(
                    f"Template is applied to {len(applications)} resource(s); "
                    "delete with cascade to remove its overrides"
                )

            now = datetime.now(UTC)
            for application in applications:
                if application.role_id is None:
                    continue
                role = await uow.custom_roles.get_by_id(application.role_id, org_id)
                if role is None or role.is_deleted:
                    continue
                ref = ResourceRef(application.resource_type, application.resource_id)
                if role.remove_template_override(ref, template_id):
                    role.updated_at = now
                    role.updated_by = actor_id
                    await uow.custom_roles.update(role)
            for override in overrides:
                await uow.resource_overrides.delete(override.id)
            await uow.template_applications.delete_by_template(template_id)
            await uow.templates.delete(template_id)

        log.info(
            "template.deleted",
            template_id=template_id,
            organization_id=org_id,
            applications=len(applications),
        )
