"""Set collaborator use case."""

from datetime import UTC, datetime

import structlog

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.resource.manage_access import load_managed_resource
from taskhub.domain.entities import Collaborator, Resource
from taskhub.domain.exceptions import ValidationError
from taskhub.domain.value_objects import Capability, CollaboratorRole, parse_object_id

log = structlog.get_logger()


class SetCollaboratorUseCase:
    """Add, change or remove (role=None) a collaborator on a collaborative resource."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        resource_type: str,
        resource_id: str,
        subject_id: str,
        role: str | None,
    ) -> Resource:
        subject_id = parse_object_id(subject_id, "user")
        new_role = None
        if role is not None:
            try:
                new_role = CollaboratorRole(role)
            except ValueError:
                raise ValidationError(f"Invalid collaborator role: {role!r}") from None

        async with self._uow_factory() as uow:
            resource = await load_managed_resource(
                uow,
                self._resolver,
                actor_id,
                resource_type,
                resource_id,
                Capability.COLLABORATIVE,
            )
            others = tuple(c for c in resource.collaborators if c.user_id != subject_id)
            if new_role is None:
                resource.collaborators = others
            else:
                resource.collaborators = (*others, Collaborator(subject_id, new_role))
            resource.updated_at = datetime.now(UTC)
            await uow.resources.update(resource)

        log.info(
            "resource.collaborator_set",
            resource_type=str(resource.resource_type),
            resource_id=resource.id,
            subject_id=subject_id,
            role=str(new_role) if new_role else None,
        )
        return resource
