"""Share resource use case."""

from datetime import UTC, datetime

import structlog

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.resource.manage_access import load_managed_resource
from taskhub.domain.entities import Resource
from taskhub.domain.value_objects import Capability, parse_object_id

log = structlog.get_logger()


class ShareResourceUseCase:
    """Add a user to, or remove one from, a resource's shared_with set."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self,
        actor_id: str,
        resource_type: str,
        resource_id: str,
        subject_id: str,
        shared: bool = True,
    ) -> Resource:
        subject_id = parse_object_id(subject_id, "user")
        async with self._uow_factory() as uow:
            resource = await load_managed_resource(
                uow, self._resolver, actor_id, resource_type, resource_id, Capability.SHAREABLE
            )
            if shared:
                resource.shared_with = resource.shared_with | {subject_id}
            else:
                resource.shared_with = resource.shared_with - {subject_id}
            resource.updated_at = datetime.now(UTC)
            await uow.resources.update(resource)

        log.info(
            "resource.shared" if shared else "resource.unshared",
            resource_type=str(resource.resource_type),
            resource_id=resource.id,
            subject_id=subject_id,
        )
        return resource
