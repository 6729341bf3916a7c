"""Publish resource use case."""

from datetime import UTC, datetime

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.resource.manage_access import load_managed_resource
from taskhub.domain.entities import Resource
from taskhub.domain.value_objects import Capability


class PublishResourceUseCase:
    """Toggle the public flag of a shareable resource."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(
        self, actor_id: str, resource_type: str, resource_id: str, is_shared: bool
    ) -> Resource:
        async with self._uow_factory() as uow:
            resource = await load_managed_resource(
                uow, self._resolver, actor_id, resource_type, resource_id, Capability.SHAREABLE
            )
            resource.is_shared = bool(is_shared)
            resource.updated_at = datetime.now(UTC)
            await uow.resources.update(resource)
        return resource
