"""Resource repository port."""

from typing import Protocol

from taskhub.domain.entities import Resource
from taskhub.domain.value_objects import ResourceType


class ResourceRepository(Protocol):
    """Port for the access metadata of tasks, notes, projects and teams."""

    async def get_by_id(
        self, resource_type: ResourceType, resource_id: str
    ) -> Resource | None: ...

    async def create(self, resource: Resource) -> Resource: ...

    async def update(self, resource: Resource) -> None: ...
