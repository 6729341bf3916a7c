"""Resource override repository port."""

from typing import Protocol

from taskhub.domain.entities import ResourceOverride
from taskhub.domain.value_objects import ResourceType


class ResourceOverrideRepository(Protocol):
    """Port for resource-level permission overrides."""

    async def get_for_resource(
        self, organization_id: str, resource_type: ResourceType, resource_id: str
    ) -> ResourceOverride | None: ...

    async def list_by_template(self, template_id: str) -> list[ResourceOverride]: ...

    async def upsert(self, override: ResourceOverride) -> ResourceOverride: ...

    async def delete(self, override_id: str) -> None: ...
