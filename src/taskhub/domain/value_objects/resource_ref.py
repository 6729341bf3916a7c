"""Reference to a single resource instance."""

from dataclasses import dataclass

from taskhub.domain.value_objects.resource_type import ResourceType


@dataclass(frozen=True)
class ResourceRef:
    resource_type: ResourceType
    resource_id: str
