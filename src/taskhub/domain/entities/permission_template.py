"""Permission template entity."""

from dataclasses import dataclass, field
from datetime import datetime

from taskhub.domain.value_objects import PermissionMap, ResourceType


@dataclass
class PermissionTemplate:
    """Named permission bundle applicable to a set of resource types."""

    id: str
    organization_id: str
    name: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    permissions: PermissionMap = field(default_factory=dict)
    applicable_resource_types: list[ResourceType] = field(default_factory=list)
    is_default: bool = False
    created_by: str | None = None
    updated_by: str | None = None

    def is_applicable_to(self, resource_type: ResourceType) -> bool:
        return resource_type in self.applicable_resource_types
