"""Resource-level permission override."""

from dataclasses import dataclass, field
from datetime import datetime

from taskhub.domain.value_objects import PermissionMap, ResourceType


@dataclass
class ResourceOverride:
    """Permissions applied to every non-admin member for one resource."""

    id: str
    organization_id: str
    resource_type: ResourceType
    resource_id: str
    created_at: datetime
    updated_at: datetime
    permissions: PermissionMap = field(default_factory=dict)
    template_id: str | None = None
