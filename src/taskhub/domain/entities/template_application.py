"""Template application record."""

from dataclasses import dataclass
from datetime import datetime

from taskhub.domain.value_objects import ResourceType


@dataclass
class TemplateApplication:
    """One application of a permission template to a resource, optionally via a role."""

    id: str
    template_id: str
    organization_id: str
    resource_type: ResourceType
    resource_id: str
    applied_by: str
    applied_at: datetime
    role_id: str | None = None
