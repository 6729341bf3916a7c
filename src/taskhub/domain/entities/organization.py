"""Organization entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Organization:
    """Tenant boundary owning memberships, roles and templates."""

    id: str
    name: str
    created_by: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
