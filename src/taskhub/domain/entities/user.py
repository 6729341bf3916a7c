"""User entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """User account. current_organization_id is a weak reference and may be stale."""

    id: str
    email: str
    username: str
    created_at: datetime
    updated_at: datetime
    google_id: str | None = None
    github_id: str | None = None
    current_organization_id: str | None = None
    last_login_at: datetime | None = None
