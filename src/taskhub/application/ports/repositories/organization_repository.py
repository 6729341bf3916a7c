"""Organization repository port."""

from typing import Protocol

from taskhub.domain.entities import Organization


class OrganizationRepository(Protocol):
    """Port for organization persistence."""

    async def get_by_id(self, organization_id: str) -> Organization | None: ...

    async def create(self, organization: Organization) -> Organization: ...

    async def update(self, organization: Organization) -> None: ...
