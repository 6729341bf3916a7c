"""Custom role repository port."""

from typing import Protocol

from taskhub.domain.entities import CustomRole


class CustomRoleRepository(Protocol):
    """Port for custom role persistence.

    Names are unique per organization among non-deleted roles; create and
    update raise DuplicateName otherwise.
    """

    async def get_by_id(
        self, role_id: str, organization_id: str, include_deleted: bool = False
    ) -> CustomRole | None: ...

    async def get_by_name(self, organization_id: str, name: str) -> CustomRole | None: ...

    async def list_by_organization(
        self, organization_id: str, include_deleted: bool = False
    ) -> list[CustomRole]: ...

    async def create(self, role: CustomRole) -> CustomRole: ...

    async def update(self, role: CustomRole) -> None: ...
