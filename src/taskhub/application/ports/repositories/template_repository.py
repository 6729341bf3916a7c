"""Permission template repository port."""

from typing import Protocol

from taskhub.domain.entities import PermissionTemplate


class TemplateRepository(Protocol):
    """Port for permission template persistence."""

    async def get_by_id(
        self, template_id: str, organization_id: str
    ) -> PermissionTemplate | None: ...

    async def get_by_name(
        self, organization_id: str, name: str
    ) -> PermissionTemplate | None: ...

    async def list(self, organization_id: str) -> list[PermissionTemplate]: ...

    async def create(self, template: PermissionTemplate) -> PermissionTemplate: ...

    async def update(self, template: PermissionTemplate) -> None: ...

    async def delete(self, template_id: str) -> None: ...
