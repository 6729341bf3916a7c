"""Template application repository port."""

from typing import Protocol

from taskhub.domain.entities import TemplateApplication


class TemplateApplicationRepository(Protocol):
    """Port for template application records."""

    async def list_by_template(self, template_id: str) -> list[TemplateApplication]: ...

    async def create(self, application: TemplateApplication) -> TemplateApplication: ...

    async def delete_by_template(self, template_id: str) -> None: ...
