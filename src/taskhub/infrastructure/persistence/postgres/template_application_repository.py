"""PostgreSQL template application repository implementation."""

from psycopg import AsyncConnection

from taskhub.domain.entities import TemplateApplication
from taskhub.domain.value_objects import ResourceType


class PostgresTemplateApplicationRepository:
    """Template application repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_by_template(self, template_id: str) -> list[TemplateApplication]:
        cur = await self._conn.execute(
            "SELECT id, template_id, organization_id, resource_type, resource_id, role_id, "
            "applied_by, applied_at FROM template_application WHERE template_id = %s "
            "ORDER BY applied_at",
            (template_id,),
        )
        rows = await cur.fetchall()
        return [
            TemplateApplication(
                id=r[0],
                template_id=r[1],
                organization_id=r[2],
                resource_type=ResourceType(r[3]),
                resource_id=r[4],
                role_id=r[5],
                applied_by=r[6],
                applied_at=r[7],
            )
            for r in rows
        ]

    async def create(self, application: TemplateApplication) -> TemplateApplication:
        await self._conn.execute(
            "INSERT INTO template_application (id, template_id, organization_id, resource_type, "
            "resource_id, role_id, applied_by, applied_at) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s)",
            (
                application.id,
                application.template_id,
                application.organization_id,
                application.resource_type.value,
                application.resource_id,
                application.role_id,
                application.applied_by,
                application.applied_at,
            ),
        )
        return application

    async def delete_by_template(self, template_id: str) -> None:
        await self._conn.execute(
            "DELETE FROM template_application WHERE template_id = %s", (template_id,)
        )
