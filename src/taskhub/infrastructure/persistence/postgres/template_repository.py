"""PostgreSQL permission template repository implementation."""

from psycopg import AsyncConnection, errors
from psycopg.types.json import Jsonb

from taskhub.domain.entities import PermissionTemplate
from taskhub.domain.exceptions import DuplicateName
from taskhub.domain.value_objects import ResourceType

_COLUMNS = (
    "id, organization_id, name, description, permissions, applicable_resource_types, "
    "is_default, created_by, updated_by, created_at, updated_at"
)


def _row_to_template(r: tuple) -> PermissionTemplate:
    return PermissionTemplate(
        id=r[0],
        organization_id=r[1],
        name=r[2],
        description=r[3] or "",
        permissions=dict(r[4] or {}),
        applicable_resource_types=[ResourceType(t) for t in (r[5] or [])],
        is_default=r[6],
        created_by=r[7],
        updated_by=r[8],
        created_at=r[9],
        updated_at=r[10],
    )


class PostgresTemplateRepository:
    """Permission template repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(
        self, template_id: str, organization_id: str
    ) -> PermissionTemplate | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission_template "
            "WHERE id = %s AND organization_id = %s",
            (template_id, organization_id),
        )
        r = await cur.fetchone()
        return _row_to_template(r) if r else None

    async def get_by_name(
        self, organization_id: str, name: str
    ) -> PermissionTemplate | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission_template "
            "WHERE organization_id = %s AND name = %s",
            (organization_id, name),
        )
        r = await cur.fetchone()
        return _row_to_template(r) if r else None

    async def list(self, organization_id: str) -> list[PermissionTemplate]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission_template WHERE organization_id = %s "
            "ORDER BY is_default DESC, name",
            (organization_id,),
        )
        return [_row_to_template(r) for r in await cur.fetchall()]

    async def create(self, template: PermissionTemplate) -> PermissionTemplate:
        try:
            await self._conn.execute(
                f"INSERT INTO permission_template ({_COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                (
                    template.id,
                    template.organization_id,
                    template.name,
                    template.description,
                    Jsonb(template.permissions),
                    Jsonb([t.value for t in template.applicable_resource_types]),
                    template.is_default,
                    template.created_by,
                    template.updated_by,
                    template.created_at,
                    template.updated_at,
                ),
            )
        except errors.UniqueViolation:
            raise DuplicateName("permission template", template.name) from None
        return template

    async def update(self, template: PermissionTemplate) -> None:
        try:
            await self._conn.execute(
                "UPDATE permission_template SET name=%s, description=%s, permissions=%s, "
                "applicable_resource_types=%s, is_default=%s, updated_by=%s, updated_at=%s "
                "WHERE id=%s",
                (
                    template.name,
                    template.description,
                    Jsonb(template.permissions),
                    Jsonb([t.value for t in template.applicable_resource_types]),
                    template.is_default,
                    template.updated_by,
                    template.updated_at,
                    template.id,
                ),
            )
        except errors.UniqueViolation:
            raise DuplicateName("permission template", template.name) from None

    async def delete(self, template_id: str) -> None:
        await self._conn.execute(
            "DELETE FROM permission_template WHERE id = %s", (template_id,)
        )
