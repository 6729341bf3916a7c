"""PostgreSQL resource override repository implementation."""

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from taskhub.domain.entities import ResourceOverride
from taskhub.domain.value_objects import ResourceType

_COLUMNS = (
    "id, organization_id, resource_type, resource_id, permissions, template_id, "
    "created_at, updated_at"
)


def _row_to_override(r: tuple) -> ResourceOverride:
    return ResourceOverride(
        id=r[0],
        organization_id=r[1],
        resource_type=ResourceType(r[2]),
        resource_id=r[3],
        permissions=dict(r[4] or {}),
        template_id=r[5],
        created_at=r[6],
        updated_at=r[7],
    )


class PostgresResourceOverrideRepository:
    """Resource override repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_for_resource(
        self, organization_id: str, resource_type: ResourceType, resource_id: str
    ) -> ResourceOverride | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM resource_override "
            "WHERE organization_id = %s AND resource_type = %s AND resource_id = %s",
            (organization_id, resource_type.value, resource_id),
        )
        r = await cur.fetchone()
        return _row_to_override(r) if r else None

    async def list_by_template(self, template_id: str) -> list[ResourceOverride]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM resource_override WHERE template_id = %s",
            (template_id,),
        )
        return [_row_to_override(r) for r in await cur.fetchall()]

    async def upsert(self, override: ResourceOverride) -> ResourceOverride:
        """Insert or replace the override of (organization, resource type, resource id)."""
        await self._conn.execute(
            f"INSERT INTO resource_override ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s) "
            "ON CONFLICT (organization_id, resource_type, resource_id) DO UPDATE SET "
            "permissions = EXCLUDED.permissions, template_id = EXCLUDED.template_id, "
            "updated_at = EXCLUDED.updated_at",
            (
                override.id,
                override.organization_id,
                override.resource_type.value,
                override.resource_id,
                Jsonb(override.permissions),
                override.template_id,
                override.created_at,
                override.updated_at,
            ),
        )
        return override

    async def delete(self, override_id: str) -> None:
        await self._conn.execute(
            "DELETE FROM resource_override WHERE id = %s", (override_id,)
        )
