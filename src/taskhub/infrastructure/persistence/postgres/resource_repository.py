"""PostgreSQL resource repository implementation."""

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from taskhub.domain.entities import Collaborator, Resource
from taskhub.domain.value_objects import CollaboratorRole, ResourceType

_COLUMNS = (
    "id, resource_type, title, owner_id, organization_id, is_shared, shared_with, "
    "collaborators, created_at, updated_at"
)


def _row_to_resource(r: tuple) -> Resource:
    return Resource(
        id=r[0],
        resource_type=ResourceType(r[1]),
        title=r[2] or "",
        owner_id=r[3],
        organization_id=r[4],
        is_shared=r[5],
        shared_with=frozenset(r[6] or []),
        collaborators=tuple(
            Collaborator(user_id=c["user_id"], role=CollaboratorRole(c["role"]))
            for c in (r[7] or [])
        ),
        created_at=r[8],
        updated_at=r[9],
    )


class PostgresResourceRepository:
    """Access metadata of tasks, notes, projects and teams in one table."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(
        self, resource_type: ResourceType, resource_id: str
    ) -> Resource | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM resource WHERE resource_type = %s AND id = %s",
            (resource_type.value, resource_id),
        )
        r = await cur.fetchone()
        return _row_to_resource(r) if r else None

    async def create(self, resource: Resource) -> Resource:
        await self._conn.execute(
            f"INSERT INTO resource ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                resource.id,
                resource.resource_type.value,
                resource.title,
                resource.owner_id,
                resource.organization_id,
                resource.is_shared,
                Jsonb(sorted(resource.shared_with)),
                Jsonb([{"user_id": c.user_id, "role": c.role.value} for c in resource.collaborators]),
                resource.created_at,
                resource.updated_at,
            ),
        )
        return resource

    async def update(self, resource: Resource) -> None:
        await self._conn.execute(
            "UPDATE resource SET title=%s, owner_id=%s, organization_id=%s, is_shared=%s, "
            "shared_with=%s, collaborators=%s, updated_at=%s WHERE resource_type=%s AND id=%s",
            (
                resource.title,
                resource.owner_id,
                resource.organization_id,
                resource.is_shared,
                Jsonb(sorted(resource.shared_with)),
                Jsonb([{"user_id": c.user_id, "role": c.role.value} for c in resource.collaborators]),
                resource.updated_at,
                resource.resource_type.value,
                resource.id,
            ),
        )
