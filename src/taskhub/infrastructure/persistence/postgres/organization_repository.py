"""PostgreSQL organization repository implementation."""

from psycopg import AsyncConnection

from taskhub.domain.entities import Organization


class PostgresOrganizationRepository:
    """Organization repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, organization_id: str) -> Organization | None:
        cur = await self._conn.execute(
            "SELECT id, name, description, created_by, created_at, updated_at "
            "FROM organization WHERE id = %s",
            (organization_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return Organization(
            id=r[0],
            name=r[1],
            description=r[2],
            created_by=r[3],
            created_at=r[4],
            updated_at=r[5],
        )

    async def create(self, organization: Organization) -> Organization:
        await self._conn.execute(
            "INSERT INTO organization (id, name, description, created_by, created_at, updated_at) "
            "VALUES (%s, %s, %s, %s, %s, %s)",
            (
                organization.id,
                organization.name,
                organization.description,
                organization.created_by,
                organization.created_at,
                organization.updated_at,
            ),
        )
        return organization

    async def update(self, organization: Organization) -> None:
        await self._conn.execute(
            "UPDATE organization SET name=%s, description=%s, updated_at=%s WHERE id=%s",
            (
                organization.name,
                organization.description,
                organization.updated_at,
                organization.id,
            ),
        )
