"""PostgreSQL custom role repository implementation."""

from psycopg import AsyncConnection, errors
from psycopg.types.json import Jsonb

from taskhub.domain.entities import CustomRole, RoleResourceOverride
from taskhub.domain.exceptions import DuplicateName
from taskhub.domain.value_objects import ResourceType, RoleBase, RoleStatus

_COLUMNS = (
    "id, organization_id, name, description, based_on, permissions, resource_overrides, "
    "is_system_role, status, created_by, updated_by, created_at, updated_at, deleted_at"
)


def _overrides_to_json(overrides: list[RoleResourceOverride]) -> list[dict]:
    return [
        {
            "resource_type": o.resource_type.value,
            "resource_id": o.resource_id,
            "permissions": o.permissions,
            "template_id": o.template_id,
        }
        for o in overrides
    ]


def _row_to_role(r: tuple) -> CustomRole:
    return CustomRole(
        id=r[0],
        organization_id=r[1],
        name=r[2],
        description=r[3] or "",
        based_on=RoleBase(r[4]),
        permissions=dict(r[5] or {}),
        resource_overrides=[
            RoleResourceOverride(
                resource_type=ResourceType(o["resource_type"]),
                resource_id=o["resource_id"],
                permissions=dict(o.get("permissions") or {}),
                template_id=o.get("template_id"),
            )
            for o in (r[6] or [])
        ],
        is_system_role=r[7],
        status=RoleStatus(r[8]),
        created_by=r[9],
        updated_by=r[10],
        created_at=r[11],
        updated_at=r[12],
        deleted_at=r[13],
    )


class PostgresCustomRoleRepository:
    """Custom role repository implementation.

    Resource overrides live in a JSONB column on the role row.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(
        self, role_id: str, organization_id: str, include_deleted: bool = False
    ) -> CustomRole | None:
        q = f"SELECT {_COLUMNS} FROM custom_role WHERE id = %s AND organization_id = %s"
        if not include_deleted:
            q += " AND status <> 'deleted'"
        cur = await self._conn.execute(q, (role_id, organization_id))
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def get_by_name(self, organization_id: str, name: str) -> CustomRole | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM custom_role "
            "WHERE organization_id = %s AND name = %s AND status <> 'deleted'",
            (organization_id, name),
        )
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def list_by_organization(
        self, organization_id: str, include_deleted: bool = False
    ) -> list[CustomRole]:
        q = f"SELECT {_COLUMNS} FROM custom_role WHERE organization_id = %s"
        if not include_deleted:
            q += " AND status <> 'deleted'"
        cur = await self._conn.execute(q + " ORDER BY is_system_role DESC, name", (organization_id,))
        return [_row_to_role(r) for r in await cur.fetchall()]

    async def create(self, role: CustomRole) -> CustomRole:
        try:
            await self._conn.execute(
                f"INSERT INTO custom_role ({_COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                (
                    role.id,
                    role.organization_id,
                    role.name,
                    role.description,
                    role.based_on.value,
                    Jsonb(role.permissions),
                    Jsonb(_overrides_to_json(role.resource_overrides)),
                    role.is_system_role,
                    role.status.value,
                    role.created_by,
                    role.updated_by,
                    role.created_at,
                    role.updated_at,
                    role.deleted_at,
                ),
            )
        except errors.UniqueViolation:
            raise DuplicateName("role", role.name) from None
        return role

    async def update(self, role: CustomRole) -> None:
        try:
            await self._conn.execute(
                "UPDATE custom_role SET name=%s, description=%s, based_on=%s, permissions=%s, "
                "resource_overrides=%s, status=%s, updated_by=%s, updated_at=%s, deleted_at=%s "
                "WHERE id=%s",
                (
                    role.name,
                    role.description,
                    role.based_on.value,
                    Jsonb(role.permissions),
                    Jsonb(_overrides_to_json(role.resource_overrides)),
                    role.status.value,
                    role.updated_by,
                    role.updated_at,
                    role.deleted_at,
                    role.id,
                ),
            )
        except errors.UniqueViolation:
            raise DuplicateName("role", role.name) from None
