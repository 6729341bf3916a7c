"""PostgreSQL membership repository implementation."""

from psycopg import AsyncConnection, errors
from psycopg.types.json import Jsonb

from taskhub.domain.entities import Membership
from taskhub.domain.exceptions import DuplicateMembership
from taskhub.domain.value_objects import BuiltinRole, MembershipStatus

_COLUMNS = (
    "id, user_id, organization_id, role, status, title, permissions, invited_by, "
    "joined_at, removed_at, created_at, updated_at"
)


def _row_to_membership(r: tuple) -> Membership:
    return Membership(
        id=r[0],
        user_id=r[1],
        organization_id=r[2],
        role=r[3],
        status=MembershipStatus(r[4]),
        title=r[5],
        permissions=dict(r[6] or {}),
        invited_by=r[7],
        joined_at=r[8],
        removed_at=r[9],
        created_at=r[10],
        updated_at=r[11],
    )


class PostgresMembershipRepository:
    """Membership repository implementation.

    The partial unique index ux_membership_active keeps one active
    membership per user and organization.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, membership_id: str) -> Membership | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM membership WHERE id = %s", (membership_id,)
        )
        r = await cur.fetchone()
        return _row_to_membership(r) if r else None

    async def get_active(self, user_id: str, organization_id: str) -> Membership | None:
        return await self._get_with_status(user_id, organization_id, MembershipStatus.ACTIVE)

    async def get_invited(self, user_id: str, organization_id: str) -> Membership | None:
        return await self._get_with_status(user_id, organization_id, MembershipStatus.INVITED)

    async def _get_with_status(
        self, user_id: str, organization_id: str, status: MembershipStatus
    ) -> Membership | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM membership "
            "WHERE user_id = %s AND organization_id = %s AND status = %s "
            "ORDER BY created_at DESC LIMIT 1",
            (user_id, organization_id, status.value),
        )
        r = await cur.fetchone()
        return _row_to_membership(r) if r else None

    async def list_active_by_user(self, user_id: str) -> list[Membership]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM membership WHERE user_id = %s AND status = %s "
            "ORDER BY joined_at",
            (user_id, MembershipStatus.ACTIVE.value),
        )
        return [_row_to_membership(r) for r in await cur.fetchall()]

    async def list_invited_by_user(self, user_id: str) -> list[Membership]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM membership WHERE user_id = %s AND status = %s "
            "ORDER BY created_at DESC",
            (user_id, MembershipStatus.INVITED.value),
        )
        return [_row_to_membership(r) for r in await cur.fetchall()]

    async def list_by_organization(
        self, organization_id: str, *, include_removed: bool = False
    ) -> list[Membership]:
        q = f"SELECT {_COLUMNS} FROM membership WHERE organization_id = %s"
        params: list[object] = [organization_id]
        if not include_removed:
            q += " AND status <> %s"
            params.append(MembershipStatus.REMOVED.value)
        cur = await self._conn.execute(q + " ORDER BY joined_at", tuple(params))
        return [_row_to_membership(r) for r in await cur.fetchall()]

    async def list_by_role(self, organization_id: str, role: str) -> list[Membership]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM membership "
            "WHERE organization_id = %s AND role = %s AND status <> %s",
            (organization_id, role, MembershipStatus.REMOVED.value),
        )
        return [_row_to_membership(r) for r in await cur.fetchall()]

    async def count_active_admins(self, organization_id: str) -> int:
        cur = await self._conn.execute(
            "SELECT count(*) FROM membership "
            "WHERE organization_id = %s AND role = %s AND status = %s",
            (organization_id, BuiltinRole.ADMIN.value, MembershipStatus.ACTIVE.value),
        )
        r = await cur.fetchone()
        return int(r[0]) if r else 0

    async def create(self, membership: Membership) -> Membership:
        try:
            await self._conn.execute(
                f"INSERT INTO membership ({_COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                (
                    membership.id,
                    membership.user_id,
                    membership.organization_id,
                    membership.role,
                    membership.status.value,
                    membership.title,
                    Jsonb(membership.permissions),
                    membership.invited_by,
                    membership.joined_at,
                    membership.removed_at,
                    membership.created_at,
                    membership.updated_at,
                ),
            )
        except errors.UniqueViolation:
            raise DuplicateMembership(membership.user_id, membership.organization_id) from None
        return membership

    async def update(self, membership: Membership) -> None:
        try:
            await self._conn.execute(
                "UPDATE membership SET role=%s, status=%s, title=%s, permissions=%s, "
                "joined_at=%s, removed_at=%s, updated_at=%s WHERE id=%s",
                (
                    membership.role,
                    membership.status.value,
                    membership.title,
                    Jsonb(membership.permissions),
                    membership.joined_at,
                    membership.removed_at,
                    membership.updated_at,
                    membership.id,
                ),
            )
        except errors.UniqueViolation:
            raise DuplicateMembership(membership.user_id, membership.organization_id) from None

    async def reassign_role(self, organization_id: str, old_role: str, new_role: str) -> int:
        cur = await self._conn.execute(
            "UPDATE membership SET role = %s, updated_at = NOW() "
            "WHERE organization_id = %s AND role = %s AND status <> %s",
            (new_role, organization_id, old_role, MembershipStatus.REMOVED.value),
        )
        return cur.rowcount
