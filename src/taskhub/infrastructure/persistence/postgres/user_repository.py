"""PostgreSQL user repository implementation."""

from psycopg import AsyncConnection

from taskhub.domain.entities import User

_COLUMNS = (
    "id, email, username, google_id, github_id, current_organization_id, "
    "last_login_at, created_at, updated_at"
)


def _row_to_user(r: tuple) -> User:
    return User(
        id=r[0],
        email=r[1],
        username=r[2],
        google_id=r[3],
        github_id=r[4],
        current_organization_id=r[5],
        last_login_at=r[6],
        created_at=r[7],
        updated_at=r[8],
    )


class PostgresUserRepository:
    """User repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, user_id: str) -> User | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM app_user WHERE id = %s", (user_id,)
        )
        r = await cur.fetchone()
        return _row_to_user(r) if r else None

    async def get_by_email(self, email: str) -> User | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM app_user WHERE lower(email) = lower(%s)", (email,)
        )
        r = await cur.fetchone()
        return _row_to_user(r) if r else None

    async def create(self, user: User) -> User:
        await self._conn.execute(
            f"INSERT INTO app_user ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                user.id,
                user.email,
                user.username,
                user.google_id,
                user.github_id,
                user.current_organization_id,
                user.last_login_at,
                user.created_at,
                user.updated_at,
            ),
        )
        return user

    async def update(self, user: User) -> None:
        await self._conn.execute(
            "UPDATE app_user SET email=%s, username=%s, current_organization_id=%s, "
            "last_login_at=%s, updated_at=%s WHERE id=%s",
            (
                user.email,
                user.username,
                user.current_organization_id,
                user.last_login_at,
                user.updated_at,
                user.id,
            ),
        )
