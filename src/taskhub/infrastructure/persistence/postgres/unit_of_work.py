"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import psycopg
from psycopg_pool import AsyncConnectionPool

from taskhub.domain.exceptions import InternalError

from taskhub.infrastructure.persistence.postgres.custom_role_repository import (
    PostgresCustomRoleRepository,
)
from taskhub.infrastructure.persistence.postgres.membership_repository import (
    PostgresMembershipRepository,
)
from taskhub.infrastructure.persistence.postgres.organization_repository import (
    PostgresOrganizationRepository,
)
from taskhub.infrastructure.persistence.postgres.resource_override_repository import (
    PostgresResourceOverrideRepository,
)
from taskhub.infrastructure.persistence.postgres.resource_repository import (
    PostgresResourceRepository,
)
from taskhub.infrastructure.persistence.postgres.template_application_repository import (
    PostgresTemplateApplicationRepository,
)
from taskhub.infrastructure.persistence.postgres.template_repository import (
    PostgresTemplateRepository,
)
from taskhub.infrastructure.persistence.postgres.user_repository import (
    PostgresUserRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._users = PostgresUserRepository(self._conn)
        self._organizations = PostgresOrganizationRepository(self._conn)
        self._memberships = PostgresMembershipRepository(self._conn)
        self._custom_roles = PostgresCustomRoleRepository(self._conn)
        self._templates = PostgresTemplateRepository(self._conn)
        self._template_applications = PostgresTemplateApplicationRepository(self._conn)
        self._resources = PostgresResourceRepository(self._conn)
        self._resource_overrides = PostgresResourceOverrideRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def users(self) -> PostgresUserRepository:
        return self._users

    @property
    def organizations(self) -> PostgresOrganizationRepository:
        return self._organizations

    @property
    def memberships(self) -> PostgresMembershipRepository:
        return self._memberships

    @property
    def custom_roles(self) -> PostgresCustomRoleRepository:
        return self._custom_roles

    @property
    def templates(self) -> PostgresTemplateRepository:
        return self._templates

    @property
    def template_applications(self) -> PostgresTemplateApplicationRepository:
        return self._template_applications

    @property
    def resources(self) -> PostgresResourceRepository:
        return self._resources

    @property
    def resource_overrides(self) -> PostgresResourceOverrideRepository:
        return self._resource_overrides

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool):
    """Create UnitOfWork factory (async context manager).

    Commits when the block exits normally, rolls back when it raises.
    Driver errors surface as InternalError.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        uow = PostgresUnitOfWork(pool)
        async with uow:
            try:
                yield uow
                await uow.commit()
            except psycopg.Error as e:
                await uow.rollback()
                raise InternalError(f"Database error: {type(e).__name__}") from e
            except BaseException:
                await uow.rollback()
                raise

    return factory
