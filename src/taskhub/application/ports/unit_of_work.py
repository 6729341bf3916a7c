"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from taskhub.application.ports.repositories import (
    CustomRoleRepository,
    MembershipRepository,
    OrganizationRepository,
    ResourceOverrideRepository,
    ResourceRepository,
    TemplateApplicationRepository,
    TemplateRepository,
    UserRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def users(self) -> UserRepository: ...

    @property
    def organizations(self) -> OrganizationRepository: ...

    @property
    def memberships(self) -> MembershipRepository: ...

    @property
    def custom_roles(self) -> CustomRoleRepository: ...

    @property
    def templates(self) -> TemplateRepository: ...

    @property
    def template_applications(self) -> TemplateApplicationRepository: ...

    @property
    def resources(self) -> ResourceRepository: ...

    @property
    def resource_overrides(self) -> ResourceOverrideRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances.

    Used as `async with factory() as uow`; commits on normal exit and rolls
    back when the block raises.
    """

    def __call__(self) -> AsyncIterator[UnitOfWork]: ...
