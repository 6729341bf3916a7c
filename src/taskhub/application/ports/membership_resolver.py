"""Membership resolver port - organization membership and role checks."""

from collections.abc import Sequence
from typing import Protocol

from taskhub.application.dto.access import ResolvedMembership
from taskhub.application.ports.unit_of_work import UnitOfWork
from taskhub.domain.entities import Membership
from taskhub.domain.value_objects import ResourceRef


class MembershipResolver(Protocol):
    """Port for resolving a caller's membership and effective permissions."""

    async def resolve(
        self,
        user_id: str,
        organization_id: str | None,
        resource: ResourceRef | None = None,
        *,
        uow: UnitOfWork | None = None,
    ) -> ResolvedMembership: ...

    async def membership(
        self, user_id: str, organization_id: str | None, *, uow: UnitOfWork
    ) -> Membership:
        """Active membership only, without computing permissions."""
        ...

    async def check_role(
        self, user_id: str, organization_id: str | None, roles: Sequence[str]
    ) -> ResolvedMembership: ...

    async def check_permission(
        self, user_id: str, organization_id: str | None, permissions: Sequence[str]
    ) -> ResolvedMembership: ...

    async def require_any_membership(self, user_id: str) -> list[Membership]: ...
