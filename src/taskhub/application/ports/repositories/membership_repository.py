"""Membership repository port."""

from typing import Protocol

from taskhub.domain.entities import Membership


class MembershipRepository(Protocol):
    """Port for membership persistence.

    At most one active membership per (user, organization); create and update
    raise DuplicateMembership when a write would break that.
    """

    async def get_by_id(self, membership_id: str) -> Membership | None: ...

    async def get_active(self, user_id: str, organization_id: str) -> Membership | None: ...

    async def get_invited(self, user_id: str, organization_id: str) -> Membership | None: ...

    async def list_active_by_user(self, user_id: str) -> list[Membership]: ...

    async def list_invited_by_user(self, user_id: str) -> list[Membership]: ...

    async def list_by_organization(
        self, organization_id: str, *, include_removed: bool = False
    ) -> list[Membership]: ...

    async def list_by_role(self, organization_id: str, role: str) -> list[Membership]:
        """Memberships holding role in any status except removed."""
        ...

    async def count_active_admins(self, organization_id: str) -> int: ...

    async def create(self, membership: Membership) -> Membership: ...

    async def update(self, membership: Membership) -> None: ...

    async def reassign_role(self, organization_id: str, old_role: str, new_role: str) -> int:
        """Move every non-removed membership from old_role to new_role. Returns count."""
        ...
