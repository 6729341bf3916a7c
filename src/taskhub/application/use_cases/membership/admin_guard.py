"""Last admin protection."""

from taskhub.application.ports import UnitOfWork
from taskhub.domain.entities import Membership
from taskhub.domain.exceptions import LastAdmin


async def ensure_not_last_admin(uow: UnitOfWork, membership: Membership) -> None:
    """Raise LastAdmin if membership is the only active admin of its organization."""
    if not (membership.is_active and membership.is_admin):
        return
    if await uow.memberships.count_active_admins(membership.organization_id) <= 1:
        raise LastAdmin()
