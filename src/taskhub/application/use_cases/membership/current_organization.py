"""Keep a user's current organization pointing at an active membership."""

from datetime import UTC, datetime

from taskhub.application.ports import UnitOfWork


async def repoint_current_organization(
    uow: UnitOfWork, user_id: str, leaving_organization_id: str
) -> None:
    """Move the user's current organization off leaving_organization_id.

    Picks another active membership, or clears it when none is left.
    """
    user = await uow.users.get_by_id(user_id)
    if user is None or user.current_organization_id != leaving_organization_id:
        return
    remaining = [
        m
        for m in await uow.memberships.list_active_by_user(user_id)
        if m.organization_id != leaving_organization_id
    ]
    user.current_organization_id = remaining[0].organization_id if remaining else None
    user.updated_at = datetime.now(UTC)
    await uow.users.update(user)
