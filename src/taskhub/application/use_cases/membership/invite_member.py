"""Invite member use case."""

from datetime import UTC, datetime, timedelta

import structlog

from taskhub.application.ports import MembershipResolver, UnitOfWork
from taskhub.application.use_cases.membership.update_membership import parse_member_role
from taskhub.domain.entities import Membership
from taskhub.domain.exceptions import (
    ConflictError,
    DuplicateInvitation,
    DuplicateMembership,
    InsufficientRole,
    NotFound,
)
from taskhub.domain.value_objects import (
    BuiltinRole,
    MembershipStatus,
    RoleBase,
    new_object_id,
    parse_object_id,
)

log = structlog.get_logger()

DEFAULT_INVITATION_TTL = timedelta(days=7)


def invitation_expired(
    membership: Membership, ttl: timedelta, now: datetime | None = None
) -> bool:
    return membership.created_at + ttl < (now or datetime.now(UTC))


async def _grants_admin(uow: UnitOfWork, organization_id: str, role: str) -> bool:
    if role == BuiltinRole.ADMIN:
        return True
    if BuiltinRole.is_builtin(role):
        return False
    custom = await uow.custom_roles.get_by_id(role, organization_id)
    return custom is not None and custom.based_on == RoleBase.ADMIN


class InviteMemberUseCase:
    """Invite an existing user into an organization.

    Admins and managers may invite; only admins may invite with the admin
    role or a custom role based on it. The invitation is a membership in the invited status that grants
    nothing until the invitee accepts it. An expired invitation for the same
    user is withdrawn and replaced.
    """

    def __init__(
        self,
        unit_of_work_factory,
        membership_resolver: MembershipResolver,
        invitation_ttl: timedelta = DEFAULT_INVITATION_TTL,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver
        self._ttl = invitation_ttl

    async def execute(
        self,
        actor_id: str,
        organization_id: str,
        user_id: str,
        *,
        role: str | None = None,
        title: str | None = None,
    ) -> Membership:
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN, BuiltinRole.MANAGER)
        )
        org_id = resolved.organization_id
        user_id = parse_object_id(user_id, "user")

        async with self._uow_factory() as uow:
            new_role = await parse_member_role(uow, org_id, role or BuiltinRole.MEMBER)
            if not resolved.is_admin and await _grants_admin(uow, org_id, new_role):
                raise InsufficientRole((BuiltinRole.ADMIN,))
            if await uow.users.get_by_id(user_id) is None:
                raise NotFound("User", user_id)

            now = datetime.now(UTC)
            await self._ensure_invitable(uow, user_id, org_id, now)

            invitation = Membership(
                id=new_object_id(),
                user_id=user_id,
                organization_id=org_id,
                role=new_role,
                joined_at=now,
                created_at=now,
                updated_at=now,
                status=MembershipStatus.INVITED,
                title=title or None,
                invited_by=actor_id,
            )
            await uow.memberships.create(invitation)

        log.info(
            "membership.invited",
            organization_id=org_id,
            user_id=user_id,
            role=new_role,
            by=actor_id,
        )
        return invitation

    async def _ensure_invitable(
        self, uow: UnitOfWork, user_id: str, organization_id: str, now: datetime
    ) -> None:
        for existing in await uow.memberships.list_by_organization(organization_id):
            if existing.user_id != user_id:
                continue
            if existing.status == MembershipStatus.ACTIVE:
                raise DuplicateMembership(user_id, organization_id)
            if existing.status != MembershipStatus.INVITED:
                raise ConflictError(
                    f"User {user_id} has a {existing.status} membership in this "
                    "organization; update it instead"
                )
            if not invitation_expired(existing, self._ttl, now):
                raise DuplicateInvitation(user_id, organization_id)
            existing.status = MembershipStatus.REMOVED
            existing.removed_at = now
            existing.updated_at = now
            await uow.memberships.update(existing)
