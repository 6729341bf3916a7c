"""Accept invitation use case."""

from datetime import UTC, datetime, timedelta

import structlog

from taskhub.application.use_cases.membership.invite_member import (
    DEFAULT_INVITATION_TTL,
    invitation_expired,
)
from taskhub.domain.entities import Membership
from taskhub.domain.exceptions import InvitationExpired, InvitationNotFound
from taskhub.domain.value_objects import MembershipStatus, parse_object_id

log = structlog.get_logger()


class AcceptInvitationUseCase:
    """Turn the caller's pending invitation into an active membership.

    The organization becomes the caller's current one when none is set.
    """

    def __init__(
        self,
        unit_of_work_factory,
        invitation_ttl: timedelta = DEFAULT_INVITATION_TTL,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._ttl = invitation_ttl

    async def execute(self, user_id: str, organization_id: str) -> Membership:
        org_id = parse_object_id(organization_id, "organization")

        async with self._uow_factory() as uow:
            membership = await uow.memberships.get_invited(user_id, org_id)
            if membership is None:
                raise InvitationNotFound(org_id)
            now = datetime.now(UTC)
            if invitation_expired(membership, self._ttl, now):
                raise InvitationExpired()

            membership.status = MembershipStatus.ACTIVE
            membership.joined_at = now
            membership.updated_at = now
            await uow.memberships.update(membership)

            user = await uow.users.get_by_id(user_id)
            if user is not None and not user.current_organization_id:
                user.current_organization_id = org_id
                user.updated_at = now
                await uow.users.update(user)

        log.info(
            "membership.accepted",
            organization_id=org_id,
            user_id=user_id,
            role=membership.role,
        )
        return membership
