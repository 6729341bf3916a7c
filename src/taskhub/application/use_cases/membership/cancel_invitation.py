"""Cancel invitation use case."""

from datetime import UTC, datetime

import structlog

from taskhub.application.ports import MembershipResolver
from taskhub.domain.exceptions import InsufficientRole, InvitationNotFound
from taskhub.domain.value_objects import BuiltinRole, MembershipStatus, parse_object_id

log = structlog.get_logger()


class CancelInvitationUseCase:
    """Withdraw a pending invitation.

    Admins and the member who sent it may cancel; the invitee may decline.
    """

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(self, actor_id: str, organization_id: str, user_id: str) -> None:
        org_id = parse_object_id(organization_id, "organization")
        user_id = parse_object_id(user_id, "user")

        async with self._uow_factory() as uow:
            resolved = None
            if actor_id != user_id:
                resolved = await self._resolver.resolve(actor_id, org_id, uow=uow)

            invitation = await uow.memberships.get_invited(user_id, org_id)
            if invitation is None:
                raise InvitationNotFound(user_id)

            if resolved is not None:
                if not resolved.is_admin and invitation.invited_by != actor_id:
                    log.info(
                        "authz.insufficient_role",
                        user_id=actor_id,
                        organization_id=org_id,
                        role=resolved.role,
                        required=[BuiltinRole.ADMIN.value],
                    )
                    raise InsufficientRole((BuiltinRole.ADMIN,))

            now = datetime.now(UTC)
            invitation.status = MembershipStatus.REMOVED
            invitation.removed_at = now
            invitation.updated_at = now
            await uow.memberships.update(invitation)

        log.info(
            "membership.invitation_cancelled",
            organization_id=org_id,
            user_id=user_id,
            by=actor_id,
        )
