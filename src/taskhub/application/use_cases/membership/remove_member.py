"""Remove member use case."""

from datetime import UTC, datetime

import structlog

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.membership.admin_guard import ensure_not_last_admin
from taskhub.application.use_cases.membership.current_organization import (
    repoint_current_organization,
)
from taskhub.domain.exceptions import MembershipNotFound, ValidationError
from taskhub.domain.value_objects import BuiltinRole, MembershipStatus, parse_object_id

log = structlog.get_logger()


class RemoveMemberUseCase:
    """Soft-remove another member from the organization. Admin only."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(self, actor_id: str, organization_id: str, user_id: str) -> None:
        resolved = await self._resolver.check_role(
            actor_id, organization_id, (BuiltinRole.ADMIN,)
        )
        org_id = resolved.organization_id
        user_id = parse_object_id(user_id, "user")
        if user_id == actor_id:
            raise ValidationError("You cannot remove yourself; leave the organization instead")

        async with self._uow_factory() as uow:
            membership = await uow.memberships.get_active(user_id, org_id)
            if membership is None:
                raise MembershipNotFound(user_id)
            await ensure_not_last_admin(uow, membership)

            now = datetime.now(UTC)
            membership.status = MembershipStatus.REMOVED
            membership.removed_at = now
            membership.updated_at = now
            await uow.memberships.update(membership)
            await repoint_current_organization(uow, user_id, org_id)

        log.info("membership.removed", organization_id=org_id, user_id=user_id, by=actor_id)
