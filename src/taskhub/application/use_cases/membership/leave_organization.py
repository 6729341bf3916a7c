"""Leave organization use case."""

from datetime import UTC, datetime

import structlog

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.membership.admin_guard import ensure_not_last_admin
from taskhub.application.use_cases.membership.current_organization import (
    repoint_current_organization,
)
from taskhub.domain.value_objects import MembershipStatus

log = structlog.get_logger()


class LeaveOrganizationUseCase:
    """Let an active member leave. The last admin cannot leave."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(self, user_id: str, organization_id: str) -> None:
        async with self._uow_factory() as uow:
            membership = await self._resolver.membership(user_id, organization_id, uow=uow)
            await ensure_not_last_admin(uow, membership)

            now = datetime.now(UTC)
            membership.status = MembershipStatus.REMOVED
            membership.removed_at = now
            membership.updated_at = now
            await uow.memberships.update(membership)
            await repoint_current_organization(uow, user_id, membership.organization_id)

        log.info(
            "membership.left", organization_id=membership.organization_id, user_id=user_id
        )
