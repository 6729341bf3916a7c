"""Set current organization use case."""

from datetime import UTC, datetime

import structlog

from taskhub.application.ports import MembershipResolver
from taskhub.domain.entities import Membership
from taskhub.domain.exceptions import OrganizationRequired, UserNotFound

log = structlog.get_logger()


class SetCurrentOrganizationUseCase:
    """Switch the organization used when a request names none.

    The caller needs an active membership in it.
    """

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def execute(self, user_id: str, organization_id: str | None) -> Membership:
        if not organization_id:
            raise OrganizationRequired()

        async with self._uow_factory() as uow:
            membership = await self._resolver.membership(user_id, organization_id, uow=uow)
            user = await uow.users.get_by_id(user_id)
            if user is None:
                raise UserNotFound(user_id)
            user.current_organization_id = membership.organization_id
            user.updated_at = datetime.now(UTC)
            await uow.users.update(user)

        log.info(
            "user.current_organization_set",
            user_id=user_id,
            organization_id=membership.organization_id,
        )
        return membership
