"""Organization and membership API resources."""

import falcon
import falcon.asgi

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.membership.leave_organization import (
    LeaveOrganizationUseCase,
)
from taskhub.application.use_cases.membership.remove_member import RemoveMemberUseCase
from taskhub.application.use_cases.membership.update_membership import (
    UpdateMembershipUseCase,
)
from taskhub.application.use_cases.organization.create_organization import (
    CreateOrganizationUseCase,
)
from taskhub.interfaces.api.middleware.auth import require_user
from taskhub.interfaces.api.resources.common import (
    membership_to_dict,
    organization_to_dict,
    read_json,
)


class OrganizationsResource:
    """POST /v1/organizations - create organization."""

    def __init__(self, create_organization: CreateOrganizationUseCase) -> None:
        self._create = create_organization

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req)
        body = await read_json(req)
        org = await self._create.execute(
            user.user_id, body.get("name"), body.get("description") or ""
        )
        resp.media = organization_to_dict(org)
        resp.status = falcon.HTTP_201


class MembersResource:
    """GET /v1/organizations/{organization_id}/members - list members."""

    def __init__(self, unit_of_work_factory, membership_resolver: MembershipResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, organization_id: str
    ) -> None:
        user = require_user(req)
        resolved = await self._resolver.resolve(user.user_id, organization_id)
        req.context.membership = resolved
        include_removed = resolved.is_admin and req.get_param_as_bool(
            "include_removed", default=False
        )
        async with self._uow_factory() as uow:
            members = await uow.memberships.list_by_organization(
                resolved.organization_id, include_removed=include_removed
            )
        resp.media = {"items": [membership_to_dict(m) for m in members]}
        resp.status = falcon.HTTP_200


class MemberResource:
    """PATCH/DELETE /v1/organizations/{organization_id}/members/{user_id}."""

    def __init__(
        self,
        update_membership: UpdateMembershipUseCase,
        remove_member: RemoveMemberUseCase,
    ) -> None:
        self._update = update_membership
        self._remove = remove_member

    async def on_patch(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        organization_id: str,
        user_id: str,
    ) -> None:
        user = require_user(req)
        body = await read_json(req)
        membership = await self._update.execute(
            user.user_id,
            organization_id,
            user_id,
            role=body.get("role"),
            status=body.get("status"),
            title=body.get("title"),
            permissions=body.get("permissions"),
        )
        resp.media = membership_to_dict(membership)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        organization_id: str,
        user_id: str,
    ) -> None:
        user = require_user(req)
        await self._remove.execute(user.user_id, organization_id, user_id)
        resp.status = falcon.HTTP_204


class LeaveOrganizationResource:
    """POST /v1/organizations/{organization_id}/leave."""

    def __init__(self, leave_organization: LeaveOrganizationUseCase) -> None:
        self._leave = leave_organization

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, organization_id: str
    ) -> None:
        user = require_user(req)
        await self._leave.execute(user.user_id, organization_id)
        resp.status = falcon.HTTP_204
