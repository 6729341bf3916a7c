"""Invitation and current organization API resources."""

import falcon
import falcon.asgi

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.membership.accept_invitation import (
    AcceptInvitationUseCase,
)
from taskhub.application.use_cases.membership.cancel_invitation import (
    CancelInvitationUseCase,
)
from taskhub.application.use_cases.membership.invite_member import InviteMemberUseCase
from taskhub.application.use_cases.membership.set_current_organization import (
    SetCurrentOrganizationUseCase,
)
from taskhub.domain.value_objects import BuiltinRole, MembershipStatus
from taskhub.interfaces.api.middleware.auth import require_user
from taskhub.interfaces.api.resources.common import membership_to_dict, read_json


class OrganizationInvitationsResource:
    """GET/POST /v1/organizations/{organization_id}/invitations."""

    def __init__(
        self,
        unit_of_work_factory,
        membership_resolver: MembershipResolver,
        invite_member: InviteMemberUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver
        self._invite = invite_member

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, organization_id: str
    ) -> None:
        user = require_user(req)
        resolved = await self._resolver.check_role(
            user.user_id, organization_id, (BuiltinRole.ADMIN, BuiltinRole.MANAGER)
        )
        req.context.membership = resolved
        async with self._uow_factory() as uow:
            members = await uow.memberships.list_by_organization(resolved.organization_id)
        resp.media = {
            "items": [
                membership_to_dict(m) for m in members if m.status == MembershipStatus.INVITED
            ]
        }
        resp.status = falcon.HTTP_200

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, organization_id: str
    ) -> None:
        user = require_user(req)
        body = await read_json(req)
        invitation = await self._invite.execute(
            user.user_id,
            organization_id,
            body.get("user_id"),
            role=body.get("role"),
            title=body.get("title"),
        )
        resp.media = membership_to_dict(invitation)
        resp.status = falcon.HTTP_201


class OrganizationInvitationResource:
    """DELETE /v1/organizations/{organization_id}/invitations/{user_id} - cancel."""

    def __init__(self, cancel_invitation: CancelInvitationUseCase) -> None:
        self._cancel = cancel_invitation

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        organization_id: str,
        user_id: str,
    ) -> None:
        user = require_user(req)
        await self._cancel.execute(user.user_id, organization_id, user_id)
        resp.status = falcon.HTTP_204


class MyInvitationsResource:
    """GET /v1/users/me/invitations - pending invitations of the caller."""

    def __init__(self, unit_of_work_factory) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req)
        async with self._uow_factory() as uow:
            invitations = await uow.memberships.list_invited_by_user(user.user_id)
        resp.media = {"items": [membership_to_dict(m) for m in invitations]}
        resp.status = falcon.HTTP_200


class MyInvitationResource:
    """POST/DELETE /v1/users/me/invitations/{organization_id} - accept or decline."""

    def __init__(
        self,
        accept_invitation: AcceptInvitationUseCase,
        cancel_invitation: CancelInvitationUseCase,
    ) -> None:
        self._accept = accept_invitation
        self._cancel = cancel_invitation

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, organization_id: str
    ) -> None:
        user = require_user(req)
        membership = await self._accept.execute(user.user_id, organization_id)
        resp.media = membership_to_dict(membership)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, organization_id: str
    ) -> None:
        user = require_user(req)
        await self._cancel.execute(user.user_id, organization_id, user.user_id)
        resp.status = falcon.HTTP_204


class CurrentOrganizationResource:
    """PUT /v1/users/me/current-organization."""

    def __init__(self, set_current_organization: SetCurrentOrganizationUseCase) -> None:
        self._set_current = set_current_organization

    async def on_put(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req)
        body = await read_json(req)
        membership = await self._set_current.execute(user.user_id, body.get("organization_id"))
        resp.media = {
            "current_organization_id": membership.organization_id,
            "role": membership.role,
        }
        resp.status = falcon.HTTP_200
