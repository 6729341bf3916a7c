"""Resource access and sharing API resources."""

import falcon
import falcon.asgi

from taskhub.application.dto.access import AccessRequirement
from taskhub.application.ports import AccessEvaluator, MembershipResolver
from taskhub.application.use_cases.resource.publish_resource import PublishResourceUseCase
from taskhub.application.use_cases.resource.set_collaborator import SetCollaboratorUseCase
from taskhub.application.use_cases.resource.share_resource import ShareResourceUseCase
from taskhub.domain.exceptions import ValidationError
from taskhub.domain.value_objects import ResourceAction
from taskhub.interfaces.api.middleware.auth import require_user
from taskhub.interfaces.api.resources.common import (
    organization_param,
    read_json,
    resource_to_dict,
)


def _action_param(req: falcon.asgi.Request) -> ResourceAction:
    value = req.get_param("action") or ResourceAction.READ
    try:
        return ResourceAction(value)
    except ValueError:
        raise ValidationError(f"Invalid action: {value!r}") from None


class PermissionCheckResource:
    """GET /v1/permissions/check - answer a permission question without acting.

    With resource_type and resource_id the resource access paths are
    evaluated; otherwise the caller's organization permissions are checked.
    Always 200 with allowed true or false.
    """

    def __init__(
        self, access_evaluator: AccessEvaluator, membership_resolver: MembershipResolver
    ) -> None:
        self._evaluator = access_evaluator
        self._resolver = membership_resolver

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req)
        permission = req.get_param("permission") or None
        resource_type = req.get_param("resource_type")
        resource_id = req.get_param("resource_id")

        if resource_type or resource_id:
            if not (resource_type and resource_id):
                raise ValidationError("resource_type and resource_id go together")
            decision = await self._evaluator.evaluate_by_id(
                user.user_id,
                resource_type,
                resource_id,
                AccessRequirement(action=_action_param(req), permission=permission),
            )
            resp.media = decision.to_dict()
            resp.status = falcon.HTTP_200
            return

        if not permission:
            raise ValidationError("permission or a resource is required")
        resolved = await self._resolver.resolve(user.user_id, organization_param(req))
        resp.media = {
            "allowed": resolved.has_permission(permission),
            "permission": permission,
            "role": resolved.role,
            "organization_id": resolved.organization_id,
        }
        resp.status = falcon.HTTP_200


class ResourceAccessResource:
    """GET /v1/resources/{resource_type}/{resource_id} - read a resource the caller may see."""

    def __init__(self, access_evaluator: AccessEvaluator) -> None:
        self._evaluator = access_evaluator

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        resource_type: str,
        resource_id: str,
    ) -> None:
        user = require_user(req)
        decision = (
            await self._evaluator.evaluate_by_id(
                user.user_id,
                resource_type,
                resource_id,
                AccessRequirement(action=ResourceAction.READ),
            )
        ).unwrap()
        req.context.membership = decision.membership
        resp.media = {**resource_to_dict(decision.resource), "access": str(decision.grant)}
        resp.status = falcon.HTTP_200


class ResourcePublicResource:
    """PUT/DELETE /v1/resources/{resource_type}/{resource_id}/public."""

    def __init__(self, publish_resource: PublishResourceUseCase) -> None:
        self._publish = publish_resource

    async def _set(self, req, resp, resource_type: str, resource_id: str, is_shared: bool) -> None:
        user = require_user(req)
        resource = await self._publish.execute(
            user.user_id, resource_type, resource_id, is_shared
        )
        resp.media = resource_to_dict(resource)
        resp.status = falcon.HTTP_200

    async def on_put(self, req, resp, resource_type: str, resource_id: str) -> None:
        await self._set(req, resp, resource_type, resource_id, True)

    async def on_delete(self, req, resp, resource_type: str, resource_id: str) -> None:
        await self._set(req, resp, resource_type, resource_id, False)


class ResourceShareResource:
    """PUT/DELETE /v1/resources/{resource_type}/{resource_id}/shares/{user_id}."""

    def __init__(self, share_resource: ShareResourceUseCase) -> None:
        self._share = share_resource

    async def on_put(self, req, resp, resource_type: str, resource_id: str, user_id: str) -> None:
        user = require_user(req)
        resource = await self._share.execute(
            user.user_id, resource_type, resource_id, user_id, shared=True
        )
        resp.media = resource_to_dict(resource)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req, resp, resource_type: str, resource_id: str, user_id: str
    ) -> None:
        user = require_user(req)
        resource = await self._share.execute(
            user.user_id, resource_type, resource_id, user_id, shared=False
        )
        resp.media = resource_to_dict(resource)
        resp.status = falcon.HTTP_200


class ResourceCollaboratorResource:
    """PUT/DELETE /v1/resources/{resource_type}/{resource_id}/collaborators/{user_id}."""

    def __init__(self, set_collaborator: SetCollaboratorUseCase) -> None:
        self._set_collaborator = set_collaborator

    async def on_put(self, req, resp, resource_type: str, resource_id: str, user_id: str) -> None:
        user = require_user(req)
        body = await read_json(req)
        role = body.get("role")
        if not role:
            raise ValidationError("role is required")
        resource = await self._set_collaborator.execute(
            user.user_id, resource_type, resource_id, user_id, role
        )
        resp.media = resource_to_dict(resource)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req, resp, resource_type: str, resource_id: str, user_id: str
    ) -> None:
        user = require_user(req)
        resource = await self._set_collaborator.execute(
            user.user_id, resource_type, resource_id, user_id, None
        )
        resp.media = resource_to_dict(resource)
        resp.status = falcon.HTTP_200
