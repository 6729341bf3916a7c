"""Custom role API resources."""

import falcon
import falcon.asgi

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.role.clone_role import CloneRoleUseCase
from taskhub.application.use_cases.role.create_role import CreateRoleUseCase
from taskhub.application.use_cases.role.delete_role import DeleteRoleUseCase
from taskhub.application.use_cases.role.remove_resource_override import (
    RemoveResourceOverrideUseCase,
)
from taskhub.application.use_cases.role.set_resource_override import (
    SetResourceOverrideUseCase,
)
from taskhub.application.use_cases.role.update_role import UpdateRoleUseCase
from taskhub.domain.exceptions import RoleNotFound, ValidationError
from taskhub.domain.value_objects import BuiltinRole, RoleBase, parse_object_id
from taskhub.interfaces.api.middleware.auth import require_user
from taskhub.interfaces.api.resources.common import (
    organization_param,
    read_json,
    role_to_dict,
)

_ROLE_READERS = (BuiltinRole.ADMIN, BuiltinRole.MANAGER)


class RolesResource:
    """GET/POST /v1/permissions/roles - list and create custom roles."""

    def __init__(
        self,
        unit_of_work_factory,
        membership_resolver: MembershipResolver,
        create_role: CreateRoleUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver
        self._create = create_role

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req)
        resolved = await self._resolver.check_role(
            user.user_id, organization_param(req), _ROLE_READERS
        )
        async with self._uow_factory() as uow:
            roles = await uow.custom_roles.list_by_organization(resolved.organization_id)
        resp.media = {"items": [role_to_dict(r) for r in roles]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req)
        body = await read_json(req)
        role = await self._create.execute(
            user.user_id,
            organization_param(req),
            name=body.get("name"),
            based_on=body.get("based_on", RoleBase.MEMBER),
            permissions=body.get("permissions"),
            description=body.get("description") or "",
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


class RoleResource:
    """GET/PUT/DELETE /v1/permissions/roles/{role_id}."""

    def __init__(
        self,
        unit_of_work_factory,
        membership_resolver: MembershipResolver,
        update_role: UpdateRoleUseCase,
        delete_role: DeleteRoleUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver
        self._update = update_role
        self._delete = delete_role

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req)
        resolved = await self._resolver.check_role(
            user.user_id, organization_param(req), _ROLE_READERS
        )
        role_id = parse_object_id(role_id, "role")
        async with self._uow_factory() as uow:
            role = await uow.custom_roles.get_by_id(role_id, resolved.organization_id)
        if role is None:
            raise RoleNotFound(role_id)
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req)
        body = await read_json(req)
        role = await self._update.execute(
            user.user_id,
            organization_param(req),
            role_id,
            name=body.get("name"),
            description=body.get("description"),
            based_on=body.get("based_on"),
            permissions=body.get("permissions"),
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req)
        reassigned = await self._delete.execute(
            user.user_id,
            organization_param(req),
            role_id,
            new_role_id=req.get_param("new_role_id") or None,
        )
        resp.media = {"deleted": True, "reassigned": reassigned}
        resp.status = falcon.HTTP_200


class RoleCloneResource:
    """POST /v1/permissions/roles/{role_id}/clone."""

    def __init__(self, clone_role: CloneRoleUseCase) -> None:
        self._clone = clone_role

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req)
        body = await read_json(req)
        role = await self._clone.execute(
            user.user_id, organization_param(req), role_id, body.get("name")
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


class RoleResourceOverrideResource:
    """POST/DELETE /v1/permissions/roles/{role_id}/resource-override."""

    def __init__(
        self,
        set_override: SetResourceOverrideUseCase,
        remove_override: RemoveResourceOverrideUseCase,
    ) -> None:
        self._set = set_override
        self._remove = remove_override

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req)
        body = await read_json(req)
        permissions = body.get("permissions")
        if not isinstance(permissions, dict):
            raise ValidationError("permissions must be an object")
        role = await self._set.execute(
            user.user_id,
            organization_param(req),
            role_id,
            body.get("resource_type"),
            body.get("resource_id"),
            permissions,
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = require_user(req)
        role = await self._remove.execute(
            user.user_id,
            organization_param(req),
            role_id,
            req.get_param("resource_type", required=True),
            req.get_param("resource_id", required=True),
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200
