"""Permission template API resources."""

import falcon
import falcon.asgi

from taskhub.application.ports import MembershipResolver
from taskhub.application.use_cases.template.apply_template import ApplyTemplateUseCase
from taskhub.application.use_cases.template.create_template import CreateTemplateUseCase
from taskhub.application.use_cases.template.delete_template import DeleteTemplateUseCase
from taskhub.application.use_cases.template.update_template import UpdateTemplateUseCase
from taskhub.domain.exceptions import TemplateNotFound
from taskhub.domain.value_objects import BuiltinRole, parse_object_id
from taskhub.interfaces.api.middleware.auth import require_user
from taskhub.interfaces.api.resources.common import (
    application_to_dict,
    organization_param,
    read_json,
    template_to_dict,
)

_TEMPLATE_READERS = (BuiltinRole.ADMIN, BuiltinRole.MANAGER)


class TemplatesResource:
    """GET/POST /v1/permissions/templates."""

    def __init__(
        self,
        unit_of_work_factory,
        membership_resolver: MembershipResolver,
        create_template: CreateTemplateUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver
        self._create = create_template

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req)
        resolved = await self._resolver.check_role(
            user.user_id, organization_param(req), _TEMPLATE_READERS
        )
        async with self._uow_factory() as uow:
            templates = await uow.templates.list(resolved.organization_id)
        resp.media = {"items": [template_to_dict(t) for t in templates]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = require_user(req)
        body = await read_json(req)
        template = await self._create.execute(
            user.user_id,
            organization_param(req),
            name=body.get("name"),
            permissions=body.get("permissions"),
            applicable_resource_types=body.get("applicable_resource_types"),
            description=body.get("description") or "",
            is_default=bool(body.get("is_default", False)),
        )
        resp.media = template_to_dict(template)
        resp.status = falcon.HTTP_201


class TemplateResource:
    """GET/PUT/DELETE /v1/permissions/templates/{template_id}."""

    def __init__(
        self,
        unit_of_work_factory,
        membership_resolver: MembershipResolver,
        update_template: UpdateTemplateUseCase,
        delete_template: DeleteTemplateUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver
        self._update = update_template
        self._delete = delete_template

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, template_id: str
    ) -> None:
        user = require_user(req)
        resolved = await self._resolver.check_role(
            user.user_id, organization_param(req), _TEMPLATE_READERS
        )
        template_id = parse_object_id(template_id, "template")
        async with self._uow_factory() as uow:
            template = await uow.templates.get_by_id(template_id, resolved.organization_id)
        if template is None:
            raise TemplateNotFound(template_id)
        resp.media = template_to_dict(template)
        resp.status = falcon.HTTP_200

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, template_id: str
    ) -> None:
        user = require_user(req)
        body = await read_json(req)
        is_default = body.get("is_default")
        template = await self._update.execute(
            user.user_id,
            organization_param(req),
            template_id,
            name=body.get("name"),
            description=body.get("description"),
            permissions=body.get("permissions"),
            applicable_resource_types=body.get("applicable_resource_types"),
            is_default=None if is_default is None else bool(is_default),
        )
        resp.media = template_to_dict(template)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, template_id: str
    ) -> None:
        user = require_user(req)
        await self._delete.execute(
            user.user_id,
            organization_param(req),
            template_id,
            cascade=req.get_param_as_bool("cascade", default=False),
        )
        resp.status = falcon.HTTP_204


class TemplateApplyResource:
    """POST /v1/permissions/templates/{template_id}/apply."""

    def __init__(self, apply_template: ApplyTemplateUseCase) -> None:
        self._apply = apply_template

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, template_id: str
    ) -> None:
        user = require_user(req)
        body = await read_json(req)
        application = await self._apply.execute(
            user.user_id,
            organization_param(req),
            template_id,
            body.get("resource_type"),
            body.get("resource_id"),
            role_id=body.get("role_id") or None,
        )
        resp.media = application_to_dict(application)
        resp.status = falcon.HTTP_201
