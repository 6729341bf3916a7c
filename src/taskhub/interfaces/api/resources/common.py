"""Request parsing and response serialization shared by API resources."""

from typing import Any

import falcon
import falcon.asgi

from taskhub.domain.entities import (
    CustomRole,
    Membership,
    Organization,
    PermissionTemplate,
    Resource,
    TemplateApplication,
)
from taskhub.domain.exceptions import ValidationError


async def read_json(req: falcon.asgi.Request) -> dict[str, Any]:
    """Read a JSON object body. A missing body reads as {}."""
    try:
        body = await req.get_media(default_when_empty={})
    except falcon.MediaMalformedError:
        raise ValidationError("Request body is not valid JSON") from None
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def organization_param(req: falcon.asgi.Request) -> str | None:
    """organization_id from the query string; None falls back to the current organization."""
    return req.get_param("organization_id") or None


def organization_to_dict(org: Organization) -> dict:
    return {
        "id": org.id,
        "name": org.name,
        "description": org.description,
        "created_by": org.created_by,
        "created_at": org.created_at.isoformat(),
        "updated_at": org.updated_at.isoformat(),
    }


def membership_to_dict(m: Membership) -> dict:
    return {
        "id": m.id,
        "user_id": m.user_id,
        "organization_id": m.organization_id,
        "role": m.role,
        "status": m.status.value,
        "title": m.title,
        "permissions": m.permissions,
        "invited_by": m.invited_by,
        "joined_at": m.joined_at.isoformat(),
        "removed_at": m.removed_at.isoformat() if m.removed_at else None,
    }


def role_to_dict(role: CustomRole) -> dict:
    return {
        "id": role.id,
        "organization_id": role.organization_id,
        "name": role.name,
        "description": role.description,
        "based_on": role.based_on.value,
        "permissions": role.permissions,
        "resource_overrides": [
            {
                "resource_type": o.resource_type.value,
                "resource_id": o.resource_id,
                "permissions": o.permissions,
                "template_id": o.template_id,
            }
            for o in role.resource_overrides
        ],
        "is_system_role": role.is_system_role,
        "status": role.status.value,
        "created_at": role.created_at.isoformat(),
        "updated_at": role.updated_at.isoformat(),
    }


def template_to_dict(template: PermissionTemplate) -> dict:
    return {
        "id": template.id,
        "organization_id": template.organization_id,
        "name": template.name,
        "description": template.description,
        "permissions": template.permissions,
        "applicable_resource_types": [t.value for t in template.applicable_resource_types],
        "is_default": template.is_default,
        "created_at": template.created_at.isoformat(),
        "updated_at": template.updated_at.isoformat(),
    }


def application_to_dict(application: TemplateApplication) -> dict:
    return {
        "id": application.id,
        "template_id": application.template_id,
        "resource_type": application.resource_type.value,
        "resource_id": application.resource_id,
        "role_id": application.role_id,
        "applied_by": application.applied_by,
        "applied_at": application.applied_at.isoformat(),
    }


def resource_to_dict(resource: Resource) -> dict:
    return {
        "id": resource.id,
        "resource_type": resource.resource_type.value,
        "title": resource.title,
        "owner_id": resource.owner_id,
        "organization_id": resource.organization_id,
        "is_shared": resource.is_shared,
        "shared_with": sorted(resource.shared_with),
        "collaborators": [
            {"user_id": c.user_id, "role": c.role.value} for c in resource.collaborators
        ],
        "updated_at": resource.updated_at.isoformat(),
    }
