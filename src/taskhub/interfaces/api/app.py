"""Falcon ASGI application."""

from dataclasses import dataclass

import falcon.asgi
from falcon.asgi import App

from taskhub.interfaces.api.errors import register_error_handlers
from taskhub.interfaces.api.resources.access import (
    PermissionCheckResource,
    ResourceAccessResource,
    ResourceCollaboratorResource,
    ResourcePublicResource,
    ResourceShareResource,
)
from taskhub.interfaces.api.resources.health import HealthResource
from taskhub.interfaces.api.resources.invitations import (
    CurrentOrganizationResource,
    MyInvitationResource,
    MyInvitationsResource,
    OrganizationInvitationResource,
    OrganizationInvitationsResource,
)
from taskhub.interfaces.api.resources.organizations import (
    LeaveOrganizationResource,
    MemberResource,
    MembersResource,
    OrganizationsResource,
)
from taskhub.interfaces.api.resources.roles import (
    RoleCloneResource,
    RoleResource,
    RoleResourceOverrideResource,
    RolesResource,
)
from taskhub.interfaces.api.resources.templates import (
    TemplateApplyResource,
    TemplateResource,
    TemplatesResource,
)


@dataclass(frozen=True)
class ApiResources:
    health: HealthResource
    organizations: OrganizationsResource
    members: MembersResource
    member: MemberResource
    leave: LeaveOrganizationResource
    invitations: OrganizationInvitationsResource
    invitation: OrganizationInvitationResource
    my_invitations: MyInvitationsResource
    my_invitation: MyInvitationResource
    current_organization: CurrentOrganizationResource
    roles: RolesResource
    role: RoleResource
    role_clone: RoleCloneResource
    role_override: RoleResourceOverrideResource
    templates: TemplatesResource
    template: TemplateResource
    template_apply: TemplateApplyResource
    permission_check: PermissionCheckResource
    resource_access: ResourceAccessResource
    resource_public: ResourcePublicResource
    resource_share: ResourceShareResource
    resource_collaborator: ResourceCollaboratorResource


def create_app(
    resources: ApiResources,
    middleware: list | None = None,
    debug: bool = False,
) -> App:
    """Create Falcon ASGI app with routes and error handlers."""
    app = falcon.asgi.App(middleware=middleware or [])
    register_error_handlers(app, debug=debug)

    app.add_route("/v1/health", resources.health)
    app.add_route("/v1/health/ready", resources.health, suffix="ready")

    app.add_route("/v1/organizations", resources.organizations)
    app.add_route("/v1/organizations/{organization_id}/members", resources.members)
    app.add_route("/v1/organizations/{organization_id}/members/{user_id}", resources.member)
    app.add_route("/v1/organizations/{organization_id}/leave", resources.leave)
    app.add_route(
        "/v1/organizations/{organization_id}/invitations", resources.invitations
    )
    app.add_route(
        "/v1/organizations/{organization_id}/invitations/{user_id}", resources.invitation
    )
    app.add_route("/v1/users/me/invitations", resources.my_invitations)
    app.add_route("/v1/users/me/invitations/{organization_id}", resources.my_invitation)
    app.add_route("/v1/users/me/current-organization", resources.current_organization)

    app.add_route("/v1/permissions/roles", resources.roles)
    app.add_route("/v1/permissions/roles/{role_id}", resources.role)
    app.add_route("/v1/permissions/roles/{role_id}/clone", resources.role_clone)
    app.add_route(
        "/v1/permissions/roles/{role_id}/resource-override", resources.role_override
    )
    app.add_route("/v1/permissions/templates", resources.templates)
    app.add_route("/v1/permissions/templates/{template_id}", resources.template)
    app.add_route("/v1/permissions/templates/{template_id}/apply", resources.template_apply)
    app.add_route("/v1/permissions/check", resources.permission_check)

    app.add_route("/v1/resources/{resource_type}/{resource_id}", resources.resource_access)
    app.add_route(
        "/v1/resources/{resource_type}/{resource_id}/public", resources.resource_public
    )
    app.add_route(
        "/v1/resources/{resource_type}/{resource_id}/shares/{user_id}",
        resources.resource_share,
    )
    app.add_route(
        "/v1/resources/{resource_type}/{resource_id}/collaborators/{user_id}",
        resources.resource_collaborator,
    )
    return app
