"""Application entry point and composition root."""

from datetime import timedelta

import structlog
from psycopg_pool import AsyncConnectionPool

from taskhub import __version__
from taskhub.application.dto.role_defaults import RoleDefaults
from taskhub.application.use_cases.membership.accept_invitation import (
    AcceptInvitationUseCase,
)
from taskhub.application.use_cases.membership.cancel_invitation import (
    CancelInvitationUseCase,
)
from taskhub.application.use_cases.membership.invite_member import (
    DEFAULT_INVITATION_TTL,
    InviteMemberUseCase,
)
from taskhub.application.use_cases.membership.leave_organization import (
    LeaveOrganizationUseCase,
)
from taskhub.application.use_cases.membership.remove_member import RemoveMemberUseCase
from taskhub.application.use_cases.membership.set_current_organization import (
    SetCurrentOrganizationUseCase,
)
from taskhub.application.use_cases.membership.update_membership import (
    UpdateMembershipUseCase,
)
from taskhub.application.use_cases.organization.create_organization import (
    CreateOrganizationUseCase,
)
from taskhub.application.use_cases.resource.publish_resource import PublishResourceUseCase
from taskhub.application.use_cases.resource.set_collaborator import SetCollaboratorUseCase
from taskhub.application.use_cases.resource.share_resource import ShareResourceUseCase
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
from taskhub.application.use_cases.template.apply_template import ApplyTemplateUseCase
from taskhub.application.use_cases.template.create_template import CreateTemplateUseCase
from taskhub.application.use_cases.template.delete_template import DeleteTemplateUseCase
from taskhub.application.use_cases.template.update_template import UpdateTemplateUseCase
from taskhub.config import Settings, get_settings
from taskhub.domain.value_objects import CollaboratorGating
from taskhub.infrastructure.auth.jwt_provider import JWTProvider
from taskhub.infrastructure.logging_config import configure_logging
from taskhub.infrastructure.permission.access_evaluator import ResourceAccessEvaluator
from taskhub.infrastructure.permission.membership_resolver import (
    OrganizationMembershipResolver,
)
from taskhub.infrastructure.permission.role_catalog import RoleCatalog
from taskhub.infrastructure.persistence.postgres.connection import create_pool
from taskhub.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from taskhub.interfaces.api.app import ApiResources, create_app
from taskhub.interfaces.api.middleware.auth import AuthMiddleware
from taskhub.interfaces.api.middleware.cors import CORSMiddleware
from taskhub.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from taskhub.interfaces.api.middleware.request_id import RequestIdMiddleware
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

log = structlog.get_logger()


def build_resources(
    uow_factory,
    role_defaults: RoleDefaults,
    collaborator_gating: CollaboratorGating = CollaboratorGating.STRICT,
    pool: AsyncConnectionPool | None = None,
    invitation_ttl: timedelta = DEFAULT_INVITATION_TTL,
) -> ApiResources:
    """Wire authorization services and use cases into API resources."""
    resolver = OrganizationMembershipResolver(uow_factory, RoleCatalog(role_defaults))
    evaluator = ResourceAccessEvaluator(uow_factory, resolver, collaborator_gating)

    def use_case(cls):
        return cls(unit_of_work_factory=uow_factory, membership_resolver=resolver)

    return ApiResources(
        health=HealthResource(pool),
        organizations=OrganizationsResource(
            CreateOrganizationUseCase(uow_factory, role_defaults)
        ),
        members=MembersResource(uow_factory, resolver),
        member=MemberResource(
            use_case(UpdateMembershipUseCase), use_case(RemoveMemberUseCase)
        ),
        leave=LeaveOrganizationResource(use_case(LeaveOrganizationUseCase)),
        invitations=OrganizationInvitationsResource(
            uow_factory,
            resolver,
            InviteMemberUseCase(uow_factory, resolver, invitation_ttl=invitation_ttl),
        ),
        invitation=OrganizationInvitationResource(use_case(CancelInvitationUseCase)),
        my_invitations=MyInvitationsResource(uow_factory),
        my_invitation=MyInvitationResource(
            AcceptInvitationUseCase(uow_factory, invitation_ttl=invitation_ttl),
            use_case(CancelInvitationUseCase),
        ),
        current_organization=CurrentOrganizationResource(
            use_case(SetCurrentOrganizationUseCase)
        ),
        roles=RolesResource(uow_factory, resolver, use_case(CreateRoleUseCase)),
        role=RoleResource(
            uow_factory, resolver, use_case(UpdateRoleUseCase), use_case(DeleteRoleUseCase)
        ),
        role_clone=RoleCloneResource(use_case(CloneRoleUseCase)),
        role_override=RoleResourceOverrideResource(
            use_case(SetResourceOverrideUseCase), use_case(RemoveResourceOverrideUseCase)
        ),
        templates=TemplatesResource(uow_factory, resolver, use_case(CreateTemplateUseCase)),
        template=TemplateResource(
            uow_factory,
            resolver,
            use_case(UpdateTemplateUseCase),
            use_case(DeleteTemplateUseCase),
        ),
        template_apply=TemplateApplyResource(use_case(ApplyTemplateUseCase)),
        permission_check=PermissionCheckResource(evaluator, resolver),
        resource_access=ResourceAccessResource(evaluator),
        resource_public=ResourcePublicResource(use_case(PublishResourceUseCase)),
        resource_share=ResourceShareResource(use_case(ShareResourceUseCase)),
        resource_collaborator=ResourceCollaboratorResource(use_case(SetCollaboratorUseCase)),
    )


def load_role_defaults(settings: Settings) -> RoleDefaults:
    if settings.role_defaults_path:
        return RoleDefaults.from_json_file(settings.role_defaults_path)
    return RoleDefaults.standard()


def create_taskhub_app(settings: Settings | None = None):
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, json=settings.log_json)

    pool = create_pool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    uow_factory = create_uow_factory(pool)
    resources = build_resources(
        uow_factory,
        load_role_defaults(settings),
        settings.collaborator_gating,
        pool=pool,
        invitation_ttl=timedelta(days=settings.invitation_ttl_days),
    )

    if not settings.jwt_secret:
        log.warning("auth.no_secret", detail="every bearer token will be rejected")

    app = create_app(
        resources,
        middleware=[
            CORSMiddleware(settings.cors_origin_list),
            PoolLifespanMiddleware(pool),
            RequestIdMiddleware(),
            AuthMiddleware(JWTProvider(settings.jwt_secret, settings.jwt_algorithm)),
        ],
        debug=settings.debug,
    )
    log.info(
        "app.created",
        version=__version__,
        environment=settings.environment,
        collaborator_gating=str(settings.collaborator_gating),
    )
    return app


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_taskhub_app(settings), host=settings.host, port=settings.port)


def main() -> None:
    """CLI entry point."""
    run_server()


if __name__ == "__main__":
    main()
