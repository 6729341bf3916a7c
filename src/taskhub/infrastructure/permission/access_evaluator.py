"""Resource access evaluator - ownership, sharing, collaboration, organization."""

import structlog

from taskhub.application.dto.access import (
    AccessDecision,
    AccessGrant,
    AccessRequirement,
    ResolvedMembership,
)
from taskhub.application.dto.role_defaults import action_permission
from taskhub.application.ports import MembershipResolver, UnitOfWork
from taskhub.domain.entities import Resource
from taskhub.domain.exceptions import (
    AccessDenied,
    AuthorizationError,
    InsufficientPermission,
    InsufficientRole,
    InvalidOrganizationId,
    NotAMember,
    NotOrganizationMember,
    PermissionDenied,
    ResourceNotFound,
    RoleNotFound,
)
from taskhub.domain.value_objects import (
    BuiltinRole,
    Capability,
    CollaboratorGating,
    ResourceType,
    parse_object_id,
)

log = structlog.get_logger()


class ResourceAccessEvaluator:
    """Decides whether a user may act on a resource.

    Paths are tried in a fixed order and the first grant wins: owner, public,
    shared, collaborator, organization. Decisions are never cached.
    """

    def __init__(
        self,
        unit_of_work_factory,
        membership_resolver: MembershipResolver,
        collaborator_gating: CollaboratorGating = CollaboratorGating.STRICT,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = membership_resolver
        self._gating = collaborator_gating

    async def evaluate(
        self,
        user_id: str,
        resource: Resource,
        requirement: AccessRequirement | None = None,
        *,
        uow: UnitOfWork | None = None,
    ) -> AccessDecision:
        requirement = requirement or AccessRequirement()
        caps = resource.capabilities
        denial: AuthorizationError | None = None

        if Capability.OWNABLE in caps and resource.owner_id == user_id:
            return self._grant(user_id, resource, AccessGrant.OWNER)

        if Capability.SHAREABLE in caps:
            if resource.is_shared:
                return self._grant(user_id, resource, AccessGrant.PUBLIC)
            if user_id in resource.shared_with:
                return self._grant(user_id, resource, AccessGrant.SHARED)

        if Capability.COLLABORATIVE in caps:
            collaborator = resource.collaborator(user_id)
            if collaborator is not None:
                if self._gating == CollaboratorGating.LENIENT or collaborator.role.allows(
                    requirement.action
                ):
                    return self._grant(user_id, resource, AccessGrant.COLLABORATOR)
                denial = PermissionDenied(
                    f"Collaborator role {collaborator.role} does not allow {requirement.action}"
                )

        if Capability.ORG_SCOPED in caps and resource.organization_id:
            return await self._evaluate_organization(user_id, resource, requirement, uow)

        return self._deny(user_id, resource, denial or AccessDenied())

    async def evaluate_by_id(
        self,
        user_id: str,
        resource_type: str,
        resource_id: str,
        requirement: AccessRequirement | None = None,
    ) -> AccessDecision:
        """Load the resource and evaluate. Raises on malformed input or a missing resource."""
        resource_id = parse_object_id(resource_id)
        rtype = ResourceType.parse(resource_type)
        async with self._uow_factory() as uow:
            resource = await uow.resources.get_by_id(rtype, resource_id)
            if resource is None:
                raise ResourceNotFound(rtype, resource_id)
            return await self.evaluate(user_id, resource, requirement, uow=uow)

    async def _evaluate_organization(
        self,
        user_id: str,
        resource: Resource,
        requirement: AccessRequirement,
        uow: UnitOfWork | None,
    ) -> AccessDecision:
        try:
            membership = await self._resolver.resolve(
                user_id, resource.organization_id, resource.ref, uow=uow
            )
        except (NotAMember, InvalidOrganizationId):
            return self._deny(user_id, resource, NotOrganizationMember())
        except RoleNotFound as e:
            log.warning(
                "authz.stale_role",
                user_id=user_id,
                organization_id=resource.organization_id,
                error=e.message,
            )
            return self._deny(
                user_id,
                resource,
                AccessDenied("Your role in this resource's organization no longer exists"),
            )

        if membership.is_admin:
            return self._grant(user_id, resource, AccessGrant.ORGANIZATION, membership)
        if requirement.roles and not membership.has_role(requirement.roles):
            return self._deny(
                user_id, resource, InsufficientRole(requirement.roles), membership
            )
        permission = requirement.permission or action_permission(
            resource.resource_type, requirement.action
        )
        if permission is None:
            return self._deny(
                user_id, resource, InsufficientRole((BuiltinRole.ADMIN,)), membership
            )
        if not membership.permissions.allows(permission):
            return self._deny(
                user_id, resource, InsufficientPermission((permission,)), membership
            )
        return self._grant(user_id, resource, AccessGrant.ORGANIZATION, membership)

    def _grant(
        self,
        user_id: str,
        resource: Resource,
        grant: AccessGrant,
        membership: ResolvedMembership | None = None,
    ) -> AccessDecision:
        log.debug(
            "authz.granted",
            user_id=user_id,
            resource_type=str(resource.resource_type),
            resource_id=resource.id,
            grant=str(grant),
        )
        return AccessDecision(resource=resource, grant=grant, membership=membership)

    def _deny(
        self,
        user_id: str,
        resource: Resource,
        error: AuthorizationError,
        membership: ResolvedMembership | None = None,
    ) -> AccessDecision:
        log.info(
            "authz.denied",
            user_id=user_id,
            resource_type=str(resource.resource_type),
            resource_id=resource.id,
            code=error.code,
        )
        return AccessDecision(resource=resource, membership=membership, error=error)
