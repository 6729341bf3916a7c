"""Authorization for managing who can reach a resource."""

from taskhub.application.ports import MembershipResolver, UnitOfWork
from taskhub.domain.entities import Resource
from taskhub.domain.exceptions import AccessDenied, NotAMember, ResourceNotFound, ValidationError
from taskhub.domain.value_objects import (
    Capability,
    CollaboratorRole,
    ResourceType,
    parse_object_id,
)


async def load_managed_resource(
    uow: UnitOfWork,
    resolver: MembershipResolver,
    actor_id: str,
    resource_type: str,
    resource_id: str,
    capability: Capability,
) -> Resource:
    """Load a resource the actor may manage sharing on.

    Owner, owner collaborator or admin of the resource's organization.
    """
    rid = parse_object_id(resource_id)
    rtype = ResourceType.parse(resource_type)
    resource = await uow.resources.get_by_id(rtype, rid)
    if resource is None:
        raise ResourceNotFound(rtype, rid)
    if not resource.supports(capability):
        raise ValidationError(f"{rtype} resources do not support {capability.name.lower()}")

    if resource.supports(Capability.OWNABLE) and resource.owner_id == actor_id:
        return resource
    if resource.supports(Capability.COLLABORATIVE):
        collaborator = resource.collaborator(actor_id)
        if collaborator is not None and collaborator.role == CollaboratorRole.OWNER:
            return resource
    if resource.supports(Capability.ORG_SCOPED) and resource.organization_id:
        try:
            resolved = await resolver.resolve(
                actor_id, resource.organization_id, resource.ref, uow=uow
            )
        except NotAMember:
            raise AccessDenied() from None
        if resolved.is_admin:
            return resource
    raise AccessDenied()
