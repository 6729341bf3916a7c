"""Resource lookup shared by organization-scoped use cases."""

from taskhub.application.ports import UnitOfWork
from taskhub.domain.entities import Resource
from taskhub.domain.exceptions import ResourceNotFound
from taskhub.domain.value_objects import ResourceType, parse_object_id


async def get_organization_resource(
    uow: UnitOfWork, organization_id: str, resource_type: str, resource_id: str
) -> Resource:
    """Load a resource that belongs to organization_id, or raise ResourceNotFound."""
    rtype = ResourceType.parse(resource_type)
    rid = parse_object_id(resource_id)
    resource = await uow.resources.get_by_id(rtype, rid)
    if resource is None or resource.organization_id != organization_id:
        raise ResourceNotFound(rtype, rid)
    return resource
