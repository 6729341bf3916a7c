"""Resource entity - access metadata of a task, note, project or team."""

from dataclasses import dataclass, field
from datetime import datetime

from taskhub.domain.value_objects import (
    RESOURCE_CAPABILITIES,
    Capability,
    CollaboratorRole,
    ResourceRef,
    ResourceType,
)


@dataclass(frozen=True)
class Collaborator:
    user_id: str
    role: CollaboratorRole = CollaboratorRole.VIEWER


@dataclass
class Resource:
    """Access-relevant view of a resource.

    Which fields matter is decided by the capabilities of the resource type,
    not by probing for their presence.
    """

    id: str
    resource_type: ResourceType
    created_at: datetime
    updated_at: datetime
    title: str = ""
    owner_id: str | None = None
    organization_id: str | None = None
    is_shared: bool = False
    shared_with: frozenset[str] = field(default_factory=frozenset)
    collaborators: tuple[Collaborator, ...] = ()

    @property
    def capabilities(self) -> Capability:
        return RESOURCE_CAPABILITIES.get(self.resource_type, Capability.NONE)

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @property
    def ref(self) -> ResourceRef:
        return ResourceRef(resource_type=self.resource_type, resource_id=self.id)

    def collaborator(self, user_id: str) -> Collaborator | None:
        for c in self.collaborators:
            if c.user_id == user_id:
                return c
        return None
